class NotFoundError(LookupError):
    """The document does not exist or is not visible to the caller."""


class NotAuthorizedError(PermissionError):
    """The document exists but belongs to someone else."""
