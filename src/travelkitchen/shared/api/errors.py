from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from travelkitchen.shared.llm.model_output import ModelOutputParseError, ModelOutputSchemaError, loads_json
from travelkitchen.shared.persistence.errors import NotAuthorizedError, NotFoundError

log = logging.getLogger("api")

M = TypeVar("M", bound=BaseModel)

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


class ApiError(Exception):
    """An error rendered to the client as {"error": ..., "details": ...}."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_response(self) -> JSONResponse:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return JSONResponse(status_code=self.status_code, content=body)


def flatten_validation_error(error: ValidationError) -> Dict[str, Any]:
    """
    Group pydantic errors by top-level field.

    Nested locations are kept in the message ("steps.0.title: Field required").
    Errors without a location (model-level validators) land in formErrors.
    """
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}
    for err in error.errors(include_url=False):
        loc = [str(p) for p in err.get("loc", ())]
        msg = err.get("msg", "Invalid value")
        if not loc:
            form_errors.append(msg)
            continue
        if len(loc) > 1:
            msg = f"{'.'.join(loc)}: {msg}"
        field_errors.setdefault(loc[0], []).append(msg)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


async def read_json_body(request: Request, message: str) -> Any:
    raw = await request.body()
    try:
        return loads_json(raw or b"null")
    except ValueError:
        raise ApiError(400, message, {"formErrors": ["Request body must be valid JSON"], "fieldErrors": {}})


def validate_payload(model_cls: Type[M], body: Any, message: str) -> M:
    try:
        return model_cls.model_validate(body)
    except ValidationError as e:
        raise ApiError(400, message, flatten_validation_error(e)) from e


@contextmanager
def generation_errors(what: str, *, parse_message: str, schema_message: str) -> Iterator[None]:
    """
    Map failures of a model round-trip to the client-facing 500 messages.

    Parse and schema failures were already logged with their payloads.
    """
    try:
        yield
    except ApiError:
        raise
    except ModelOutputParseError:
        raise ApiError(500, parse_message) from None
    except ModelOutputSchemaError:
        raise ApiError(500, schema_message) from None
    except Exception:
        log.exception("%s error", what)
        raise ApiError(500, UNEXPECTED_ERROR) from None


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc) or "Not found"})


async def _not_authorized_handler(request: Request, exc: NotAuthorizedError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": str(exc) or "Not authorized"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(NotAuthorizedError, _not_authorized_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
