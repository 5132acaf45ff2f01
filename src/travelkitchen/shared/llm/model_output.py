"""
Turns free-text model replies into validated pydantic objects.

Models are asked for bare JSON but often wrap it in a markdown fence. The
reply is cleaned with `strip_code_fences`, parsed, then validated against the
expected response model. Either step can fail with its own exception so
callers can log the two cases differently while reporting the same retryable
error to the client.
"""
from __future__ import annotations

import json
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_FENCE = "```"
_JSON_FENCE = "```json"


class ModelOutputError(Exception):
    """Base class for unusable model replies."""


class ModelOutputParseError(ModelOutputError):
    def __init__(self, raw_text: str, cause: Exception):
        super().__init__(f"model reply is not valid JSON: {cause}")
        self.raw_text = raw_text
        self.cause = cause


class ModelOutputSchemaError(ModelOutputError):
    def __init__(self, raw_text: str, error: ValidationError):
        super().__init__(f"model reply does not match {error.title}: {error.error_count()} error(s)")
        self.raw_text = raw_text
        self.error = error


def strip_code_fences(text: str) -> str:
    cleaned = (text or "").strip()
    if cleaned.startswith(_JSON_FENCE):
        cleaned = cleaned[len(_JSON_FENCE):]
    elif cleaned.startswith(_FENCE):
        cleaned = cleaned[len(_FENCE):]
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[:-len(_FENCE)]
    return cleaned.strip()


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def loads_json(text):
    """json.loads without the NaN / Infinity / -Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def parse_model_output(text: str, model_cls: Type[M]) -> M:
    """
    Clean, parse and strictly validate a model reply.

    Raises ModelOutputParseError when the cleaned text is not JSON and
    ModelOutputSchemaError when the JSON does not fit `model_cls`.
    """
    try:
        data = loads_json(strip_code_fences(text))
    except ValueError as e:
        raise ModelOutputParseError(text, e) from e

    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise ModelOutputSchemaError(text, e) from e
