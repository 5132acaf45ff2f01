from __future__ import annotations

import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

from travelkitchen.shared.llm.model_output import (
    ModelOutputParseError,
    ModelOutputSchemaError,
    parse_model_output,
)
from travelkitchen.shared.llm.openai_client import complete_chat

log = logging.getLogger("generation")

M = TypeVar("M", bound=BaseModel)


async def generate_structured(
    system: str,
    prompt: str,
    model_cls: Type[M],
    *,
    what: str,
    temperature: Optional[float] = None,
) -> M:
    """
    One model round-trip: system + user prompt in, validated `model_cls` out.

    Failures are logged with the raw reply (parse) or the validation error
    (schema) and re-raised for the route to report.
    """
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]
    text = await complete_chat(messages, temperature=temperature)
    try:
        return parse_model_output(text, model_cls)
    except ModelOutputParseError as e:
        log.error("Failed to parse %s response: %r", what, e.raw_text)
        raise
    except ModelOutputSchemaError as e:
        log.error("Invalid %s structure: %s", what, e.error)
        raise
