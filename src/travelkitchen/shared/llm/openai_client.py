from __future__ import annotations

import json
import logging
from typing import AsyncGenerator, Dict, List, Optional

import httpx

from travelkitchen.shared.config.settings import settings
from travelkitchen.shared.concurrency import LLM_STREAM_SEMAPHORE

log = logging.getLogger("openai")


class LLMNotConfiguredError(RuntimeError):
    """Raised when no OpenAI API key is configured."""


def _chat_url() -> str:
    return f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions"


def _headers() -> Dict[str, str]:
    if not settings.OPENAI_API_KEY:
        raise LLMNotConfiguredError("OPENAI_API_KEY is not set")
    return {
        "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
        "Content-Type": "application/json",
    }


def build_messages(system: str, history: List[Dict[str, str]]) -> List[Dict[str, str]]:
    """Prepend a system prompt to user/assistant turns, dropping anything else."""
    messages: List[Dict[str, str]] = [{"role": "system", "content": system}]
    for m in history or []:
        role = m.get("role")
        content = m.get("content")
        if role in ("user", "assistant") and content:
            messages.append({"role": role, "content": content})
    return messages


async def stream_chat(
    messages: List[Dict[str, str]],
    *,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    request_timeout: Optional[int] = None,
) -> AsyncGenerator[str, None]:
    """
    This function streams chat completions from the OpenAI API.
    """
    payload = {
        "model": (model or settings.CHAT_MODEL),
        "messages": messages,
        "temperature": temperature if temperature is not None else settings.TEMPERATURE,
        "stream": True,
        "max_tokens": max_tokens if max_tokens is not None else settings.MAX_TOKENS,
    }
    headers = _headers()
    timeout = httpx.Timeout(request_timeout or settings.LLM_REQUEST_TIMEOUT)

    async with LLM_STREAM_SEMAPHORE:
        async with httpx.AsyncClient(timeout=timeout) as client:
            async with client.stream("POST", _chat_url(), headers=headers, json=payload) as resp:
                resp.raise_for_status()
                async for line in resp.aiter_lines():
                    if not line or not line.startswith("data: "):
                        continue
                    data = line[len("data: "):].strip()
                    if data == "[DONE]":
                        break
                    try:
                        j = json.loads(data)
                        delta = j["choices"][0].get("delta", {})
                    except (json.JSONDecodeError, KeyError, IndexError):
                        log.debug("skipping malformed stream line: %s", data[:200])
                        continue
                    tok = delta.get("content")
                    if tok:
                        yield tok


async def complete_chat(
    messages: List[Dict[str, str]],
    *,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    request_timeout: Optional[int] = None,
) -> str:
    """
    This function completes a chat interaction by aggregating streamed tokens.
    """
    buf: List[str] = []
    async for tok in stream_chat(messages, model=model, temperature=temperature, max_tokens=max_tokens, request_timeout=request_timeout):
        if tok:
            buf.append(tok)
    return "".join(buf)
