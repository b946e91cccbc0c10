from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any

import httpx

from redseal.core.config import settings


log = logging.getLogger(__name__)


class LlmError(RuntimeError):
    pass


class LlmNotConfigured(LlmError):
    pass


def _token() -> str:
    token = (settings.llm_api_key or "").strip()
    if not token:
        raise LlmNotConfigured("missing_token")
    return token


def _headers() -> dict[str, str]:
    headers: dict[str, str] = {"Authorization": f"Bearer {_token()}"}
    referer = str(settings.llm_http_referer or "").strip()
    app_title = str(settings.llm_app_title or "").strip()
    if referer:
        headers["HTTP-Referer"] = referer
    if app_title:
        headers["X-Title"] = app_title
    return headers


def _url() -> str:
    return str(settings.llm_base_url or "").rstrip("/") + "/chat/completions"


def _timeout(read_seconds: float | None = None) -> httpx.Timeout:
    read_s = float(read_seconds) if read_seconds is not None else float(settings.llm_timeout_read)
    return httpx.Timeout(
        connect=float(settings.llm_timeout_connect),
        read=read_s,
        write=float(settings.llm_timeout_write),
        pool=3.0,
    )


def _describe_http_error(e: Exception) -> str:
    status = None
    try:
        resp = getattr(e, "response", None)
        status = int(getattr(resp, "status_code", None) or 0) or None
    except Exception:
        status = None
    return f"request_failed:{type(e).__name__}{(':HTTP_' + str(status)) if status else ''}"


def parse_sse_delta(line: str) -> str | None:
    """Return the text delta carried by one `data:` line of an OpenAI-style SSE stream."""
    s = (line or "").strip()
    if not s.startswith("data:"):
        return None
    body = s[len("data:") :].strip()
    if not body or body == "[DONE]":
        return None
    try:
        obj = json.loads(body)
    except ValueError:
        return None
    try:
        choices = obj.get("choices") or []
        if not choices:
            return None
        content = (choices[0] or {}).get("delta", {}).get("content")
    except AttributeError:
        return None
    return content if isinstance(content, str) and content else None


def stream_chat_completion(
    *,
    messages: list[dict[str, str]],
    system_prompt: str,
    model: str | None = None,
    temperature: float | None = None,
) -> Iterator[str]:
    """Yield text deltas from a streamed chat completion.

    Connection and HTTP errors surface as `LlmError` on the first `next()`,
    so callers can prime the generator before committing to a response.
    """

    headers = _headers()
    payload = {
        "model": (str(model).strip() if model else "") or str(settings.llm_chat_model),
        "stream": True,
        "messages": [{"role": "system", "content": system_prompt}, *messages],
        "temperature": float(temperature) if temperature is not None else float(settings.llm_chat_temperature),
    }

    try:
        with httpx.Client(timeout=_timeout()) as client:
            with client.stream("POST", _url(), json=payload, headers=headers) as r:
                r.raise_for_status()
                for line in r.iter_lines():
                    delta = parse_sse_delta(line)
                    if delta:
                        yield delta
    except httpx.HTTPError as e:
        log.warning("llm stream failed: %s", _describe_http_error(e))
        raise LlmError(_describe_http_error(e)) from e


def complete_chat(
    *,
    messages: list[dict[str, str]],
    system_prompt: str | None = None,
    model: str | None = None,
    temperature: float | None = None,
    debug_out: dict[str, Any] | None = None,
) -> str:
    """Single non-streamed completion; returns the assistant content or "" on failure."""

    def _set_debug(error: str) -> None:
        if debug_out is None:
            return
        debug_out["error"] = error

    try:
        headers = _headers()
    except LlmNotConfigured:
        _set_debug("missing_token")
        return ""

    msgs: list[dict[str, str]] = []
    if system_prompt:
        msgs.append({"role": "system", "content": system_prompt})
    msgs.extend(messages)

    payload = {
        "model": (str(model).strip() if model else "") or str(settings.llm_quiz_model),
        "stream": False,
        "messages": msgs,
        "temperature": float(temperature) if temperature is not None else float(settings.llm_quiz_temperature),
    }

    try:
        with httpx.Client(timeout=_timeout()) as client:
            r = client.post(_url(), json=payload, headers=headers)
            r.raise_for_status()
            data = r.json()
    except Exception as e:
        if debug_out is not None:
            resp = getattr(e, "response", None)
            body = getattr(resp, "text", None)
            if isinstance(body, str) and body:
                debug_out["http_body"] = body[:600]
        _set_debug(_describe_http_error(e))
        log.warning("llm completion failed: %s", _describe_http_error(e))
        return ""

    content = None
    try:
        choices = (data or {}).get("choices") or []
        if choices:
            content = (choices[0] or {}).get("message", {}).get("content")
    except Exception:
        content = None

    return content if isinstance(content, str) else ""
