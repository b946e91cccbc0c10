from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

import httpx

from redseal.core import data_stream


log = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, something went wrong. Please try again!"


class DemoLimitReached(Exception):
    """The server answered 402: the demo allowance for this visitor is spent."""

    def __init__(self, detail: dict[str, Any] | None = None):
        super().__init__("demo limit reached")
        self.detail = detail or {}


class ChatStreamError(Exception):
    pass


def decode_stream_line(line: str) -> str | None:
    """Text carried by a `0:` frame, or None for every other line."""
    frame = data_stream.split_frame(line)
    if frame is None or frame[0] != data_stream.TEXT:
        return None
    return data_stream.decode_text(frame[1])


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class StreamingChatClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StreamingChatClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def stream_reply(
        self,
        messages: list[dict[str, str]],
        topic: str | None,
        on_delta: Callable[[str], None] | None = None,
    ) -> str:
        """POST the transcript and accumulate the streamed reply.

        `on_delta` receives the whole buffer after each fragment. Raises
        `DemoLimitReached` on 402 and `ChatStreamError` on any other failure.
        """

        buffer = ""
        try:
            with self._client.stream("POST", "/api/demo/chat", json={"messages": messages, "trade": topic}) as r:
                if r.status_code == 402:
                    r.read()
                    raise DemoLimitReached(_json_or_empty(r))
                if r.status_code >= 400:
                    raise ChatStreamError(f"chat request failed: HTTP_{r.status_code}")

                for line in r.iter_lines():
                    frame = data_stream.split_frame(line)
                    if frame is not None and frame[0] == data_stream.ERROR:
                        raise ChatStreamError(f"stream error: {data_stream.decode_text(frame[1])}")
                    text = decode_stream_line(line)
                    if text is None:
                        continue
                    buffer += text
                    if on_delta is not None:
                        on_delta(buffer)
        except httpx.HTTPError as e:
            log.warning("demo chat transport failure: %s", type(e).__name__)
            raise ChatStreamError(f"chat request failed: {type(e).__name__}") from e
        return buffer
