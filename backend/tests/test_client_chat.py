import json

import httpx
import pytest

from redseal.client.chat import ChatStreamError, DemoLimitReached, StreamingChatClient, decode_stream_line
from redseal.core import data_stream


def _client(handler) -> StreamingChatClient:
    return StreamingChatClient("http://hub.test", transport=httpx.MockTransport(handler))


def _stream_body(*fragments: str, finish: bool = True) -> bytes:
    out = "".join(data_stream.text_frame(f) for f in fragments)
    if finish:
        out += data_stream.finish_frame()
    return out.encode("utf-8")


def test_decode_stream_line():
    assert decode_stream_line('0:"Hello"') == "Hello"
    assert decode_stream_line('0:"line\\nbreak \\"quoted\\""') == 'line\nbreak "quoted"'
    assert decode_stream_line('0:"unterminated') == "unterminated"
    assert decode_stream_line('d:{"finishReason":"stop"}') is None
    assert decode_stream_line("") is None
    assert decode_stream_line("garbage") is None


def test_frames_round_trip_through_split():
    kind, payload = data_stream.split_frame(data_stream.error_frame("boom"))
    assert kind == data_stream.ERROR
    assert data_stream.decode_text(payload) == "boom"


def test_stream_reply_accumulates_and_reports_buffer():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=_stream_body("Ohm's ", "law ", "is V=IR."))

    buffers = []
    with _client(handler) as c:
        full = c.stream_reply([{"role": "user", "content": "explain"}], "Electrician", on_delta=buffers.append)

    assert full == "Ohm's law is V=IR."
    assert buffers == ["Ohm's ", "Ohm's law ", "Ohm's law is V=IR."]
    assert seen["body"] == {"messages": [{"role": "user", "content": "explain"}], "trade": "Electrician"}


def test_stream_reply_limit_reached():
    def handler(request):
        return httpx.Response(402, json={"error_code": "LIMIT_EXCEEDED", "limit": 5})

    with pytest.raises(DemoLimitReached) as ei:
        _client(handler).stream_reply([{"role": "user", "content": "x"}], None)
    assert ei.value.detail["limit"] == 5


def test_stream_reply_http_error():
    with pytest.raises(ChatStreamError):
        _client(lambda request: httpx.Response(500, json={})).stream_reply([], None)


def test_stream_reply_error_frame():
    def handler(request):
        body = data_stream.text_frame("partial") + data_stream.error_frame("stream interrupted")
        return httpx.Response(200, content=body.encode("utf-8"))

    with pytest.raises(ChatStreamError):
        _client(handler).stream_reply([], None)


def test_stream_reply_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ChatStreamError):
        _client(handler).stream_reply([], None)


def test_stream_reply_empty_stream():
    def handler(request):
        return httpx.Response(200, content=data_stream.finish_frame().encode("utf-8"))

    assert _client(handler).stream_reply([], None) == ""
