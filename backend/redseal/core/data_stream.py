"""Line framing for streamed chat replies.

Each line is `<type>:<json>\\n`. Type `0` carries a text fragment as a JSON
string, `3` an error message, `d` the finish metadata.
"""

from __future__ import annotations

import json


TEXT = "0"
ERROR = "3"
FINISH = "d"


def text_frame(fragment: str) -> str:
    return f"{TEXT}:{json.dumps(fragment, ensure_ascii=False)}\n"


def error_frame(message: str) -> str:
    return f"{ERROR}:{json.dumps(message, ensure_ascii=False)}\n"


def finish_frame(reason: str = "stop") -> str:
    return f"{FINISH}:{json.dumps({'finishReason': reason}, separators=(',', ':'))}\n"


def split_frame(line: str) -> tuple[str, str] | None:
    s = (line or "").rstrip("\r\n")
    kind, sep, payload = s.partition(":")
    if not sep or not kind:
        return None
    return kind, payload


def decode_text(payload: str) -> str:
    """JSON-unescape a text payload; fall back to stripping the surrounding quotes."""
    try:
        value = json.loads(payload)
    except ValueError:
        return payload.strip().strip('"')
    return value if isinstance(value, str) else str(value)
