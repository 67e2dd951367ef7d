"""Server-sent events framing used by the change stream and its clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class SSEMessage:
    event: str
    data: str
    id: Optional[str] = None


def format_sse(data: str, *, event: Optional[str] = None, id: Optional[str] = None) -> str:
    lines = []
    if id is not None:
        lines.append(f"id: {id}")
    if event is not None:
        lines.append(f"event: {event}")
    for chunk in data.splitlines() or [""]:
        lines.append(f"data: {chunk}")
    return "\n".join(lines) + "\n\n"


def format_comment(text: str) -> str:
    return f": {text}\n\n"


def parse_sse(lines: Iterable[str]) -> Iterator[SSEMessage]:
    """Turn a stream of decoded lines into messages (comments are skipped)."""
    event = "message"
    data: list[str] = []
    last_id: Optional[str] = None

    for raw in lines:
        line = raw.rstrip("\r\n") if raw is not None else ""
        if not line:
            if data:
                yield SSEMessage(event=event, data="\n".join(data), id=last_id)
            event = "message"
            data = []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
        elif field == "id":
            last_id = value

    if data:
        yield SSEMessage(event=event, data="\n".join(data), id=last_id)
