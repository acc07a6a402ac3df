"""Server-side builders of response messages."""

from __future__ import annotations

from .messages import (
    INT64_MAX,
    INT64_MIN,
    Message,
    MessageError,
    MessageType,
    Sum,
    SumResponse,
    new_failure_message_serialized,
)


def _wrap_int64(value: int) -> int:
    span = INT64_MAX - INT64_MIN + 1
    return (value - INT64_MIN) % span + INT64_MIN


def form_failure_message(message_text: str) -> bytes:
    """Serialize a failure report carrying ``message_text``."""
    try:
        return new_failure_message_serialized(message_text)
    except MessageError as exc:
        raise MessageError(f"Failed to serialize failure message: {exc}") from exc


def create_sum_response(sum_message: Sum) -> bytes:
    """Serialize the response to a sum request; the sum wraps as a 64-bit integer."""
    result = _wrap_int64(sum_message.val1 + sum_message.val2)
    try:
        body = SumResponse(result=result).to_bytes()
    except MessageError as exc:
        raise MessageError(f"Failed to serialize sum body response: {exc}") from exc
    return Message(header=MessageType.SUM_RESPONSE, body=body).to_bytes()