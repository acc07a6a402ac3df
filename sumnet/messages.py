"""Wire messages exchanged between the sum client and server.

Every message travels as a JSON envelope ``{"header": <type>, "body": <base64>}``
whose body is itself the JSON encoding of the payload.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
DELIM = b"\n"

_MISSING = object()
_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


class MessageType(IntEnum):
    """Kinds of payload an envelope may carry."""

    SUM = 0
    SUM_RESPONSE = 1
    FAILURE = 2


class MessageError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


def _dumps(obj: Any) -> bytes:
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    # Lone surrogates cannot be sent as UTF-8; substitute U+FFFD for them.
    text = text.encode("utf-8", "surrogatepass").decode("utf-8", "replace")
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return text.encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise MessageError(f"invalid JSON value {name}")


def _loads_object(data: bytes, kind: str) -> dict:
    try:
        text = bytes(data).decode("utf-8", "replace")
    except TypeError as exc:
        raise MessageError(f"{kind} data must be bytes") from exc
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise MessageError(f"invalid {kind} JSON: {exc}") from exc
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MessageError(
            f"cannot decode JSON {type(value).__name__} into {kind}"
        )
    return value


def _field(obj: dict, name: str) -> Any:
    found = _MISSING
    for key, value in obj.items():
        if key.casefold() == name.casefold():
            found = value
    return found


def _check_int64(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MessageError(f"{what} must be an integer, got {value!r}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise MessageError(f"{what} {value} does not fit in a 64-bit integer")
    return value


def _int_field(obj: dict, name: str, kind: str) -> int:
    value = _field(obj, name)
    if value is _MISSING or value is None:
        return 0
    return _check_int64(value, f"{kind}.{name}")


def _str_field(obj: dict, name: str, kind: str) -> str:
    value = _field(obj, name)
    if value is _MISSING or value is None:
        return ""
    if not isinstance(value, str):
        raise MessageError(f"{kind}.{name} must be a string, got {value!r}")
    return value


def _bytes_field(obj: dict, name: str, kind: str) -> bytes:
    value = _field(obj, name)
    if value is _MISSING or value is None:
        return b""
    if not isinstance(value, str):
        raise MessageError(f"{kind}.{name} must be a base64 string, got {value!r}")
    cleaned = value.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MessageError(f"{kind}.{name} is not valid base64: {exc}") from exc


@dataclass(frozen=True)
class Message:
    """The envelope around every payload."""

    header: Union[MessageType, int]
    body: bytes = b""

    def __post_init__(self) -> None:
        header = _check_int64(self.header, "header")
        try:
            header = MessageType(header)
        except ValueError:
            pass
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "body", bytes(self.body))

    def to_bytes(self) -> bytes:
        """Encode the envelope as compact JSON."""
        return _dumps(
            {
                "header": int(self.header),
                "body": base64.b64encode(self.body).decode("ascii"),
            }
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Message":
        """Decode an envelope; unknown header values are kept as plain ints."""
        obj = _loads_object(data, "Message")
        return cls(
            header=_int_field(obj, "header", "Message"),
            body=_bytes_field(obj, "body", "Message"),
        )


@dataclass(frozen=True)
class Sum:
    """A request to add two numbers."""

    val1: int = 0
    val2: int = 0

    def __post_init__(self) -> None:
        _check_int64(self.val1, "val1")
        _check_int64(self.val2, "val2")

    def to_bytes(self) -> bytes:
        return _dumps({"val1": self.val1, "val2": self.val2})

    @classmethod
    def from_bytes(cls, data: bytes) -> "Sum":
        obj = _loads_object(data, "Sum")
        return cls(
            val1=_int_field(obj, "val1", "Sum"),
            val2=_int_field(obj, "val2", "Sum"),
        )


@dataclass(frozen=True)
class SumResponse:
    """The server's answer to a sum request."""

    result: int = 0

    def __post_init__(self) -> None:
        _check_int64(self.result, "result")

    def to_bytes(self) -> bytes:
        return _dumps({"result": self.result})

    @classmethod
    def from_bytes(cls, data: bytes) -> "SumResponse":
        obj = _loads_object(data, "SumResponse")
        return cls(result=_int_field(obj, "result", "SumResponse"))


@dataclass(frozen=True)
class FailureResponse:
    """An error report; its text travels under the ``result`` key."""

    message: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.message, str):
            raise MessageError(f"message must be a string, got {self.message!r}")

    def to_bytes(self) -> bytes:
        return _dumps({"result": self.message})

    @classmethod
    def from_bytes(cls, data: bytes) -> "FailureResponse":
        obj = _loads_object(data, "FailureResponse")
        return cls(message=_str_field(obj, "result", "FailureResponse"))


def add_delim(data: bytes) -> bytes:
    """Append the end-of-message delimiter."""
    return bytes(data) + DELIM


def new_sum_message_serialized(val1: int, val2: int) -> bytes:
    """Build the serialized envelope of a sum request."""
    body = Sum(val1=val1, val2=val2).to_bytes()
    return Message(header=MessageType.SUM, body=body).to_bytes()


def new_failure_message_serialized(failure_text: str) -> bytes:
    """Build the serialized envelope of a failure report."""
    body = FailureResponse(message=failure_text).to_bytes()
    return Message(header=MessageType.FAILURE, body=body).to_bytes()