"""Client side of the sum protocol: sending requests and reading replies."""

from __future__ import annotations

import socket
from typing import Tuple, Union

from .messages import (
    FailureResponse,
    Message,
    MessageError,
    MessageType,
    SumResponse,
    add_delim,
    new_sum_message_serialized,
)

MAX_RESPONSE = 1024
PROTOCOLS = ("tcp", "udp")


class ControllerError(Exception):
    """Raised when a request cannot be sent or its reply cannot be read."""


def _split_address(address: str) -> Tuple[str, int]:
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    host = host.strip("[]") or "127.0.0.1"
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port {port_text!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"invalid port {port_text!r}")
    return host, port


class MessageController:
    """Sends sum requests to a server over TCP or UDP."""

    def __init__(self, protocol: str, address: str) -> None:
        if protocol.lower() not in PROTOCOLS:
            raise ControllerError("no such a protocol")
        self.protocol = protocol
        self.address = address

    def __repr__(self) -> str:
        return f"MessageController(protocol={self.protocol!r}, address={self.address!r})"

    @property
    def _is_tcp(self) -> bool:
        return self.protocol.lower() == "tcp"

    def _dial(self) -> socket.socket:
        host, port = _split_address(self.address)
        if self._is_tcp:
            return socket.create_connection((host, port))
        family, kind, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_DGRAM
        )[0]
        sock = socket.socket(family, kind, proto)
        try:
            sock.connect(sockaddr)
        except OSError:
            sock.close()
            raise
        return sock

    def send_sum(self, num1: int, num2: int) -> bytes:
        """Send a sum request and return the raw reply."""
        try:
            sock = self._dial()
        except (OSError, ValueError) as exc:
            raise ControllerError(f"failed to dial {self.address}: {exc}") from exc

        with sock:
            try:
                payload = new_sum_message_serialized(num1, num2)
            except MessageError as exc:
                raise ControllerError(
                    f"failed to create serialized sum message: {exc}"
                ) from exc

            try:
                sock.sendall(add_delim(payload))
            except OSError as exc:
                raise ControllerError(f"failed to send sum message: {exc}") from exc

            try:
                reply = sock.recv(MAX_RESPONSE)
            except OSError as exc:
                raise ControllerError(f"failed to receive a response: {exc}") from exc
            if not reply and self._is_tcp:
                raise ControllerError("failed to receive a response: EOF")
            return reply


def handle_response(data: bytes) -> Union[SumResponse, FailureResponse]:
    """Decode a reply into either a sum result or a failure report."""
    try:
        received = Message.from_bytes(data)
    except MessageError as exc:
        raise ControllerError(f"failed to parse received message: {exc}") from exc

    if received.header == MessageType.SUM_RESPONSE:
        try:
            return SumResponse.from_bytes(received.body)
        except MessageError as exc:
            raise ControllerError(f"failed to parse sum body: {exc}") from exc
    if received.header == MessageType.FAILURE:
        try:
            return FailureResponse.from_bytes(received.body)
        except MessageError as exc:
            raise ControllerError(f"failed to parse failure body: {exc}") from exc
    raise ControllerError("failed to handle unknown message")