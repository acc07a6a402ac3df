"""Sum server: answers sum requests over TCP or UDP."""

from __future__ import annotations

import argparse
import socketserver
import sys
from typing import Optional, Sequence, Tuple

from .handler import create_sum_response, form_failure_message
from .messages import DELIM, Message, MessageError, MessageType, Sum

MAX_DATAGRAM = 1024
DEFAULT_PORT = 8000

Address = Tuple[str, int]


def _log(text: str) -> None:
    print(text, file=sys.stderr)


def _failure(text: str) -> Optional[bytes]:
    _log(text)
    try:
        return form_failure_message(text)
    except MessageError as exc:
        _log(str(exc))
        return None


def handle_message_bytes(message: bytes) -> Optional[bytes]:
    """Answer one serialized request; returns the serialized reply."""
    try:
        parsed = Message.from_bytes(message)
    except MessageError as exc:
        return _failure(
            f"failed to handle message bytes: failed to handle new message: {exc}"
        )

    if parsed.header != MessageType.SUM:
        return _failure("unknown command")

    try:
        sum_message = Sum.from_bytes(parsed.body)
    except MessageError as exc:
        return _failure(
            f"failed to handle message bytes: failed to handle new message: {exc}"
        )

    try:
        return create_sum_response(sum_message)
    except MessageError as exc:
        return _failure(f"failed to create sum response{exc}")


class _TCPHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        while True:
            try:
                line = self.rfile.readline()
            except OSError:
                return
            if not line.endswith(DELIM):
                return
            response = handle_message_bytes(line) or b""
            try:
                self.wfile.write(response)
            except OSError as exc:
                _log(f"failed to write a tcp response{exc}")
                return


class _UDPHandler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        data, sock = self.request
        response = handle_message_bytes(data) or b""
        try:
            sock.sendto(response, self.client_address)
        except OSError as exc:
            _log(f"failed to write a udp response: {exc}")


class _TCPServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


class _UDPServer(socketserver.ThreadingUDPServer):
    daemon_threads = True
    max_packet_size = MAX_DATAGRAM


def _serve(server_cls, handler_cls, address: Address, name: str) -> None:
    try:
        server = server_cls(address, handler_cls)
    except OSError as exc:
        print("Error listening:", exc)
        return
    with server:
        host, port = address
        print(f"Server listening on {host}:{port}, {name} ", flush=True)
        server.serve_forever()


def serve_tcp(address: Address) -> None:
    """Serve newline-delimited requests over TCP until interrupted."""
    _serve(_TCPServer, _TCPHandler, address, "tcp")


def serve_udp(address: Address) -> None:
    """Serve one request per datagram over UDP until interrupted."""
    _serve(_UDPServer, _UDPHandler, address, "udp")


def run(port: int, protocol: str) -> None:
    """Start the listener for ``protocol`` on localhost:``port``."""
    address = ("localhost", port)
    if protocol == "tcp":
        serve_tcp(address)
    elif protocol == "udp":
        serve_udp(address)
    else:
        _log("Unknown protocol, aborting")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve sums of two numbers.")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--protocol", default="tcp")
    args = parser.parse_args(argv)
    try:
        run(args.port, args.protocol)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())