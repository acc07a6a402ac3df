import socket
import threading

import pytest

from sumnet.controller import ControllerError, MessageController, handle_response
from sumnet.handler import form_failure_message
from sumnet.messages import FailureResponse, Message, MessageType, SumResponse
from sumnet.server import serve_tcp, serve_udp


def _free_port(kind):
    with socket.socket(socket.AF_INET, kind) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(scope="module")
def tcp_port():
    port = _free_port(socket.SOCK_STREAM)
    threading.Thread(target=serve_tcp, args=(("127.0.0.1", port),), daemon=True).start()
    return port


@pytest.fixture(scope="module")
def udp_port():
    port = _free_port(socket.SOCK_DGRAM)
    threading.Thread(target=serve_udp, args=(("127.0.0.1", port),), daemon=True).start()
    return port


def _send_with_retry(controller, a, b):
    last = None
    for _ in range(100):
        try:
            return controller.send_sum(a, b)
        except ControllerError as exc:
            last = exc
            threading.Event().wait(0.05)
    raise last


def test_unknown_protocol_is_rejected():
    with pytest.raises(ControllerError, match="no such a protocol"):
        MessageController("ftp", ":8000")


def test_protocol_case_is_kept():
    controller = MessageController("TCP", ":8000")
    assert controller.protocol == "TCP"
    assert controller.address == ":8000"


def test_handle_sum_response():
    data = Message(MessageType.SUM_RESPONSE, SumResponse(42).to_bytes()).to_bytes()
    assert handle_response(data) == SumResponse(42)


def test_handle_failure_response():
    assert handle_response(form_failure_message("boom")) == FailureResponse("boom")


def test_handle_invalid_json():
    with pytest.raises(ControllerError, match="failed to parse received message"):
        handle_response(b"not json")


def test_handle_unknown_header():
    with pytest.raises(ControllerError, match="failed to handle unknown message"):
        handle_response(Message(MessageType.SUM, b"{}").to_bytes())


def test_handle_empty_sum_body():
    with pytest.raises(ControllerError, match="failed to parse sum body"):
        handle_response(Message(MessageType.SUM_RESPONSE).to_bytes())


def test_handle_bad_failure_body():
    with pytest.raises(ControllerError, match="failed to parse failure body"):
        handle_response(Message(MessageType.FAILURE, b"[1]").to_bytes())


def test_send_sum_over_tcp(tcp_port):
    controller = MessageController("tcp", f"127.0.0.1:{tcp_port}")
    reply = _send_with_retry(controller, 20, 22)
    assert handle_response(reply) == SumResponse(20 + 22)


def test_send_sum_over_udp(udp_port):
    controller = MessageController("udp", f"127.0.0.1:{udp_port}")
    reply = _send_with_retry(controller, -5, 5)
    assert handle_response(reply) == SumResponse(0)


def test_dial_failure_is_reported():
    port = _free_port(socket.SOCK_STREAM)
    controller = MessageController("tcp", f"127.0.0.1:{port}")
    with pytest.raises(ControllerError, match="failed to dial"):
        controller.send_sum(1, 2)


def test_bad_address_is_reported():
    controller = MessageController("tcp", "no-port-here")
    with pytest.raises(ControllerError, match="failed to dial no-port-here"):
        controller.send_sum(1, 2)