import io
from unittest import mock

import pytest

from sumnet.cli import CliController, main
from sumnet.controller import ControllerError
from sumnet.handler import create_sum_response, form_failure_message
from sumnet.messages import Sum


class _StubNet:
    protocol = "tcp"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def send_sum(self, num1, num2):
        self.calls.append((num1, num2))
        if self.error is not None:
            raise self.error
        if self.reply is not None:
            return self.reply
        return create_sum_response(Sum(num1, num2))


def _lines(*lines):
    it = iter(lines)

    def read():
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read


def _cli(net, *lines):
    out = io.StringIO()
    return CliController(net, os_name="plan9", input_func=_lines(*lines), output=out), out


def test_successful_round_prints_result():
    net = _StubNet()
    cli, out = _cli(net, "2", "3", "next")
    assert cli.run_once("") == ""
    assert net.calls == [(2, 3)]
    assert f"Result: 2 + 3 = {2 + 3}" in out.getvalue()


def test_numbers_on_one_line():
    net = _StubNet()
    cli, out = _cli(net, "  -4 9 ", "go")
    assert cli.run_once("") == ""
    assert net.calls == [(-4, 9)]


def test_start_stops_at_end_of_input():
    net = _StubNet()
    cli, out = _cli(net, "1", "1", "x", "6", "7", "y")
    cli.start()
    assert net.calls == [(1, 1), (6, 7)]
    assert "Protocol: tcp" in out.getvalue()


@pytest.mark.parametrize("bad", ["abc", "1.5", "9223372036854775808", "1_000"])
def test_bad_first_number(bad):
    cli, _ = _cli(_StubNet(), bad)
    assert cli.run_once("") == "you need to enter a number for the first value"


def test_bad_second_number():
    cli, _ = _cli(_StubNet(), "1", "two")
    assert cli.run_once("") == "you need to enter a number for the second value"


def test_send_error_is_reported():
    cli, _ = _cli(_StubNet(error=ControllerError("down")), "1", "2")
    assert cli.run_once("") == "failed to send sum message: down"


def test_bad_reply_is_reported():
    cli, _ = _cli(_StubNet(reply=b"garbage"), "1", "2")
    assert cli.run_once("").startswith(
        "failed to handle sum response: failed to parse received message"
    )


def test_server_failure_is_reported():
    cli, _ = _cli(_StubNet(reply=form_failure_message("boom")), "1", "2")
    assert cli.run_once("") == "server returned an error: boom"


def test_previous_error_is_shown():
    cli, out = _cli(_StubNet())
    with pytest.raises(EOFError):
        cli.run_once("oops")
    assert "An error occurred: oops" in out.getvalue()


def test_clear_console_fallback_prints_blank_lines():
    cli, out = _cli(_StubNet())
    cli.clear_console()
    assert out.getvalue() == "\n\n\n"


@mock.patch("sumnet.cli.subprocess.run")
def test_clear_console_on_windows(run):
    out = io.StringIO()
    cli = CliController(
        _StubNet(), os_name="windows", input_func=_lines("2", "3", "x"), output=out
    )
    cli.clear_console()
    assert run.call_args_list[0][0][0] == ["cmd", "/c", "cls"]
    assert cli.run_once("") == ""
    assert "\n\n\n" not in out.getvalue().split("Sum of two numbers")[0]


@mock.patch("sumnet.cli.subprocess.run")
def test_clear_console_on_linux(run):
    out = io.StringIO()
    cli = CliController(
        _StubNet(), os_name="linux", input_func=_lines("4", "5", "x"), output=out
    )
    cli.clear_console()
    assert run.call_args_list[0][0][0] == ["clear"]
    assert cli.run_once("") == ""
    assert "Result: 4 + 5 = 9" in out.getvalue()


def test_main_rejects_unknown_protocol(capsys):
    assert main(["--protocol", "ftp"]) == 1
    assert "Failed to create message controller: no such a protocol" in capsys.readouterr().out