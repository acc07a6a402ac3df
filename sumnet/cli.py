"""Interactive console client that asks the server to add two numbers."""

from __future__ import annotations

import argparse
import re
import subprocess
import sys
from collections import deque
from typing import Callable, Deque, Optional, Sequence, TextIO

from .controller import ControllerError, MessageController, handle_response
from .messages import INT64_MAX, INT64_MIN, FailureResponse

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _current_os() -> str:
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def _parse_int64(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


class CliController:
    """Prompt loop: reads two numbers, asks the server for their sum, shows it."""

    def __init__(
        self,
        net,
        os_name: Optional[str] = None,
        input_func: Optional[Callable[[], str]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.net = net
        self.os_name = os_name if os_name is not None else _current_os()
        self._input = input_func if input_func is not None else input
        self.output = output if output is not None else sys.stdout
        self._tokens: Deque[str] = deque()

    def _write(self, text: str = "") -> None:
        print(text, file=self.output)

    def _scan(self) -> str:
        """Return the next whitespace-separated token; EOFError at end of input."""
        while not self._tokens:
            self._tokens.extend(self._input().split())
        return self._tokens.popleft()

    def clear_console(self) -> None:
        if self.os_name == "windows":
            command = ["cmd", "/c", "cls"]
        elif self.os_name in ("linux", "darwin"):
            command = ["clear"]
        else:
            for _ in range(3):
                self._write()
            return
        try:
            subprocess.run(command, check=False)
        except OSError:
            pass

    def run_once(self, error_message: str = "") -> str:
        """Run one round; returns the error to show next round, or ''."""
        self.clear_console()
        self._write(f"Sum of two numbers (Variant 2). Protocol: {self.net.protocol}")
        self._write()

        if error_message:
            self._write(f"An error occurred: {error_message}")
            self._write()

        self._write("Enter the first number")
        num1 = _parse_int64(self._scan())
        if num1 is None:
            return "you need to enter a number for the first value"

        self._write("Enter the second number")
        num2 = _parse_int64(self._scan())
        if num2 is None:
            return "you need to enter a number for the second value"

        try:
            reply = self.net.send_sum(num1, num2)
        except ControllerError as exc:
            return f"failed to send sum message: {exc}"

        try:
            response = handle_response(reply)
        except ControllerError as exc:
            return f"failed to handle sum response: {exc}"

        if isinstance(response, FailureResponse):
            if response.message:
                return f"server returned an error: {response.message}"
            result = 0
        else:
            result = response.result

        self._write(f"Result: {num1} + {num2} = {result}")
        self._write("To continue type in anything or Ctr+C to exit")
        self._scan()
        return ""

    def start(self) -> None:
        """Loop until input ends or the user interrupts."""
        error_message = ""
        try:
            while True:
                error_message = self.run_once(error_message)
        except (EOFError, KeyboardInterrupt):
            self._write()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Add two numbers on a server.")
    parser.add_argument("--protocol", default="tcp")
    parser.add_argument("--address", default=":8000")
    args = parser.parse_args(argv)
    try:
        net = MessageController(args.protocol, args.address)
    except ControllerError as exc:
        print(f"Failed to create message controller: {exc}")
        return 1
    CliController(net).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())