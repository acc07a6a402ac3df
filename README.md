# sumnet

A small client and server that add two integers over the network. The
client sends a JSON request holding two numbers. The server replies with
their sum, or with a failure message if it cannot handle the request.
Both TCP and UDP are supported.

## Installation

```
pip install .
```

## Running the server

```
sumnet-server [--port PORT] [--protocol tcp|udp]
```

The server listens on `localhost`. The port defaults to `8000` and the
protocol to `tcp`. An unknown protocol is reported on stderr and the
server does not start. Stop the server with Ctrl+C. It can also be started
with `python -m sumnet.server`.

- **TCP**: each request is one line ending in a newline. A connection may
  carry any number of requests, and each one gets a reply.
- **UDP**: each datagram is one request of at most 1024 bytes, and the
  reply goes back to the sender.

Requests the server cannot decode, and requests with an unknown header,
get a failure reply. The text of the failure is also logged on stderr.

## Running the client

```
sumnet-client [--protocol tcp|udp] [--address HOST:PORT]
```

The address defaults to `:8000`. A missing host means `127.0.0.1`. The
client clears the screen (with `clear` on Linux and macOS, `cls` on
Windows) and asks for two numbers. It sends them to the server and prints
the result, for example:

```
Result: 2 + 3 = 5
```

Type anything to do another sum, or press Ctrl+C (or end the input) to
quit. Some problems are shown at the top of the next round, as
`An error occurred: ...`:

- input that is not a decimal integer fitting in a signed 64-bit value;
- a failed connection;
- an unreadable reply;
- a failure reported by the server.

An unknown protocol makes the client exit at once with
`Failed to create message controller: no such a protocol`. It can also be
started with `python -m sumnet.cli`.

## Wire format

Every message is a JSON object with a numeric `header` and a `body`. The
body is itself a JSON document, base64-encoded:

| header | meaning      | body                       |
|--------|--------------|----------------------------|
| 0      | sum request  | `{"val1": 2, "val2": 3}`   |
| 1      | sum response | `{"result": 5}`            |
| 2      | failure      | `{"result": "error text"}` |

All numbers are signed 64-bit integers. The server's sum wraps around on
overflow. Over TCP the client ends each request with a newline, and it
reads a reply of up to 1024 bytes.

## Using the library

```python
from sumnet.controller import MessageController, handle_response

controller = MessageController("tcp", ":8000")
raw = controller.send_sum(2, 3)
reply = handle_response(raw)   # SumResponse(result=5) or FailureResponse(...)
```

- `MessageController.send_sum` returns the raw reply bytes.
  `handle_response` decodes them into a `SumResponse` or a
  `FailureResponse`. Both raise `ControllerError` on failure.
- `sumnet.messages` holds the message classes (`Message`, `Sum`,
  `SumResponse`, `FailureResponse`). Each of them has `to_bytes` and
  `from_bytes`, and decoding errors raise `MessageError`. The module also
  has the helpers `add_delim`, `new_sum_message_serialized` and
  `new_failure_message_serialized`.
- `sumnet.handler` builds server replies with `create_sum_response` and
  `form_failure_message`.
- `sumnet.server.handle_message_bytes` turns one serialized request into
  its serialized reply. `serve_tcp`, `serve_udp` and `run` start the
  listeners.
- `sumnet.cli.CliController` is the interactive loop. It takes an input
  function and an output stream, so it can be driven without a terminal.

## Tests

```
pip install .[test]
pytest
```