"""Interactive game client: sends the user's commands and shows server responses."""

from __future__ import annotations

import queue
import socket
import sys
import threading
import time
from typing import Iterable, TextIO

from paroliere.commands import (
    HELP_MESSAGE,
    UNKNOWN_COMMAND_MESSAGE,
    CommandKind,
    parse_command,
    render_response,
)
from paroliere.common import (
    CONNECTED_MESSAGE,
    EXIT_MESSAGE,
    MAX_PORT,
    parse_ip,
    parse_port,
)
from paroliere.protocol import (
    Disconnected,
    Message,
    MessageType,
    ProtocolError,
    check_connection,
    receive_message,
    send_message,
)

PROMPT = "[PROMPT PAROLIERE]--> "
DISCONNECTION_MESSAGE = "\nA disconnection from the server occurred!\n"
EXITING_MESSAGE = "Beginning exiting...\n"


class Client:
    """A connection to a game server driven by lines of user input."""

    poll_interval = 0.1
    ping_interval = 1.0

    def __init__(self, host: str, port: int | str, output: TextIO | None = None) -> None:
        self.host = parse_ip(host)
        if isinstance(port, str):
            port = parse_port(port)
        if not 0 <= port <= MAX_PORT:
            raise ValueError(f"invalid port {port}, must be lower than {MAX_PORT}")
        self.port = port
        self.output = output if output is not None else sys.stdout
        self._sock: socket.socket | None = None
        self._send_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._closing = threading.Event()
        self._events: queue.Queue[tuple[str, object]] = queue.Queue()

    @property
    def connected(self) -> bool:
        """Whether the client currently holds an open connection."""
        return self._sock is not None

    def _write(self, text: str) -> None:
        with self._write_lock:
            self.output.write(text)
            self.output.flush()

    def connect(self, retry_delay: float = 3.0) -> None:
        """Connect to the server, retrying every *retry_delay* seconds until it answers."""
        while True:
            try:
                sock = socket.create_connection((self.host, self.port))
            except OSError:
                sys.stderr.write(
                    "Socket closed.\n"
                    f"Error in connecting, retrying in {retry_delay:g} seconds.\n"
                    "Is the server online?\n"
                )
                sys.stderr.flush()
                time.sleep(retry_delay)
                continue
            break
        sock.settimeout(self.poll_interval)
        self._sock = sock
        self._closing.clear()
        self._events = queue.Queue()
        self._write(f"{CONNECTED_MESSAGE}\n")

    def _send(self, msg_type: MessageType, data: str | None = None) -> bool:
        with self._send_lock:
            sock = self._sock
            if sock is None:
                return False
            try:
                send_message(sock, msg_type, data)
            except Disconnected:
                return False
        return True

    def close(self) -> None:
        """Close the connection; calling it again does nothing."""
        self._closing.set()
        with self._send_lock:
            sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()

    def _quit(self) -> None:
        self._write(EXITING_MESSAGE)
        self._send(MessageType.QUIT)
        self.close()
        self._write(f"{EXIT_MESSAGE}\n")

    def handle_line(self, line: str) -> bool:
        """Carry out one line of user input; return False once the client has quit."""
        command = parse_command(line)
        if command.kind is CommandKind.QUIT:
            self._quit()
            return False
        if command.kind is CommandKind.HELP:
            self._write(HELP_MESSAGE)
        elif command.kind is CommandKind.MATRIX:
            self._send(MessageType.MATRIX)
        elif command.kind is CommandKind.REGISTER:
            self._send(MessageType.REGISTER_USER, command.argument)
        elif command.kind is CommandKind.WORD:
            self._send(MessageType.WORD, command.argument)
        else:
            self._write(UNKNOWN_COMMAND_MESSAGE)
        return True

    def _show_response(self, message: Message) -> bool:
        text = render_response(message)
        if text is None:
            return True
        self._write(text)
        if message.type == MessageType.QUIT:
            self.close()
            self._write(f"{EXIT_MESSAGE}\n")
            return False
        return True

    def _receive_loop(self) -> None:
        while not self._closing.is_set():
            sock = self._sock
            if sock is None:
                break
            try:
                peeked = sock.recv(1, socket.MSG_PEEK)
            except socket.timeout:
                continue
            except OSError:
                peeked = b""
            if not peeked:
                if not self._closing.is_set():
                    self._events.put(("disconnected", None))
                return
            try:
                message = receive_message(sock)
            except Disconnected:
                if not self._closing.is_set():
                    self._events.put(("disconnected", None))
                return
            except ProtocolError:
                continue
            if message is None or message.type == MessageType.PING:
                continue
            if not isinstance(message.type, MessageType):
                continue
            self._events.put(("message", message))

    def _ping_loop(self) -> None:
        while not self._closing.wait(self.ping_interval):
            with self._send_lock:
                sock = self._sock
                if sock is None:
                    return
                try:
                    check_connection(sock)
                except ProtocolError:
                    sock.close()

    def _read_loop(self, input_stream: Iterable[str]) -> None:
        for line in input_stream:
            self._events.put(("line", line))
            if self._closing.is_set():
                return
        self._events.put(("eof", None))

    def run(self, input_stream: Iterable[str] | None = None) -> None:
        """Read commands from *input_stream* and show responses until the session ends."""
        if self._sock is None:
            raise RuntimeError("the client is not connected")
        source = input_stream if input_stream is not None else sys.stdin
        for target, args in (
            (self._receive_loop, ()),
            (self._ping_loop, ()),
            (self._read_loop, (source,)),
        ):
            threading.Thread(target=target, args=args, daemon=True).start()

        prompt_visible = False
        try:
            while True:
                if not prompt_visible:
                    self._write(PROMPT)
                    prompt_visible = True
                batch = [self._events.get()]
                while True:
                    try:
                        batch.append(self._events.get_nowait())
                    except queue.Empty:
                        break
                for kind, payload in batch:
                    if kind == "line":
                        prompt_visible = False
                        if not self.handle_line(str(payload)):
                            return
                    elif kind == "message":
                        if prompt_visible:
                            self._write("\n")
                            prompt_visible = False
                        if not self._show_response(payload):  # type: ignore[arg-type]
                            return
                    elif kind == "eof":
                        self._write("\n")
                        self._quit()
                        return
                    elif kind == "disconnected":
                        self._write(DISCONNECTION_MESSAGE)
                        self._write(EXITING_MESSAGE)
                        self.close()
                        self._write(f"{EXIT_MESSAGE}\n")
                        return
        finally:
            self.close()