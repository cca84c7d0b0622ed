"""Wire format for messages exchanged between the game client and server.

A message is one type byte, a 32-bit big-endian length and a payload. When the
payload is present the length counts its bytes plus a terminating NUL, which is
sent too. An absent payload is sent as length 0 followed by a single NUL byte.
"""

from __future__ import annotations

import errno
import socket
import struct
from dataclasses import dataclass
from enum import Enum

_LENGTH = struct.Struct("!I")
_DISCONNECT_ERRNOS = frozenset(
    {errno.ECONNRESET, errno.EPIPE, errno.EBADF, errno.ETIMEDOUT, errno.ECONNABORTED}
)


class MessageType(str, Enum):
    """Message kinds understood by both sides."""

    OK = "K"
    ERR = "E"
    REGISTER_USER = "R"
    MATRIX = "M"
    GAME_TIME = "T"
    WAIT_TIME = "A"
    WORD = "W"
    FINAL_SCORES = "F"
    WORD_POINTS = "P"
    QUIT = "Q"
    PING = "O"


class Disconnected(ConnectionError):
    """The other side of the connection has gone away."""


class ProtocolError(Exception):
    """A message could not be exchanged for a reason other than disconnection."""


@dataclass(frozen=True)
class Message:
    """A received or outgoing message.

    ``type`` is a MessageType when the byte is known, otherwise the raw
    one-character string; checking it is left to the caller.
    """

    type: MessageType | str
    data: str | None = None

    @property
    def length(self) -> int:
        """Length field as it appears on the wire."""
        if self.data is None:
            return 0
        return len(_payload(self.data)) + 1


def _coerce_type(msg_type: MessageType | str) -> MessageType:
    try:
        return MessageType(msg_type)
    except ValueError:
        raise ValueError(f"invalid message type: {msg_type!r}") from None


def _payload(data: str) -> bytes:
    # The payload travels as a NUL-terminated string, so it ends at the first NUL.
    return data.encode("utf-8").split(b"\0", 1)[0]


def encode_message(msg_type: MessageType | str, data: str | None = None) -> bytes:
    """Return the bytes that represent one message on the wire."""
    kind = _coerce_type(msg_type)
    header = kind.value.encode("ascii")
    if data is None:
        return header + _LENGTH.pack(0) + b"\0"
    body = _payload(data) + b"\0"
    return header + _LENGTH.pack(len(body)) + body


def _is_disconnect(exc: OSError) -> bool:
    return isinstance(exc, (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)) or (
        exc.errno in _DISCONNECT_ERRNOS
    )


def send_message(sock: socket.socket, msg_type: MessageType | str, data: str | None = None) -> None:
    """Send one complete message.

    Raises ValueError for an unknown type, Disconnected when the peer is gone
    and ProtocolError for any other failure.
    """
    encoded = encode_message(msg_type, data)
    try:
        sock.sendall(encoded)
    except OSError as exc:
        if _is_disconnect(exc):
            raise Disconnected(str(exc)) from exc
        raise ProtocolError(f"cannot send message: {exc}") from exc


def _recv_exact(sock: socket.socket, size: int, at_start: bool) -> bytes | None:
    """Read exactly *size* bytes.

    Returns None only when *at_start* is true and nothing at all was read,
    either because the read timed out or because the stream ended.
    """
    chunks = bytearray()
    while len(chunks) < size:
        try:
            chunk = sock.recv(size - len(chunks))
        except OSError as exc:
            if isinstance(exc, socket.timeout) and exc.errno is None:
                if at_start and not chunks:
                    return None
                # A message has begun: wait for the rest of it.
                continue
            if _is_disconnect(exc):
                raise Disconnected(str(exc)) from exc
            raise ProtocolError(f"cannot receive message: {exc}") from exc
        if not chunk:
            if at_start and not chunks:
                return None
            raise Disconnected("connection closed in the middle of a message")
        chunks += chunk
    return bytes(chunks)


def receive_message(sock: socket.socket) -> Message | None:
    """Read one complete message from *sock*.

    Returns None when nothing was read at the start of a message. Raises
    Disconnected when the peer goes away and ProtocolError on other failures.
    """
    head = _recv_exact(sock, 1, at_start=True)
    if head is None:
        return None
    raw_type = head.decode("latin-1")
    try:
        kind: MessageType | str = MessageType(raw_type)
    except ValueError:
        kind = raw_type

    (length,) = _LENGTH.unpack(_recv_exact(sock, _LENGTH.size, at_start=False))
    if length == 0:
        _recv_exact(sock, 1, at_start=False)
        return Message(kind, None)

    body = _recv_exact(sock, length, at_start=False)
    text = body.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return Message(kind, text)


def check_connection(sock: socket.socket | None) -> bool:
    """Ping the peer and report whether the connection is still alive.

    When the peer turns out to be gone the socket is closed. A socket that is
    already closed counts as disconnected.
    """
    if sock is None or sock.fileno() < 0:
        return False
    try:
        send_message(sock, MessageType.PING)
    except Disconnected:
        sock.close()
        return False
    return True