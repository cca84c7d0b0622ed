"""Shared constants and small helpers used by both the client and the server."""

from __future__ import annotations

import re
import socket

BANNER_LENGTH = 80
BANNER_SYMBOL = "#"
BANNER_NSPACES = 4

BUFFER_SIZE = 1024

EMPTY_SCOREBOARD_MESSAGE = "No REGISTERED players played :(, so no scoreboard..."
EXIT_MESSAGE = "Bye, bye, see you soon! Thanks for playing."
CONNECTED_MESSAGE = "Connected succesfully!"

NROWS = 4
NCOL = 4
VOID_CHAR = "-"
ALPHABET = "abcdefghijklmnopqrstuvwxyz"
RAND_SEED = 42

MAX_PORT = 65535

_PORT_RE = re.compile(r"\s*([+-]?)(\d*)")


def normalize_case(text: str, mode: str) -> str:
    """Return *text* in lower case for mode 'L' or upper case for mode 'U'.

    The mode letter itself is case-insensitive.
    """
    if text is None:
        raise ValueError("normalize_case() received no string")
    selected = mode.upper() if isinstance(mode, str) else mode
    if selected == "L":
        return text.lower()
    if selected == "U":
        return text.upper()
    raise ValueError(f"invalid case mode: {mode!r}")


def parse_ip(ip: str) -> str:
    """Validate an IPv4 address and return it in dotted-quad form.

    The name 'localhost' (in any case) maps to 127.0.0.1. Raises ValueError
    when the address cannot be parsed.
    """
    if ip is None:
        raise ValueError("parse_ip() received no address")
    lowered = normalize_case(ip, "L")
    if lowered == "localhost":
        lowered = "127.0.0.1"
    try:
        packed = socket.inet_aton(lowered)
    except (OSError, ValueError) as exc:
        raise ValueError(f"invalid IP: {ip!r}") from exc
    return socket.inet_ntoa(packed)


def parse_port(text: str) -> int:
    """Parse a decimal port number, accepting 0 through 65535.

    Like a lenient C conversion, leading whitespace is skipped, parsing stops at
    the first non-digit and text without digits yields 0. Negative values and
    values above 65535 raise ValueError.
    """
    match = _PORT_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    value = int(digits) if digits else 0
    if sign == "-" and value != 0:
        raise ValueError(f"invalid port: {text!r}")
    if value > MAX_PORT:
        raise ValueError(f"invalid port {text!r}, must be lower than {MAX_PORT}")
    return value


def banner(
    total_length: int,
    nspaces: int,
    text: str,
    symbol: str,
    blank: bool,
) -> str:
    """Build a divider line of *total_length* characters with *text* centred.

    The text is padded by *nspaces* spaces on each side and framed by equal runs
    of *symbol*. When *blank* is true the whole line is made of *symbol* only.
    Raises ValueError when the parameters cannot produce such a line.
    """
    if total_length <= 0 or nspaces < 0 or nspaces > total_length or text is None:
        raise ValueError("banner() received invalid arguments")
    if len(symbol) != 1:
        raise ValueError("banner symbol must be a single character")
    if symbol in text:
        raise ValueError("banner text cannot contain the banner symbol")

    filler = total_length - 2 * nspaces - len(text)
    if filler < 0 or filler % 2 != 0:
        raise ValueError("banner() cannot centre the text with these parameters")

    side = symbol * (filler // 2)
    padding = " " * nspaces
    line = f"{side}{padding}{text}{padding}{side}"
    if blank:
        return symbol * len(line)
    return line