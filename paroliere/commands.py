"""Parsing of the user's typed commands and rendering of server responses."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from paroliere.common import EMPTY_SCOREBOARD_MESSAGE, normalize_case
from paroliere.protocol import Message, MessageType

HELP_MESSAGE = (
    "Avaible commands:\n"
    "help -> Show this page.\n"
    "register_user user_name -> To register in the game.\n"
    "matrix -> Get the current game matrix.\n"
    "p word -> Submit a word.\n"
    "end -> Exit from the game.\n"
)
UNKNOWN_COMMAND_MESSAGE = "Unknown command. Use 'help' to know the available options.\n"
SCOREBOARD_HEADER = "The game is over, this is the scoreboard:\n"

_QUIT_WORDS = frozenset({"end", "exit", "fine", "quit"})
_HELP_WORDS = frozenset({"help", "aiuto"})
_MATRIX_WORDS = frozenset({"matrix", "matrice"})
_REGISTER_WORDS = frozenset({"register_user", "registra_utente", "rg"})
_WORD_WORDS = frozenset({"p"})

_ULONG_MOD = 1 << 64
_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d*)")


class CommandKind(Enum):
    """What the user asked for."""

    QUIT = "quit"
    HELP = "help"
    MATRIX = "matrix"
    REGISTER = "register"
    WORD = "word"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """A parsed user command and its argument, if it takes one."""

    kind: CommandKind
    argument: str | None = None


def parse_command(line: str) -> Command:
    """Interpret one line of user input.

    The line is cut at its first newline and compared case-insensitively.
    Quit, help and matrix commands must match the whole line; register and
    word commands take the second space-separated word, upper-cased.
    """
    text = normalize_case(line.split("\n", 1)[0], "L")

    if text in _QUIT_WORDS:
        return Command(CommandKind.QUIT)
    if text in _HELP_WORDS:
        return Command(CommandKind.HELP)
    if text in _MATRIX_WORDS:
        return Command(CommandKind.MATRIX)

    words = [word for word in text.split(" ") if word]
    if len(words) >= 2:
        first, argument = words[0], normalize_case(words[1], "U")
        if first in _REGISTER_WORDS:
            return Command(CommandKind.REGISTER, argument)
        if first in _WORD_WORDS:
            return Command(CommandKind.WORD, argument)
    return Command(CommandKind.UNKNOWN)


def _leading_int(text: str | None) -> int:
    """Signed integer prefix of *text*, 0 when there is none."""
    match = _INT_RE.match(text or "")
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def _leading_ulong(text: str | None) -> int:
    """Unsigned 64-bit reading of the integer prefix of *text*; negatives wrap."""
    return _leading_int(text) % _ULONG_MOD


def format_scoreboard(data: str | None) -> str:
    """Render a comma-separated ``name,points,...`` scoreboard, one player per line."""
    if data == EMPTY_SCOREBOARD_MESSAGE:
        return f"{data}\n"
    tokens = [token for token in (data or "").split(",") if token]
    lines = []
    for name, points in zip(tokens[0::2], tokens[1::2]):
        lines.append(f"Name: {name}. Points: {points}.\n")
    if len(tokens) % 2:
        lines.append(f"Name: {tokens[-1]}.\n")
    return "".join(lines)


def render_response(message: Message) -> str | None:
    """Return the text to show for a server response.

    Returns an empty string for a ping and None for messages the client does
    not display.
    """
    kind = message.type
    data = message.data

    if kind in (MessageType.MATRIX, MessageType.OK, MessageType.ERR, MessageType.QUIT):
        return data or ""
    if kind == MessageType.WAIT_TIME:
        if _leading_int(data) != -1:
            return (
                "The game is in pause. Seconds left to the end of the pause: "
                f"{_leading_ulong(data)}.\n"
            )
        return "The game is in pause. We are late, the next game should start as soon as possible!\n"
    if kind == MessageType.GAME_TIME:
        return (
            "The game is ongoing. Seconds left to the end of the game: "
            f"{_leading_ulong(data)}.\n"
        )
    if kind == MessageType.WORD_POINTS:
        points = _leading_ulong(data)
        if points == 0:
            return f"Word already claimed. You got {points} points.\n"
        return f"Word claimed succesfully, nice guess! You got {points} points.\n"
    if kind == MessageType.FINAL_SCORES:
        return SCOREBOARD_HEADER + format_scoreboard(data)
    if kind == MessageType.PING:
        return ""
    return None