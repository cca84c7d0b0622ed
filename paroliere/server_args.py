"""Command-line arguments of the game server."""

from __future__ import annotations

import re
from dataclasses import dataclass

from paroliere.common import MAX_PORT, RAND_SEED, normalize_case, parse_ip, parse_port

PROGRAM_NAME = "paroliere_srv"
USAGE = (
    "Invalid args. Usage: ./{program} server_ip server_port "
    "[--matrices matrices_filepath] [--duration game_duration_in_minutes] "
    "[--seed rnd_seed] [--dic dictionary_filepath].\n"
)
DEFAULT_DICTIONARY = "./Data/Dicts/dictionary_ita.txt"
DEFAULT_PAUSE_DURATION = 60 * 1
DEFAULT_GAME_DURATION = 60 * 3

_MATRICES_OPTIONS = frozenset({"--matrices", "--matrici", "--mat"})
_DURATION_OPTIONS = frozenset({"--duration", "--durata"})
_SEED_OPTIONS = frozenset({"--seed"})
_DICTIONARY_OPTIONS = frozenset({"--dic", "--diz", "--dict"})

_ULONG_MOD = 1 << 64
_ULONG_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d*)")


class UsageError(ValueError):
    """The server was started with invalid arguments."""


@dataclass(frozen=True)
class ServerConfig:
    """Settings the server starts with; durations are in seconds."""

    host: str
    port: int
    matrices_path: str | None = None
    game_duration: int = DEFAULT_GAME_DURATION
    pause_duration: int = DEFAULT_PAUSE_DURATION
    seed: int = RAND_SEED
    seed_given: bool = False
    dictionary_path: str = DEFAULT_DICTIONARY

    @property
    def use_matrix_file(self) -> bool:
        """Whether matrices come from a file rather than being random."""
        return self.matrices_path is not None


def _strtoul(text: str) -> int:
    """Lenient unsigned reading of the integer prefix of *text*; negatives wrap."""
    match = _ULONG_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    if sign == "-":
        value = -value
    return value % _ULONG_MOD


def _usage_error(reason: str) -> UsageError:
    return UsageError(reason + USAGE.format(program=PROGRAM_NAME))


def parse_server_args(argv: list[str]) -> ServerConfig:
    """Parse ``server_ip server_port [--option value ...]`` into a ServerConfig.

    *argv* excludes the program name. Option names are case-insensitive and a
    repeated option keeps its last value. Raises UsageError on invalid input.
    """
    args = list(argv)
    if len(args) < 2 or len(args) > 10 or len(args) % 2 != 0:
        raise _usage_error("Error, invalid number of args.\n")

    raw_ip, raw_port = args[0], args[1]
    try:
        port = parse_port(raw_port)
    except ValueError:
        raise UsageError(f"Error, invalid port. Must be lower than {MAX_PORT}.\n") from None
    try:
        host = parse_ip(raw_ip)
    except ValueError:
        raise UsageError("Error, invalid IP.\n") from None

    matrices_path: str | None = None
    dictionary_path: str | None = None
    game_duration = DEFAULT_GAME_DURATION
    seed = 0

    options = args[2:]
    for name, value in zip(options[0::2], options[1::2]):
        option = normalize_case(name, "L")
        if option in _MATRICES_OPTIONS:
            matrices_path = value
        elif option in _DURATION_OPTIONS:
            game_duration = (_strtoul(value) * 60) % _ULONG_MOD
        elif option in _SEED_OPTIONS:
            seed = _strtoul(value)
        elif option in _DICTIONARY_OPTIONS:
            dictionary_path = value
        else:
            raise _usage_error("Error, invalid arg detected.\n")

    seed_given = seed != 0
    if not seed_given:
        seed = RAND_SEED

    if matrices_path is not None and seed_given:
        raise UsageError(
            "Error, matrix file and seed args cannot both be present at the same time.\n"
        )

    return ServerConfig(
        host=host,
        port=port,
        matrices_path=matrices_path,
        game_duration=game_duration,
        pause_duration=DEFAULT_PAUSE_DURATION,
        seed=seed,
        seed_given=seed_given,
        dictionary_path=dictionary_path if dictionary_path is not None else DEFAULT_DICTIONARY,
    )