"""Command-line entry point of the game client."""

from __future__ import annotations

import sys

from paroliere.client import Client
from paroliere.common import (
    BANNER_LENGTH,
    BANNER_NSPACES,
    BANNER_SYMBOL,
    MAX_PORT,
    banner,
    normalize_case,
    parse_ip,
    parse_port,
)

PROGRAM_NAME = "paroliere_cl"
USAGE = "Invalid args. Usage: ./{program} server_ip server_port.\n"
HEADER = "\n\n##################\n#     CLIENT     #\n##################\n\n"
SETUP_TEXT = "SETUP!"


def _fail(*lines: str) -> int:
    for line in lines:
        sys.stderr.write(line)
    sys.stderr.flush()
    return 1


def main(argv: list[str] | None = None) -> int:
    """Connect to the server named by ``server_ip server_port`` and play interactively.

    Returns the process exit status.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout

    out.write(
        HEADER
        + banner(BANNER_LENGTH, BANNER_NSPACES, SETUP_TEXT, BANNER_SYMBOL, False)
        + "\n"
    )

    if len(args) != 2:
        return _fail(
            "Error, invalid number of args.\n",
            USAGE.format(program=PROGRAM_NAME),
        )

    raw_ip, raw_port = args
    try:
        port = parse_port(raw_port)
    except ValueError:
        return _fail(f"Error, invalid port. Must be lower than {MAX_PORT}.\n")

    try:
        host = parse_ip(raw_ip)
    except ValueError:
        return _fail("Error, invalid IP.\n")

    shown_ip = normalize_case(raw_ip, "L")
    out.write(f"Starting client by connecting to IP {shown_ip} and port {port}.\n")
    out.write("The args seems to be ok...\n")
    out.flush()

    client = Client(host, port, out)
    client.connect()

    out.write(
        banner(BANNER_LENGTH, BANNER_NSPACES, SETUP_TEXT, BANNER_SYMBOL, True) + "\n\n"
    )
    out.flush()

    try:
        client.run()
    except KeyboardInterrupt:
        out.write("\nCTRL + C: intercepted!\n")
        client.handle_line("end")
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())