# paroliere

A networked word game in the style of Boggle. Players connect to a game
server over TCP, register a name, look at the current letter matrix and
submit words for points. At the end of each game the server sends a
scoreboard.

This package provides:

- the binary message protocol spoken between server and clients
  (`paroliere.protocol`),
- a terminal client with a prompt (`paroliere.client`, started by the
  `paroliere-client` command),
- parsing of typed commands and rendering of server replies
  (`paroliere.commands`),
- parsing of the game server's command-line arguments
  (`paroliere.server_args`).

## What it does not do

The package has no game server. It does not generate or load letter
matrices, read a dictionary, check or score words, or run timed games.
`parse_server_args` only turns a server command line into a `ServerConfig`;
nothing in the package starts a server from it. To play, the client needs a
compatible server running elsewhere.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Playing

Start the client with the address and port of a running game server:

```
paroliere-client localhost 8080
```

The host must be an IPv4 address or `localhost` (in any letter case); the
port must be at most 65535. If the server cannot be reached, the client
retries every 3 seconds until it answers.

At the `[PROMPT PAROLIERE]-->` prompt the following commands are accepted
(case does not matter):

| Command                             | Effect                                  |
|-------------------------------------|-----------------------------------------|
| `help` / `aiuto`                    | Show the list of commands.              |
| `register_user NAME` / `rg NAME`    | Register in the game under `NAME`.      |
| `matrix` / `matrice`                | Ask for the current game matrix.        |
| `p WORD`                            | Submit a word.                          |
| `end` / `exit` / `fine` / `quit`    | Leave the game.                         |

Names and words are sent in upper case. Replies from the server (game and
pause time left, points for a word, the final scoreboard, errors) are printed
as they arrive. The client pings the server every second; if the connection
drops it says so and exits. Ctrl+C or the end of input also leaves the game,
telling the server first.

The client can be driven from code too:

```python
import io
from paroliere.client import Client

client = Client("localhost", 8080, output=io.StringIO())
client.connect(retry_delay=1.0)
client.run(["register_user alice\n", "matrix\n", "end\n"])
```

`Client.handle_line` carries out a single line and returns `False` once the
client has quit; `Client.close` closes the connection.

## Protocol

Every message is a one-byte type, a four-byte big-endian length and then the
data. Data is a NUL-terminated string and the length counts the terminator;
a message without data has length 0 followed by a single zero byte. The
types are listed in `MessageType`.

```python
import socket
from paroliere.protocol import MessageType, send_message, receive_message

with socket.create_connection(("localhost", 8080)) as sock:
    send_message(sock, MessageType.MATRIX, None)
    reply = receive_message(sock)
    print(reply)
```

- `encode_message` builds the bytes of a message without sending them; an
  unknown type raises `ValueError`.
- `send_message` raises `Disconnected` when the peer is gone and
  `ProtocolError` on other socket failures.
- `receive_message` returns a `Message`, or `None` when nothing arrived at the
  start of a message (a timeout or the end of the stream). A type byte it does
  not know is kept as a plain one-character string for the caller to check.
  It raises `Disconnected` when the peer goes away, including in the middle
  of a message, and `ProtocolError` on other socket failures.
- `check_connection` sends a ping and returns whether the other side is still
  there, closing the socket if it is not.

## Server arguments

`paroliere.server_args.parse_server_args` reads a game server's command line
(without the program name):

```
server_ip server_port [--matrices FILE] [--duration MINUTES] [--seed N] [--dic FILE]
```

Italian and short spellings (`--matrici`, `--mat`, `--durata`, `--diz`,
`--dict`) are accepted, in any letter case. A game lasts 3 minutes and a
pause 1 minute unless told otherwise (durations are stored in seconds), the
default seed is 42 and the default dictionary path is
`./Data/Dicts/dictionary_ita.txt`. A matrices file cannot be combined with a
seed. The result is a `ServerConfig`; bad arguments raise `UsageError`, whose
message includes the usage line.