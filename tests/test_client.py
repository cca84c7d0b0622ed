import io
import socket
import threading

import pytest

from paroliere.client import Client
from paroliere.commands import HELP_MESSAGE, UNKNOWN_COMMAND_MESSAGE
from paroliere.common import CONNECTED_MESSAGE, EXIT_MESSAGE
from paroliere.protocol import Message, MessageType, receive_message, send_message


@pytest.fixture
def server():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    yield listener
    listener.close()


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    event.set()


def _accept(listener):
    listener.settimeout(5)
    conn, _ = listener.accept()
    conn.settimeout(5)
    return conn


def _next_non_ping(conn):
    while True:
        message = receive_message(conn)
        if message is not None and message.type != MessageType.PING:
            return message


def _blocking_lines(lines, release):
    yield from lines
    release.wait(10)


def _connected(server):
    output = io.StringIO()
    client = Client("localhost", server.getsockname()[1], output)
    client.connect(retry_delay=0.05)
    conn = _accept(server)
    return client, conn, output


def test_invalid_ip_is_rejected():
    with pytest.raises(ValueError):
        Client("not-an-ip", 8080, io.StringIO())


def test_invalid_port_is_rejected():
    with pytest.raises(ValueError):
        Client("127.0.0.1", 70000, io.StringIO())


def test_port_given_as_text_is_parsed():
    client = Client("LocalHost", "8080", io.StringIO())
    assert (client.host, client.port) == ("127.0.0.1", 8080)


def test_run_requires_connection():
    client = Client("127.0.0.1", 8080, io.StringIO())
    with pytest.raises(RuntimeError):
        client.run([])


def test_connect_announces_success(server):
    client, conn, output = _connected(server)
    try:
        assert output.getvalue() == f"{CONNECTED_MESSAGE}\n"
        assert client.connected
    finally:
        client.close()
        conn.close()


def test_connect_retries_until_server_listens(capsys):
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    port = listener.getsockname()[1]
    timer = threading.Timer(0.3, listener.listen, args=(1,))
    timer.start()
    client = Client("127.0.0.1", port, io.StringIO())
    try:
        client.connect(retry_delay=0.05)
        assert client.connected
        assert "Error in connecting" in capsys.readouterr().err
    finally:
        timer.join()
        client.close()
        listener.close()


def test_matrix_command_sends_request(server):
    client, conn, _ = _connected(server)
    try:
        assert client.handle_line("MATRIX\n") is True
        assert _next_non_ping(conn) == Message(MessageType.MATRIX, None)
    finally:
        client.close()
        conn.close()


def test_word_and_register_are_upper_cased(server):
    client, conn, _ = _connected(server)
    try:
        client.handle_line("register_user mario\n")
        client.handle_line("p ciao\n")
        assert _next_non_ping(conn) == Message(MessageType.REGISTER_USER, "MARIO")
        assert _next_non_ping(conn) == Message(MessageType.WORD, "CIAO")
    finally:
        client.close()
        conn.close()


def test_help_and_unknown_are_local(server):
    client, conn, output = _connected(server)
    try:
        assert client.handle_line("aiuto\n") is True
        assert client.handle_line("dance\n") is True
        assert output.getvalue().endswith(HELP_MESSAGE + UNKNOWN_COMMAND_MESSAGE)
    finally:
        client.close()
        conn.close()


def test_quit_sends_quit_and_closes(server):
    client, conn, output = _connected(server)
    try:
        assert client.handle_line("end\n") is False
        assert not client.connected
        assert _next_non_ping(conn).type == MessageType.QUIT
        assert output.getvalue().endswith(f"{EXIT_MESSAGE}\n")
    finally:
        conn.close()


def test_close_is_idempotent(server):
    client, conn, _ = _connected(server)
    client.close()
    client.close()
    assert not client.connected
    conn.close()


def test_run_shows_responses_until_server_quits(server, release):
    client, conn, output = _connected(server)
    try:
        send_message(conn, MessageType.OK, "hello\n")
        send_message(conn, MessageType.QUIT, "bye\n")
        client.run(_blocking_lines([], release))
        text = output.getvalue()
        assert "hello\n" in text
        assert text.index("hello\n") < text.index("bye\n")
        assert text.endswith(f"{EXIT_MESSAGE}\n")
        assert not client.connected
    finally:
        conn.close()


def test_run_sends_typed_commands(server, release):
    client, conn, output = _connected(server)
    try:
        worker = threading.Thread(
            target=client.run, args=(_blocking_lines(["matrix\n"], release),), daemon=True
        )
        worker.start()
        assert _next_non_ping(conn) == Message(MessageType.MATRIX, None)
        send_message(conn, MessageType.QUIT, "bye\n")
        worker.join(5)
        assert not worker.is_alive()
        assert output.getvalue().endswith(f"{EXIT_MESSAGE}\n")
    finally:
        conn.close()


def test_run_quits_at_end_of_input(server):
    client, conn, output = _connected(server)
    try:
        client.run(iter([]))
        assert _next_non_ping(conn).type == MessageType.QUIT
        assert output.getvalue().endswith(f"{EXIT_MESSAGE}\n")
    finally:
        conn.close()


def test_run_reports_server_disconnection(server, release):
    client, conn, output = _connected(server)
    conn.close()
    client.run(_blocking_lines([], release))
    text = output.getvalue()
    assert "A disconnection from the server occurred!" in text
    assert text.endswith(f"{EXIT_MESSAGE}\n")
    assert not client.connected


def test_run_renders_pause_time(server, release):
    client, conn, output = _connected(server)
    try:
        send_message(conn, MessageType.WAIT_TIME, "30")
        send_message(conn, MessageType.QUIT, "bye\n")
        client.run(_blocking_lines([], release))
        assert "Seconds left to the end of the pause: 30." in output.getvalue()
    finally:
        conn.close()