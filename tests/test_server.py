import pytest

from punchchat.endpoint import Endpoint
from punchchat.message import Message, MessageType
from punchchat.server import Server, main

ALICE = Endpoint("1.2.3.4", 5)
BOB = Endpoint("5.6.7.8", 9)


class FakeSocket:
    def __init__(self, incoming=(), fail_send=False):
        self.incoming = list(incoming)
        self.sent = []
        self.fail_send = fail_send

    def sendto(self, data, flags, address):
        if self.fail_send:
            raise OSError("network unreachable")
        self.sent.append((Endpoint.from_address(address), Message.unpack(data)))
        return len(data)

    def recvfrom(self, size):
        if not self.incoming:
            raise OSError("closed")
        return self.incoming.pop(0)


@pytest.fixture
def server():
    return Server(FakeSocket())


def test_login_success_then_failure(server):
    server.handle(ALICE, Message(MessageType.LOGIN))
    server.handle(ALICE, Message(MessageType.LOGIN))
    assert server.sock.sent == [
        (ALICE, Message(MessageType.REPLY, b"Login success!")),
        (ALICE, Message(MessageType.REPLY, b"Login failed")),
    ]
    assert ALICE in server.clients
    assert len(server.clients) == 1


def test_logout(server):
    server.handle(ALICE, Message(MessageType.LOGOUT))
    server.handle(ALICE, Message(MessageType.LOGIN))
    server.handle(ALICE, Message(MessageType.LOGOUT))
    bodies = [m.text() for _, m in server.sock.sent]
    assert bodies == ["Logout failed", "Login success!", "Logout success"]
    assert ALICE not in server.clients


def test_list_marks_sender(server):
    server.handle(ALICE, Message(MessageType.LOGIN))
    server.handle(BOB, Message(MessageType.LOGIN))
    server.handle(ALICE, Message(MessageType.LIST))
    peer, reply = server.sock.sent[-1]
    assert peer == ALICE
    assert reply.mtype == MessageType.ADDRESS
    assert reply.text() == "(you)1.2.3.4:5;5.6.7.8:9"


def test_list_empty(server):
    server.handle(ALICE, Message(MessageType.LIST))
    assert server.sock.sent == [(ALICE, Message(MessageType.ADDRESS, b""))]


def test_punch_relays_to_other(server):
    server.handle(ALICE, Message(MessageType.PUNCH, b"5.6.7.8:9"))
    assert server.sock.sent == [
        (BOB, Message(MessageType.PUNCH, str(ALICE).encode())),
        (ALICE, Message(MessageType.TEXT, b"punch request sent")),
    ]


def test_ping_pong(server):
    server.handle(ALICE, Message(MessageType.PING))
    server.handle(ALICE, Message(MessageType.PONG))
    assert server.sock.sent == [(ALICE, Message(MessageType.PONG, b""))]


def test_unknown_command(server):
    server.handle(ALICE, Message(MessageType.TEXT, b"hello"))
    assert server.sock.sent == [(ALICE, Message(MessageType.REPLY, b"Unkown command"))]


def test_send_failure_does_not_propagate():
    srv = Server(FakeSocket(fail_send=True))
    srv.handle(ALICE, Message(MessageType.LOGIN))
    assert ALICE in srv.clients


def test_serve_forever_skips_bad_datagrams():
    incoming = [
        (b"", ALICE.to_address()),
        (b"\x00\x01garbage", ALICE.to_address()),
        (Message(MessageType.LOGIN).pack(), ALICE.to_address()),
        (Message(MessageType.PING).pack(), BOB.to_address()),
    ]
    srv = Server(FakeSocket(incoming))
    srv.serve_forever()
    assert srv.sock.sent == [
        (ALICE, Message(MessageType.REPLY, b"Login success!")),
        (BOB, Message(MessageType.PONG, b"")),
    ]
    assert srv.sock.incoming == []


def test_main_requires_one_argument(capsys):
    assert main([]) == 1
    assert "<port>" in capsys.readouterr().out
    assert main(["1", "2"]) == 1