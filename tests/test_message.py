import pytest

from punchchat.endpoint import Endpoint
from punchchat.message import (
    HEAD_LEN,
    MAGIC,
    SEND_BUFSIZE,
    Message,
    MessageError,
    MessageType,
    send_message,
    send_text,
    type_name,
)


class RecordingSocket:
    def __init__(self):
        self.sent = []

    def sendto(self, data, flags, address):
        self.sent.append((data, address))
        return len(data)


PEER = Endpoint("10.0.0.9", 4321)


def test_ping_wire_bytes():
    assert Message(MessageType.PING).pack() == b"\x78\x53\x00\x04\x00\x00\x00\x00"


def test_header_layout():
    packed = Message(MessageType.TEXT, b"hi").pack()
    assert len(packed) == HEAD_LEN + 2
    assert int.from_bytes(packed[:2], "big") == MAGIC
    assert int.from_bytes(packed[2:4], "big") == MessageType.TEXT
    assert int.from_bytes(packed[4:8], "big") == 2
    assert packed[8:] == b"hi"


@pytest.mark.parametrize("mtype", list(MessageType))
def test_round_trip(mtype):
    msg = Message(mtype, b"body bytes")
    assert Message.unpack(msg.pack()) == msg


def test_unknown_type_survives_round_trip():
    msg = Message.unpack(Message(999, b"x").pack())
    assert msg.mtype == 999
    assert msg.body == b"x"


def test_pack_too_large():
    with pytest.raises(MessageError):
        Message(MessageType.TEXT, b"x" * SEND_BUFSIZE).pack()


def test_pack_exact_fit():
    body = b"y" * (SEND_BUFSIZE - HEAD_LEN)
    assert len(Message(MessageType.TEXT, body).pack()) == SEND_BUFSIZE


def test_unpack_short_datagram():
    with pytest.raises(MessageError):
        Message.unpack(b"\x78\x53\x00")


def test_unpack_bad_magic():
    data = bytearray(Message(MessageType.PING).pack())
    data[0] = 0
    with pytest.raises(MessageError):
        Message.unpack(bytes(data))


def test_unpack_truncates_declared_length():
    packed = Message(MessageType.TEXT, b"abcdef").pack()
    msg = Message.unpack(packed[:-2])
    assert msg.body == b"abcd"


def test_text_stops_at_nul():
    assert Message(MessageType.TEXT, b"hello\0rest").text() == "hello"


@pytest.mark.parametrize(
    "mtype, name",
    [
        (MessageType.LOGIN, "LOGIN"),
        (MessageType.ADDRESS, "ADDRESS"),
        (MessageType.GAME_INVITE, "INVITE"),
        (MessageType.GAME_SET, "SERT"),
        (MessageType.GAME_TIE, "TIE"),
        (MessageType.END, "UNKNOW"),
        (500, "UNKNOW"),
    ],
)
def test_type_name(mtype, name):
    assert type_name(mtype) == name


def test_send_message_targets_peer():
    sock = RecordingSocket()
    msg = Message(MessageType.PING)
    sent = send_message(sock, PEER, msg)
    assert sent == HEAD_LEN
    assert sock.sent == [(msg.pack(), ("10.0.0.9", 4321))]


def test_send_text_none_is_empty_body():
    sock = RecordingSocket()
    send_text(sock, PEER, MessageType.REPLY, None)
    data, _ = sock.sent[0]
    assert Message.unpack(data) == Message(MessageType.REPLY, b"")


def test_send_text_encodes_string():
    sock = RecordingSocket()
    send_text(sock, PEER, MessageType.TEXT, "I SEE YOU")
    data, address = sock.sent[0]
    assert Message.unpack(data).text() == "I SEE YOU"
    assert address == PEER.to_address()


def test_send_text_too_long_raises():
    sock = RecordingSocket()
    with pytest.raises(MessageError):
        send_text(sock, PEER, MessageType.TEXT, "z" * SEND_BUFSIZE)
    assert sock.sent == []