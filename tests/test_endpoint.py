import pytest

from punchchat.endpoint import Endpoint


def test_from_string_parses_host_and_port():
    ep = Endpoint.from_string("127.0.0.1:8000")
    assert ep.host == "127.0.0.1"
    assert ep.port == 8000


def test_str_round_trip():
    text = "123.123.123.123:12345"
    assert str(Endpoint.from_string(text)) == text


@pytest.mark.parametrize("text", ["127.0.0.1", "", ":", "::::"])
def test_missing_part_gives_broadcast(text):
    ep = Endpoint.from_string(text)
    assert ep.host == "255.255.255.255"
    assert ep.port == 0


def test_invalid_host_becomes_broadcast():
    ep = Endpoint.from_string("not-a-host:80")
    assert ep.host == "255.255.255.255"
    assert ep.port == 80


def test_leading_colons_are_skipped():
    assert Endpoint.from_string(":10.0.0.1:53") == Endpoint("10.0.0.1", 53)


def test_port_with_trailing_junk():
    assert Endpoint.from_string("10.0.0.1:53abc").port == 53


def test_non_numeric_port_is_zero():
    assert Endpoint.from_string("10.0.0.1:abc").port == 0


def test_address_round_trip():
    ep = Endpoint("192.168.1.20", 4000)
    assert Endpoint.from_address(ep.to_address()) == ep
    assert ep.to_address() == ("192.168.1.20", 4000)


def test_equality_and_hash():
    a = Endpoint.from_string("10.1.2.3:9")
    b = Endpoint("10.1.2.3", 9)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Endpoint("10.1.2.3", 10)


def test_port_is_sixteen_bits():
    assert 0 <= Endpoint("10.0.0.1", -1).port <= 0xFFFF
    assert Endpoint("10.0.0.1", 0x10000 + 7).port == 7