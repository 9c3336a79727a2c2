import socket

import pytest

from dhcpv4tools.ipv4 import build_udp4_packet
from dhcpv4tools.rawconn import BroadcastRawUDPConn, new_raw_udp_conn, udp_match


@pytest.fixture
def pair():
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_DGRAM)
    left.settimeout(2)
    right.settimeout(2)
    client = BroadcastRawUDPConn(left, ("", 68))
    server = BroadcastRawUDPConn(right, ("", 67))
    yield client, server, left, right
    client.close()
    server.close()


def test_udp_match_without_bound():
    assert udp_match(("10.0.0.1", 5), None) is True


def test_udp_match_port_only():
    assert udp_match(("10.0.0.1", 67), ("", 67)) is True
    assert udp_match(("10.0.0.1", 68), ("", 67)) is False


def test_udp_match_with_ip():
    assert udp_match(("10.0.0.1", 67), ("10.0.0.1", 67)) is True
    assert udp_match(("10.0.0.2", 67), ("10.0.0.1", 67)) is False


def test_round_trip(pair):
    client, server, _, _ = pair
    client.sendto(b"hello", ("255.255.255.255", 67))
    data, source = server.recvfrom(1500)
    assert data == b"hello"
    assert source == ("0.0.0.0", 68)


def test_sendto_returns_full_packet_length(pair):
    client, _, _, _ = pair
    sent = client.sendto(b"abc", ("255.255.255.255", 67))
    assert sent == len(build_udp4_packet(b"abc", ("255.255.255.255", 67), ("", 68)))


def test_wrong_port_is_skipped(pair):
    client, server, _, _ = pair
    client.sendto(b"not for you", ("255.255.255.255", 99))
    client.sendto(b"for you", ("255.255.255.255", 67))
    data, _ = server.recvfrom(1500)
    assert data == b"for you"


def test_non_udp_and_garbage_are_skipped(pair):
    _, server, left, _ = pair
    tcp = bytearray(build_udp4_packet(b"tcp", ("1.2.3.4", 67), ("5.6.7.8", 68)))
    tcp[9] = 6
    left.send(bytes(tcp))
    left.send(b"\x45\x00")
    left.send(build_udp4_packet(b"udp", ("1.2.3.4", 67), ("5.6.7.8", 68)))
    data, source = server.recvfrom(1500)
    assert data == b"udp"
    assert source == ("5.6.7.8", 68)


def test_trailing_padding_is_ignored(pair):
    _, server, left, _ = pair
    left.send(build_udp4_packet(b"payload", ("1.2.3.4", 67), ("", 68)) + bytes(10))
    data, _ = server.recvfrom(1500)
    assert data == b"payload"


def test_payload_truncated_to_bufsize(pair):
    _, server, left, _ = pair
    left.send(build_udp4_packet(b"0123456789", ("1.2.3.4", 67), ("", 68)))
    data, _ = server.recvfrom(4)
    assert data == b"0123"


def test_empty_packet_raises_eof(pair):
    _, server, left, _ = pair
    left.send(b"")
    with pytest.raises(EOFError):
        server.recvfrom(1500)


def test_sendto_requires_udp_address(pair):
    client, _, _, _ = pair
    with pytest.raises(TypeError):
        client.sendto(b"x", "255.255.255.255")


def test_unknown_interface_raises():
    with pytest.raises(OSError):
        new_raw_udp_conn("nosuchif0", 68)