import socket
import struct

import pytest

from conftest import FakeSocket
from mcast_tester.errors import BindError, JoinGroupError, LeaveGroupError, SendError
from mcast_tester.resolver import parse_group
from mcast_tester.transport import (bind_socket, join_group, leave_group,
                                    set_multicast_ttl, set_multicast_interface)


def test_bind_ephemeral_port():
    sock = bind_socket(socket.AF_INET, 0)
    try:
        host, port = sock.getsockname()
        assert host == "0.0.0.0"
        assert port != 0
        assert sock.type == socket.SOCK_DGRAM
    finally:
        sock.close()


def test_bind_port_in_use():
    first = bind_socket(socket.AF_INET, 0)
    try:
        port = first.getsockname()[1]
        with pytest.raises(BindError) as ctx:
            bind_socket(socket.AF_INET, port)
        assert f"0.0.0.0:{port}" in str(ctx.value)
        assert isinstance(ctx.value.cause, OSError)
    finally:
        first.close()


def test_join_ipv4_packs_group_and_any_interface():
    sock = FakeSocket()
    join_group(sock, parse_group("239.1.1.1"))
    expected = struct.pack("4s4s", socket.inet_aton("239.1.1.1"), socket.inet_aton("0.0.0.0"))
    assert sock.opts == [(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, expected)]


def test_join_ipv4_on_interface():
    sock = FakeSocket()
    join_group(sock, parse_group("239.1.1.1"), "127.0.0.1")
    assert sock.options(socket.IP_ADD_MEMBERSHIP)[0][4:] == socket.inet_aton("127.0.0.1")


def test_join_ipv6_uses_interface_index():
    sock = FakeSocket(socket.AF_INET6)
    join_group(sock, parse_group("ff02::1"), 0)
    expected = struct.pack("16sI", socket.inet_pton(socket.AF_INET6, "ff02::1"), 0)
    assert sock.opts == [(socket.IPPROTO_IPV6, socket.IPV6_JOIN_GROUP, expected)]


def test_leave_mirrors_join():
    sock = FakeSocket()
    group = parse_group("239.1.1.1")
    join_group(sock, group)
    leave_group(sock, group)
    assert sock.options(socket.IP_DROP_MEMBERSHIP) == sock.options(socket.IP_ADD_MEMBERSHIP)


def test_join_failure():
    sock = FakeSocket()
    sock.fail_opts.add(socket.IP_ADD_MEMBERSHIP)
    with pytest.raises(JoinGroupError) as ctx:
        join_group(sock, parse_group("239.1.1.1"))
    assert "join multicast group 239.1.1.1" in str(ctx.value)
    assert "No such device" in str(ctx.value)


def test_leave_failure():
    sock = FakeSocket(socket.AF_INET6)
    sock.fail_opts.add(socket.IPV6_LEAVE_GROUP)
    with pytest.raises(LeaveGroupError):
        leave_group(sock, parse_group("ff02::1"))


def test_ttl_failure_is_a_send_error():
    sock = FakeSocket()
    sock.fail_opts.add(socket.IP_MULTICAST_TTL)
    with pytest.raises(SendError):
        set_multicast_ttl(sock, parse_group("239.1.1.1"), 255)


def test_multicast_interface_only_when_given():
    sock = FakeSocket()
    group = parse_group("239.1.1.1")
    set_multicast_interface(sock, group, "0.0.0.0")
    set_multicast_interface(sock, group, None)
    assert sock.opts == []
    set_multicast_interface(sock, group, "127.0.0.1")
    assert sock.options(socket.IP_MULTICAST_IF) == [socket.inet_aton("127.0.0.1")]
