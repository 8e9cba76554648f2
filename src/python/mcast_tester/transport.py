import socket
import struct
from typing import Union

from .errors import BindError, JoinGroupError, LeaveGroupError, SendError
from .resolver import MulticastGroup, format_endpoint

Interface = Union[str, int]


def bind_socket(family: int, port: int, reuse: bool = False) -> socket.socket:
    """
    Opens a UDP socket bound to the unspecified address of `family`.
    Port 0 lets the OS pick an ephemeral port.
    """
    host = "::" if family == socket.AF_INET6 else "0.0.0.0"
    sock = socket.socket(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        if reuse:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise BindError(format_endpoint(host, port), e) from e
    return sock


def _membership(group: MulticastGroup, interface: Interface) -> bytes:
    if group.version == 6:
        return struct.pack("16sI", group.packed(), int(interface or 0))
    return struct.pack("4s4s", group.packed(), socket.inet_aton(interface or "0.0.0.0"))


def join_group(sock: socket.socket, group: MulticastGroup, interface: Interface = None):
    mreq = _membership(group, interface)
    try:
        if group.version == 6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_JOIN_GROUP, mreq)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, mreq)
    except OSError as e:
        raise JoinGroupError(group.endpoint(sock.getsockname()[1]), e) from e


def leave_group(sock: socket.socket, group: MulticastGroup, interface: Interface = None):
    mreq = _membership(group, interface)
    try:
        if group.version == 6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_LEAVE_GROUP, mreq)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_DROP_MEMBERSHIP, mreq)
    except OSError as e:
        raise LeaveGroupError(str(group), e) from e


def set_multicast_ttl(sock: socket.socket, group: MulticastGroup, ttl: int):
    try:
        if group.version == 6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_HOPS, ttl)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)
    except OSError as e:
        raise SendError(f"{group} (setting multicast ttl {ttl})", e) from e


def set_multicast_interface(sock: socket.socket, group: MulticastGroup, interface: Interface):
    """Pins outbound multicast to one interface. No-op for the unspecified one."""
    if not interface or interface == "0.0.0.0":
        return
    try:
        if group.version == 6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_IF, int(interface))
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(interface))
    except OSError as e:
        raise SendError(f"{group} (selecting interface {interface})", e) from e
