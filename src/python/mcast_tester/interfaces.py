import ipaddress
import socket
from typing import Optional, Union

import psutil

from .errors import InvalidInterface


def _strip_scope(address: str) -> str:
    return address.split("%", 1)[0]


def _index_of(name: str) -> int:
    try:
        return socket.if_nametoindex(name)
    except OSError as e:
        raise InvalidInterface(name) from e


def resolve_interface(value: Optional[str], family: int) -> Union[str, int]:
    """
    Maps the --interface option onto what the socket options expect.

    IPv4 membership and IP_MULTICAST_IF take an interface address, IPv6 takes
    an interface index. None selects the unspecified interface and lets the
    routing table decide.
    """
    if not value:
        return 0 if family == socket.AF_INET6 else "0.0.0.0"

    try:
        literal = ipaddress.ip_address(_strip_scope(value))
    except ValueError:
        literal = None

    if literal is not None and family == socket.AF_INET:
        if literal.version != 4:
            raise InvalidInterface(value, "expected an IPv4 interface address")
        return str(literal)

    addrs = psutil.net_if_addrs()
    if literal is None:
        if value not in addrs:
            raise InvalidInterface(value)
        if family == socket.AF_INET6:
            return _index_of(value)
        v4 = next((a.address for a in addrs[value] if a.family == socket.AF_INET), None)
        if v4 is None:
            raise InvalidInterface(value, "interface has no IPv4 address")
        return v4

    if literal.version != 6:
        raise InvalidInterface(value, "expected an IPv6 interface address")
    for name, entries in addrs.items():
        for a in entries:
            if a.family == socket.AF_INET6 and ipaddress.ip_address(_strip_scope(a.address)) == literal:
                return _index_of(name)
    raise InvalidInterface(value, "no interface carries address")
