import dataclasses
import ipaddress
import socket
from typing import Union

from .errors import InvalidAddress, NotMulticast, InvalidPort, InvalidNumericArgument

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def format_endpoint(host, port: int) -> str:
    """'239.1.1.1:5000' or '[ff02::1]:5000'."""
    host = str(host)
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


@dataclasses.dataclass(frozen=True)
class MulticastGroup:
    address: IPAddress

    @property
    def version(self) -> int:
        return self.address.version

    @property
    def family(self) -> int:
        return socket.AF_INET6 if self.version == 6 else socket.AF_INET

    @property
    def unspecified(self) -> str:
        return "::" if self.version == 6 else "0.0.0.0"

    def packed(self) -> bytes:
        return self.address.packed

    def endpoint(self, port: int) -> str:
        return format_endpoint(self.address, port)

    def __str__(self):
        return str(self.address)


def parse_group(text: str) -> MulticastGroup:
    try:
        address = ipaddress.ip_address(text.strip())
    except ValueError as e:
        raise InvalidAddress(text) from e
    if not address.is_multicast:
        raise NotMulticast(address)
    return MulticastGroup(address)


def parse_port(text, allow_zero: bool = True) -> int:
    try:
        port = int(str(text).strip(), 10)
    except ValueError as e:
        raise InvalidPort(text) from e
    if not 0 <= port <= 0xFFFF:
        raise InvalidPort(text, "port out of range")
    if port == 0 and not allow_zero:
        raise InvalidPort(text, "port must not be 0")
    return port


def parse_positive(name: str, text) -> int:
    try:
        value = int(str(text).strip(), 10)
    except ValueError as e:
        raise InvalidNumericArgument(name, text, "is not an integer") from e
    if value <= 0:
        raise InvalidNumericArgument(name, text)
    return value
