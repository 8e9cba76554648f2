from typing import Optional


class McastError(Exception):
    """Base class for every fatal condition the tester reports."""


# Input validation. These are raised before any socket is opened.

class InvalidAddress(McastError, ValueError):
    def __init__(self, text: str):
        super().__init__(f"unable to parse multicast address '{text}'")
        self.text = text


class NotMulticast(McastError, ValueError):
    def __init__(self, address):
        super().__init__(f"specified address {address} isn't a valid multicast address")
        self.address = address


class InvalidPort(McastError, ValueError):
    def __init__(self, text, reason: str = "unable to parse port"):
        super().__init__(f"{reason}: '{text}'")
        self.text = text


class InvalidNumericArgument(McastError, ValueError):
    def __init__(self, name: str, value, reason: str = "must be a positive integer"):
        super().__init__(f"{name} {reason} (got '{value}')")
        self.name = name
        self.value = value


class PayloadTooLarge(McastError, ValueError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"size > MAX_SIZE ({size} > {limit})")
        self.size = size
        self.limit = limit


class InvalidInterface(McastError, ValueError):
    def __init__(self, value: str, reason: str = "no such interface"):
        super().__init__(f"{reason}: '{value}'")
        self.value = value


# Socket level. Each wraps the OSError of the failing call.

class SocketError(McastError):
    operation = "socket operation"

    def __init__(self, target: str, cause: Optional[BaseException] = None):
        msg = f"unable to {self.operation} {target}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)
        self.target = target
        self.cause = cause


class BindError(SocketError):
    operation = "bind to address & port"


class JoinGroupError(SocketError):
    operation = "join multicast group"


class LeaveGroupError(SocketError):
    operation = "leave multicast group"


class SendError(SocketError):
    operation = "send packets to"


class ReceiveError(SocketError):
    operation = "receive from socket bound to"
