import threading
import time
from typing import Optional

from .config import SendParams, MAX_SIZE
from .errors import PayloadTooLarge, InvalidNumericArgument, SendError
from .interfaces import resolve_interface
from .logger import LogLevel, ConsoleLogger, ILogger
from .resolver import MulticastGroup
from .transport import bind_socket, set_multicast_ttl, set_multicast_interface


def build_payload(size: int, zero_fill: bool = False) -> bytes:
    """Payload of exactly `size` bytes: zeros, or byte i set to i % 255."""
    if size <= 0:
        raise InvalidNumericArgument("size", size)
    if size > MAX_SIZE:
        raise PayloadTooLarge(size, MAX_SIZE)
    if zero_fill:
        return bytes(size)
    return bytes(i % 255 for i in range(size))


class Sender:
    def __init__(self, group: MulticastGroup, port: int, params: SendParams,
                 logger: Optional[ILogger] = None):
        self.group = group
        self.port = port
        self.params = params
        self.logger = logger or ConsoleLogger()
        self.sent = 0
        self.error: Optional[Exception] = None
        self.thread = None

    @property
    def destination(self) -> str:
        return self.group.endpoint(self.port)

    def run(self) -> int:
        """
        Sends `amount` datagrams on a worker thread and blocks until it is done.
        Returns the number of datagrams sent; re-raises the worker's error.
        """
        self.params.validate(self.port)
        payload = build_payload(self.params.size, self.params.zero_fill)
        interface = resolve_interface(self.params.interface, self.group.family)
        sock = bind_socket(self.group.family, 0)
        try:
            set_multicast_interface(sock, self.group, interface)
            self.thread = threading.Thread(target=self._run, args=(sock, payload),
                                           name="mcast-sender", daemon=True)
            self.thread.start()
            self.thread.join()
        finally:
            sock.close()

        if self.error:
            raise self.error
        self.logger.log(LogLevel.INFO, "Sender", f"Done, sent {self.sent} packet(s) to {self.destination}")
        return self.sent

    def _run(self, sock, payload: bytes):
        try:
            for i in range(self.params.amount):
                if i != 0:
                    time.sleep(self.params.interval)
                set_multicast_ttl(sock, self.group, self.params.ttl)
                self._send(sock, payload)
                self.sent += 1
                self.logger.log(LogLevel.INFO, "Sender", f"sent {len(payload)} byte(s) to {self.destination}")
            if self.params.send_close:
                self._send(sock, b"")
                self.logger.log(LogLevel.DEBUG, "Sender", f"sent close signal to {self.destination}")
        except Exception as e:
            self.error = e

    def _send(self, sock, data: bytes):
        try:
            sock.sendto(data, (str(self.group), self.port))
        except OSError as e:
            raise SendError(self.destination, e) from e
