import os
import socket
import sys
import threading
from typing import Callable, Optional

from .config import DEFAULT_LISTEN_PORT, MAX_SIZE, RECV_POLL_INTERVAL
from .errors import ReceiveError
from .interfaces import resolve_interface
from .logger import LogLevel, ConsoleLogger, ILogger
from .resolver import MulticastGroup, format_endpoint
from .transport import bind_socket, join_group, leave_group


def exit_process(code: int):
    """Ends the whole process from a worker thread."""
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


class Receiver:
    """
    Joins a multicast group and reports every datagram from a background thread.

    The worker reads from `sock`. The foreground keeps `control`, a dup() of
    the same kernel socket, for the leave-group call and for getsockname().
    """
    def __init__(self, group: MulticastGroup, port: int = DEFAULT_LISTEN_PORT,
                 interface: Optional[str] = None, logger: Optional[ILogger] = None,
                 on_exit: Callable[[int], None] = exit_process):
        self.group = group
        self.port = port
        self.interface_name = interface
        self.logger = logger or ConsoleLogger()
        self.on_exit = on_exit
        self.interface = None
        self.sock = None
        self.control = None
        self.thread = None
        self.stopping = threading.Event()
        self.received = 0

    def start(self):
        self.interface = resolve_interface(self.interface_name, self.group.family)
        self.sock = bind_socket(self.group.family, self.port, reuse=True)
        try:
            join_group(self.sock, self.group, self.interface)
            self.control = self.sock.dup()
        except Exception:
            self.sock.close()
            raise
        self.sock.settimeout(RECV_POLL_INTERVAL)
        self.thread = threading.Thread(target=self._run, name="mcast-receiver", daemon=True)
        self.thread.start()

    def local_address(self) -> str:
        host, port = self.control.getsockname()[:2]
        return format_endpoint(host, port)

    def leave(self):
        leave_group(self.control, self.group, self.interface)
        self.logger.log(LogLevel.DEBUG, "Receiver", f"Left multicast group {self.group}")

    def stop(self, timeout: float = 1.0):
        self.stopping.set()
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout)
        for s in (self.sock, self.control):
            if s is not None:
                s.close()

    def _run(self):
        while not self.stopping.is_set():
            try:
                data, addr = self.sock.recvfrom(MAX_SIZE)
            except socket.timeout:
                continue
            except OSError as e:
                if self.stopping.is_set():
                    return
                err = ReceiveError(self.group.endpoint(self.port), e)
                self.logger.log(LogLevel.ERROR, "Receiver", str(err))
                self.on_exit(1)
                return

            if self.stopping.is_set():
                return
            source = format_endpoint(addr[0], addr[1])
            if not data:
                self.logger.log(LogLevel.INFO, "Receiver", f"received close signal from {source}")
                self.on_exit(0)
                return
            self.logger.log(LogLevel.INFO, "Receiver", f"received {len(data)} byte(s) from {source}")
            self.received += 1
