import queue
import socket
import threading

import pytest

from mcast_tester.logger import ILogger


class RecordingLogger(ILogger):
    def __init__(self):
        self.records = []
        self.lock = threading.Lock()

    def log(self, level, component, msg):
        with self.lock:
            self.records.append((level, component, msg))

    def messages(self, component=None):
        with self.lock:
            return [m for _, c, m in self.records if component is None or c == component]


class FakeSocket:
    """
    Stands in for a UDP socket. Datagrams to deliver (or OSErrors to raise) are
    queued in `incoming`; everything sent or configured is recorded.
    """
    def __init__(self, family=socket.AF_INET, port=40000, shared=None):
        self.family = family
        self.shared = shared if shared is not None else {"incoming": queue.Queue(), "bound": None}
        self.port = port
        self.opts = []
        self.sent = []
        self.closed = False
        self.timeout = None
        self.fail_opts = set()
        self.fail_send_after = None

    @property
    def incoming(self):
        return self.shared["incoming"]

    def bind(self, addr):
        self.shared["bound"] = (addr[0], addr[1] or self.port)

    def getsockname(self):
        return self.shared["bound"] or ("0.0.0.0", self.port)

    def setsockopt(self, level, opt, value):
        if opt in self.fail_opts:
            raise OSError(19, "No such device")
        self.opts.append((level, opt, value))

    def settimeout(self, timeout):
        self.timeout = timeout

    def sendto(self, data, addr):
        if self.fail_send_after is not None and len(self.sent) >= self.fail_send_after:
            raise OSError(101, "Network is unreachable")
        self.sent.append((bytes(data), addr))
        return len(data)

    def recvfrom(self, bufsize):
        try:
            item = self.incoming.get(timeout=self.timeout or 0.05)
        except queue.Empty:
            raise socket.timeout("timed out")
        if isinstance(item, BaseException):
            raise item
        return item

    def dup(self):
        return FakeSocket(self.family, self.port, self.shared)

    def close(self):
        self.closed = True

    def options(self, opt):
        return [v for _, o, v in self.opts if o == opt]


class FakeBinder:
    def __init__(self, sock=None):
        self.sock = sock
        self.calls = []

    def __call__(self, family, port, reuse=False):
        self.calls.append((family, port, reuse))
        if self.sock is None:
            self.sock = FakeSocket(family)
        self.sock.bind(("::" if family == socket.AF_INET6 else "0.0.0.0", port))
        return self.sock


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def fake_binder():
    return FakeBinder()
