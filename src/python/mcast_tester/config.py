import dataclasses
from typing import Optional

from .errors import InvalidNumericArgument, InvalidPort, PayloadTooLarge

# Defaults used when the command line leaves a value out
AMOUNT = 5
INTERVAL_MS = 1000
SIZE = 1
DEFAULT_LISTEN_PORT = 5000

# Receive buffer capacity; also the largest payload the sender accepts
MAX_SIZE = 1 << 16
MULTICAST_TTL = 255

# Read timeout of the receive worker, bounds how long stop() waits
RECV_POLL_INTERVAL = 0.2


@dataclasses.dataclass(frozen=True)
class SendParams:
    amount: int = AMOUNT
    interval_ms: int = INTERVAL_MS
    size: int = SIZE
    zero_fill: bool = False
    send_close: bool = False
    ttl: int = MULTICAST_TTL
    interface: Optional[str] = None

    def validate(self, port: int):
        """Raises on the first bad value. Performed before any socket exists."""
        if port == 0:
            raise InvalidPort(port, "port must not be 0 when sending")
        for name in ("amount", "interval_ms", "size"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidNumericArgument(name, value)
        if self.size > MAX_SIZE:
            raise PayloadTooLarge(self.size, MAX_SIZE)
        if not 1 <= self.ttl <= 255:
            raise InvalidNumericArgument("ttl", self.ttl, "must be within 1..255")

    @property
    def interval(self) -> float:
        return self.interval_ms / 1000.0

