import sys
from typing import Optional, TextIO

from .logger import LogLevel, ILogger
from .receiver import Receiver


def run_until_enter(receiver: Receiver, stdin: Optional[TextIO] = None,
                    logger: Optional[ILogger] = None) -> int:
    """
    Blocks on one line of input, then leaves the group and stops the worker.
    The line's content is ignored; end of input counts as a line.
    """
    logger = logger or receiver.logger
    stdin = stdin or sys.stdin
    logger.log(LogLevel.INFO, "Lifecycle", f"Joined multicast group {receiver.group} (press ENTER to exit)")
    logger.log(LogLevel.INFO, "Lifecycle", f"Listening on socket {receiver.local_address()}")

    stdin.readline()

    try:
        receiver.leave()
    finally:
        receiver.stop()
    logger.log(LogLevel.INFO, "Lifecycle", f"Left multicast group {receiver.group}, {receiver.received} datagram(s) received")
    return 0
