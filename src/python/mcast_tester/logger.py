import datetime
import sys
from enum import Enum
from typing import Optional, TextIO

class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

def timestamp() -> str:
    now = datetime.datetime.now().astimezone()
    return f"{now.strftime('%H:%M:%S.%f')[:-3]} ({now.strftime('%Z')})"

class ILogger:
    def log(self, level: LogLevel, component: str, msg: str):
        pass

class ConsoleLogger(ILogger):
    """Writes one line per event. WARN and ERROR go to stderr."""
    def __init__(self, min_level: LogLevel = LogLevel.INFO,
                 out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.min_level = min_level
        self.out = out
        self.err = err

    def log(self, level: LogLevel, component: str, msg: str):
        if level.value < self.min_level.value:
            return
        if level.value >= LogLevel.WARN.value:
            stream = self.err or sys.stderr
        else:
            stream = self.out or sys.stdout
        print(f"[{timestamp()}] [{level.name:5}] [{component}] {msg}", file=stream, flush=True)
