from .config import SendParams, MAX_SIZE
from .errors import McastError
from .lifecycle import run_until_enter
from .logger import LogLevel, ILogger, ConsoleLogger
from .receiver import Receiver
from .resolver import MulticastGroup, parse_group, parse_port
from .sender import Sender, build_payload

__version__ = "0.1.0"
