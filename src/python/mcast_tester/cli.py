import argparse
import sys
from typing import List, Optional, TextIO

from . import config
from .config import SendParams
from .errors import McastError
from .lifecycle import run_until_enter
from .logger import LogLevel, ConsoleLogger
from .receiver import Receiver
from .resolver import parse_group, parse_port, parse_positive
from .sender import Sender

SEND_ACTIONS = ("send", "s")
RECV_ACTIONS = ("recv", "r")

USAGE = """
  %(prog)s [-v] {send,s} <MCAST IP> <PORT> [-a AMOUNT] [-i INTERVAL] [-s SIZE] [--zero] [--close] [--ttl TTL] [--interface IF]
  %(prog)s [-v] {recv,r} <MCAST IP> <PORT> [--interface IF]
  %(prog)s [-v] <MCAST IP> <PORT> [AMOUNT [INTERVAL [SIZE]]]
  %(prog)s [-v] <MCAST IP>"""

DESCRIPTION = "Join a multicast group and report received datagrams, or send datagrams to one."


def _add_common(parser: argparse.ArgumentParser, default=False):
    parser.add_argument("-v", "--verbose", action="store_true", default=default, help="Log debug messages")


def _add_send_options(parser: argparse.ArgumentParser):
    parser.add_argument("--zero", action="store_true", help="Zero-fill the payload instead of a counting pattern")
    parser.add_argument("--close", action="store_true",
                        help="Send an empty datagram after the last packet so receivers exit")
    parser.add_argument("--ttl", default=str(config.MULTICAST_TTL),
                        help=f"Multicast TTL / hop limit (default: {config.MULTICAST_TTL})")


def _add_interface(parser: argparse.ArgumentParser):
    parser.add_argument("--interface", help="Interface name or address (default: chosen by the OS)")


def build_parser() -> argparse.ArgumentParser:
    """Flag form: an action word, the group and port, then options."""
    parser = argparse.ArgumentParser(prog="mcast-tester", usage=USAGE, description=DESCRIPTION)
    _add_common(parser)
    sub = parser.add_subparsers(dest="action", metavar="{send,s,recv,r}")
    sub.required = True

    send = sub.add_parser("send", aliases=["s"], help="Send datagrams to a multicast group")
    send.add_argument("group", metavar="MCAST_IP")
    send.add_argument("port", metavar="PORT")
    # Positional AMOUNT INTERVAL SIZE are accepted too; the flags win
    send.add_argument("amount_pos", metavar="AMOUNT", nargs="?")
    send.add_argument("interval_pos", metavar="INTERVAL", nargs="?")
    send.add_argument("size_pos", metavar="SIZE", nargs="?")
    send.add_argument("-a", "--amount",
                      help=f"amount of packets to send (default: {config.AMOUNT})")
    send.add_argument("-i", "--interval",
                      help=f"delay between sent packets in ms (default: {config.INTERVAL_MS} ms)")
    send.add_argument("-s", "--size",
                      help=f"payload size per packet in bytes (default: {config.SIZE} byte)")
    _add_send_options(send)
    _add_interface(send)
    _add_common(send, argparse.SUPPRESS)

    recv = sub.add_parser("recv", aliases=["r"], help="Join a multicast group and print what arrives")
    recv.add_argument("group", metavar="MCAST_IP")
    recv.add_argument("port", metavar="PORT")
    _add_interface(recv)
    _add_common(recv, argparse.SUPPRESS)
    return parser


def build_positional_parser() -> argparse.ArgumentParser:
    """Positional form: a group alone receives, a group and port send."""
    parser = argparse.ArgumentParser(prog="mcast-tester", usage=USAGE, description=DESCRIPTION)
    _add_common(parser)
    parser.add_argument("group", metavar="MCAST_IP")
    parser.add_argument("port", metavar="PORT", nargs="?")
    parser.add_argument("amount", metavar="AMOUNT", nargs="?", default=str(config.AMOUNT))
    parser.add_argument("interval", metavar="INTERVAL", nargs="?", default=str(config.INTERVAL_MS))
    parser.add_argument("size", metavar="SIZE", nargs="?", default=str(config.SIZE))
    _add_send_options(parser)
    _add_interface(parser)
    return parser


def parse_args(argv: List[str]) -> argparse.Namespace:
    words = [a for a in argv if not a.startswith("-")]
    if not words or words[0] in SEND_ACTIONS + RECV_ACTIONS:
        args = build_parser().parse_args(argv)
        args.action = "send" if args.action in SEND_ACTIONS else "recv"
        if args.action == "send":
            for name, default in (("amount", config.AMOUNT), ("interval", config.INTERVAL_MS), ("size", config.SIZE)):
                if getattr(args, name) is None:
                    setattr(args, name, getattr(args, name + "_pos") or str(default))
        return args

    args = build_positional_parser().parse_args(argv)
    if args.port is None:
        args.action = "recv"
        args.port = str(config.DEFAULT_LISTEN_PORT)
    else:
        args.action = "send"
    return args


def send(args: argparse.Namespace, logger) -> int:
    group = parse_group(args.group)
    port = parse_port(args.port, allow_zero=False)
    params = SendParams(
        amount=parse_positive("amount", args.amount),
        interval_ms=parse_positive("interval", args.interval),
        size=parse_positive("size", args.size),
        zero_fill=args.zero,
        send_close=args.close,
        ttl=parse_positive("ttl", args.ttl),
        interface=args.interface,
    )
    Sender(group, port, params, logger).run()
    return 0


def recv(args: argparse.Namespace, logger, stdin: Optional[TextIO] = None) -> int:
    group = parse_group(args.group)
    port = parse_port(args.port)
    receiver = Receiver(group, port, interface=args.interface, logger=logger)
    receiver.start()
    return run_until_enter(receiver, stdin, logger)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger = ConsoleLogger(LogLevel.DEBUG if args.verbose else LogLevel.INFO)
    try:
        if args.action == "send":
            return send(args, logger)
        return recv(args, logger)
    except McastError as e:
        logger.log(LogLevel.ERROR, "CLI", str(e))
        return 1
    except KeyboardInterrupt:
        logger.log(LogLevel.WARN, "CLI", "Interrupted, shutting down...")
        return 130
