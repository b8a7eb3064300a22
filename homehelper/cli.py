"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys

from homehelper import daemon, remote
from homehelper.commands import Command

_VERSION = "0.1.0"
_COMMANDS = {command.name.lower().replace("_", "-"): command for command in Command}


def _bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise argparse.ArgumentTypeError(f"invalid value {text!r}: expected true or false")


def _parser() -> argparse.ArgumentParser:
    version = f"%(prog)s {_VERSION}"
    parser = argparse.ArgumentParser(prog="homehelper")
    parser.add_argument("-V", "--version", action="version", version=f"homehelper {_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    daemon_parser = sub.add_parser("daemon", help="run the daemon")
    daemon_parser.add_argument("-V", "--version", action="version", version=version)
    daemon_parser.add_argument(
        "-s", "--submap", type=_bool, default=True, metavar="BOOL",
        help="show the binds of the active submap (default: true)",
    )

    remote_parser = sub.add_parser("remote", help="send a request to the daemon")
    remote_parser.add_argument("-V", "--version", action="version", version=version)
    remote_parser.add_argument("request", choices=list(_COMMANDS))
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the daemon or a remote request."""
    args = _parser().parse_args(argv)
    try:
        if args.command == "daemon":
            daemon.launch(args.submap)
        else:
            remote.launch(_COMMANDS[args.request])
    except KeyboardInterrupt:
        return 130
    except Exception as error:
        print(f"Error: {error}", file=sys.stderr, flush=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())