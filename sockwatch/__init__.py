#!/usr/bin/env python3
import os
import sys
import argparse

from .app import App, Loaded, Failed
from .config import CONFIG, CONFIG_PATH, CONNECTION_KINDS, ConfigError, init_config
from .debuglog import debug_log
from .loop import run_app
from .snapshot import SnapshotProvider, FetchError
from .stateful_list import StatefulList
from .terminal import TerminalError, terminal_session
from . import ui

MIN_COLS = 60
MIN_ROWS = 12


def _get_app_version():
    try:
        v_file = os.path.join(os.path.dirname(__file__), "VERSION")
        with open(v_file) as f:
            return f.read().strip()
    except OSError:
        return "0.0.0"


__version__ = _get_app_version()


def check_python_version():
    if sys.version_info < (3, 7):
        print("Python 3.7 or newer is required.")
        sys.exit(1)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="sockwatch",
        description="Live terminal view of TCP/UDP sockets and their owning processes",
    )
    parser.add_argument("--version", action="version", version=f"sockwatch {__version__}")
    parser.add_argument("--interval", type=float, dest="refresh_interval", metavar="SECONDS",
                        help="Seconds between refreshes (default 2)")
    parser.add_argument("--poll-ms", type=int, dest="poll_timeout_ms", metavar="MS",
                        help="Max milliseconds to wait for a key per frame (default 250)")
    parser.add_argument("--kind", choices=CONNECTION_KINDS,
                        help="Socket families to list (default inet)")
    parser.add_argument("--config", default=CONFIG_PATH,
                        help=f"YAML config file (default {CONFIG_PATH})")
    return parser.parse_args(argv)


def check_terminal_size():
    """Return an error message if the terminal is too small, else None."""
    try:
        size = os.get_terminal_size()
    except OSError:
        # not a TTY; curses will complain on its own
        return None
    if size.columns < MIN_COLS or size.lines < MIN_ROWS:
        return (f"Terminal too small: {size.columns}x{size.lines}, "
                f"need at least {MIN_COLS}x{MIN_ROWS}.")
    return None


def main(stdscr, app):
    ui.init_colors()
    run_app(stdscr, app,
            refresh_interval=CONFIG["refresh_interval"],
            poll_ms=CONFIG["poll_timeout_ms"])


def cli_entry(argv=None):
    """terminal command 'sockwatch' entry point"""
    check_python_version()
    args = parse_args(argv)
    try:
        init_config(args.config, {
            "refresh_interval": args.refresh_interval,
            "poll_timeout_ms": args.poll_timeout_ms,
            "kind": args.kind,
        })
    except ConfigError as e:
        print(f"sockwatch: config error: {e}", file=sys.stderr)
        return 1

    msg = check_terminal_size()
    if msg:
        print(msg, file=sys.stderr)
        return 1

    try:
        app = App(SnapshotProvider(kind=CONFIG["kind"]))
        with terminal_session() as stdscr:
            main(stdscr, app)
    except TerminalError as e:
        debug_log(f"TERMINAL: {e}")
        print(f"sockwatch: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


__all__ = [
    "App", "Loaded", "Failed", "StatefulList", "SnapshotProvider", "FetchError",
    "cli_entry", "parse_args",
]


if __name__ == "__main__":
    sys.exit(cli_entry())
