import curses
from contextlib import contextmanager

from .debuglog import debug_log


class TerminalError(Exception):
    pass


def _restore(stdscr):
    """Undo every terminal mode change, running all steps even if some fail."""
    failures = []
    steps = [
        ("keypad", lambda: stdscr.keypad(False)),
        ("echo", curses.echo),
        ("nocbreak", curses.nocbreak),
        ("curs_set", lambda: curses.curs_set(1)),
        ("endwin", curses.endwin),
    ]
    for name, step in steps:
        try:
            step()
        except curses.error as e:
            # curs_set is unsupported on some terminals; not a restoration failure
            if name == "curs_set":
                continue
            debug_log(f"TERMINAL: {name} failed during restore: {e}")
            failures.append(f"{name}: {e}")
    return failures


@contextmanager
def terminal_session():
    """
    Put the terminal into full-screen cbreak mode for the duration of the block.

    Like ``curses.wrapper`` the terminal is restored on every exit path; a
    restore that fails after a clean exit is reported as TerminalError once all
    steps have run; if the block raised, that exception propagates instead.
    """
    try:
        stdscr = curses.initscr()
    except curses.error as e:
        raise TerminalError(f"cannot initialise terminal: {e}") from e
    try:
        curses.noecho()
        curses.cbreak()
        stdscr.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
    except curses.error as e:
        _restore(stdscr)
        raise TerminalError(f"cannot enter raw mode: {e}") from e

    debug_log("TERMINAL: Entered full-screen mode")
    try:
        yield stdscr
    except BaseException:
        # the body's exception wins; restore failures are only logged
        _restore(stdscr)
        raise
    failures = _restore(stdscr)
    if failures:
        raise TerminalError("cannot restore terminal: " + "; ".join(failures))
    debug_log("TERMINAL: Restored")
