import curses

from .app import Loaded
from .debuglog import recent_log_lines
from .snapshot import TcpConnection

# Curses color pair IDs (1-based because 0 is reserved)
CP_HEADER = 1   # Pane titles
CP_ACCENT = 2   # Selected row, key hints
CP_TEXT = 3     # Normal body text
CP_WARN = 4     # Errors, fallback messages
CP_BORDER = 5   # Borders

THEME = {
    CP_HEADER: (curses.COLOR_CYAN, -1),
    CP_ACCENT: (curses.COLOR_BLUE, -1),
    CP_TEXT: (curses.COLOR_WHITE, -1),
    CP_WARN: (curses.COLOR_YELLOW, -1),
    CP_BORDER: (curses.COLOR_BLUE, -1),
}

HIGHLIGHT_SYMBOL = ">> "
KEY_HINT = " q quit  ↑/↓ move "

MSG_NOT_FOUND = "Process not found."
MSG_NO_PROCESS = "No process associated with this socket."
MSG_NOT_SELECTED = "No process selected."
MSG_LOAD_ERROR = "Error loading processes."


def init_colors():
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
    except curses.error:
        pass
    for pair_id, (fg, bg) in THEME.items():
        try:
            curses.init_pair(pair_id, fg, bg)
        except curses.error:
            pass


def attr(pair_id, extra=0):
    try:
        return curses.color_pair(pair_id) | extra
    except curses.error:
        return extra


# --------------------------------------------------
# Layout & formatting (pure)
# --------------------------------------------------
def compute_layout(h, w):
    """
    Split the screen into panes, returned as name -> (y, x, height, width).
    Top 80% holds the connection list (70% wide) and the details pane; the
    bottom 20% is the log pane.
    """
    top_h = h * 80 // 100
    list_w = w * 70 // 100
    return {
        "list": (0, 0, top_h, list_w),
        "details": (0, list_w, top_h, w - list_w),
        "logs": (top_h, 0, h - top_h, w),
    }


def format_pids(pids):
    return "[" + ", ".join(str(p) for p in pids) + "]"


def format_connection(rec):
    if isinstance(rec, TcpConnection):
        return (f"TCP {rec.local_ip}:{rec.local_port} -> {rec.remote_ip}:{rec.remote_port} "
                f"{format_pids(rec.pids)} {rec.state.name}")
    return f"UDP {rec.local_ip}:{rec.local_port} -> *:* {format_pids(rec.pids)}"


def detail_lines(app):
    """Lines for the details pane of the selected socket's first owning process."""
    if not isinstance(app.state, Loaded):
        return [MSG_LOAD_ERROR]
    rec = app.selected_connection()
    if rec is None:
        return [MSG_NOT_SELECTED]
    if not rec.pids:
        return [MSG_NO_PROCESS]
    usage = app.lookup_usage(rec.pids[0])
    if usage is None:
        return [MSG_NOT_FOUND]
    return [
        f"PID: {usage.pid}",
        f"Name: {usage.name}",
        f"Status: {usage.status.name}",
        f"CPU: {usage.cpu_percent:.1f}%",
        f"Memory: {usage.memory_kb} KB",
    ]


def scroll_offset(selected, visible):
    """First visible row index so that ``selected`` stays on screen."""
    if selected is None or visible <= 0 or selected < visible:
        return 0
    return selected - visible + 1


# --------------------------------------------------
# UI Draw
# --------------------------------------------------
def _put(win, y, x, text, a=0):
    h, w = win.getmaxyx()
    if y >= h or x >= w - 1:
        return
    try:
        win.addstr(y, x, text[:max(0, w - x - 1)], a)
    except curses.error:
        pass


def draw_box(win, title, title_attr=None):
    try:
        win.attron(attr(CP_BORDER))
        win.box()
        win.attroff(attr(CP_BORDER))
    except curses.error:
        pass
    _put(win, 0, 2, f" {title} ", title_attr if title_attr is not None else attr(CP_HEADER, curses.A_BOLD))


def draw_connections(win, app):
    win.erase()
    h, w = win.getmaxyx()
    if not isinstance(app.state, Loaded):
        draw_box(win, "Error", attr(CP_WARN, curses.A_BOLD))
        _put(win, 1, 1, f"Error fetching socket information: {app.state.error}", attr(CP_WARN))
        return

    conns = app.state.connections
    draw_box(win, f"Connections ({len(conns)})")
    visible = h - 2
    offset = scroll_offset(conns.selected, visible)
    for i, rec in enumerate(conns.items[offset:offset + visible]):
        idx = offset + i
        if idx == conns.selected:
            line = HIGHLIGHT_SYMBOL + format_connection(rec)
            _put(win, i + 1, 1, line.ljust(w - 2), attr(CP_ACCENT, curses.A_REVERSE | curses.A_BOLD))
        else:
            _put(win, i + 1, 1, " " * len(HIGHLIGHT_SYMBOL) + format_connection(rec), attr(CP_TEXT))
    _put(win, h - 1, 2, KEY_HINT, attr(CP_ACCENT))


def draw_details(win, app):
    win.erase()
    draw_box(win, "Details")
    lines = detail_lines(app)
    a = attr(CP_TEXT) if len(lines) > 1 else attr(CP_WARN)
    for i, line in enumerate(lines):
        _put(win, i + 1, 2, line, a)


def draw_logs(win):
    win.erase()
    h, _ = win.getmaxyx()
    draw_box(win, "Logs")
    for i, line in enumerate(recent_log_lines(h - 2)):
        _put(win, i + 1, 1, line, attr(CP_TEXT, curses.A_DIM))


def draw(stdscr, app):
    """Paint one frame. Reads ``app``, never changes it."""
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    panes = compute_layout(h, w)
    drawers = {
        "list": lambda win: draw_connections(win, app),
        "details": lambda win: draw_details(win, app),
        "logs": draw_logs,
    }
    for name, (y, x, ph, pw) in panes.items():
        if ph < 3 or pw < 4:
            continue
        try:
            win = stdscr.derwin(ph, pw, y, x)
        except curses.error:
            continue
        drawers[name](win)
    stdscr.noutrefresh()
    curses.doupdate()
