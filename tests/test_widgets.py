import curses
from unittest import mock

from spacewar.widgets import (
    CONTINUE_HINT,
    MESSAGE_HEIGHT,
    MESSAGE_WIDTH,
    draw_box_with_shadow,
    show_message,
)


class FakeWindow:
    def __init__(self, height, width, fill=".", keys=(ord("k"),)):
        self.height = height
        self.width = width
        self.fill = fill
        self.grid = [[fill] * width for _ in range(height)]
        self.keys = list(keys)
        self.calls = []

    def getmaxyx(self):
        return self.height, self.width

    def _put(self, y, x, ch):
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise curses.error("out of range")
        self.grid[y][x] = ch if isinstance(ch, str) else chr(ch & 0xFF)

    def addstr(self, y, x, text):
        for offset, ch in enumerate(text):
            self._put(y, x + offset, ch)

    def addch(self, y, x, ch):
        self._put(y, x, ch)

    def hline(self, y, x, ch, n):
        for offset in range(n):
            if 0 <= x + offset < self.width and 0 <= y < self.height:
                self._put(y, x + offset, ch)

    def vline(self, y, x, ch, n):
        for offset in range(n):
            if 0 <= y + offset < self.height and 0 <= x < self.width:
                self._put(y + offset, x, ch)

    def attron(self, attr):
        self.calls.append(("attron", attr))

    def attroff(self, attr):
        self.calls.append(("attroff", attr))

    def bkgd(self, ch, attr=0):
        self.calls.append(("bkgd", ch, attr))

    def box(self):
        self.calls.append(("box",))

    def refresh(self):
        self.calls.append(("refresh",))

    def nodelay(self, flag):
        self.calls.append(("nodelay", flag))

    def getch(self):
        return self.keys.pop(0)

    def row(self, y):
        return "".join(self.grid[y])


def test_shadow_fills_right_and_bottom_edges():
    screen = FakeWindow(30, 80)
    y, x, h, w = 3, 5, 10, 20
    draw_box_with_shadow(screen, y, x, h, w)
    for row in range(y + 1, y + h + 1):
        assert screen.row(row)[x + w:x + w + 2] == "  "
    assert screen.row(y + h)[x + 2:x + 2 + w] == " " * w
    assert screen.row(y) == "." * 80
    assert screen.row(y + 1)[x:x + w] == "." * w


def test_shadow_is_clipped_at_screen_edge():
    screen = FakeWindow(10, 30)
    draw_box_with_shadow(screen, 2, 20, 12, 9)
    assert screen.row(3)[29] == " "
    assert screen.row(2) == "." * 30


def test_shadow_balances_attributes():
    screen = FakeWindow(30, 80)
    draw_box_with_shadow(screen, 1, 1, 4, 4)
    ons = [c[1] for c in screen.calls if c[0] == "attron"]
    offs = [c[1] for c in screen.calls if c[0] == "attroff"]
    assert ons == offs
    assert all(attr & curses.A_DIM for attr in ons)


def test_show_message_writes_title_message_and_hint():
    screen = FakeWindow(30, 100)
    win = FakeWindow(MESSAGE_HEIGHT, MESSAGE_WIDTH, fill=" ", keys=[ord("z")])
    with mock.patch("curses.newwin", return_value=win) as newwin:
        key = show_message(screen, "NOTICE", "Server not found")
    assert key == ord("z")
    height, width, start_y, start_x = newwin.call_args.args
    assert (height, width) == (MESSAGE_HEIGHT, MESSAGE_WIDTH)
    assert start_y == (30 - MESSAGE_HEIGHT) // 2
    assert start_x == (100 - MESSAGE_WIDTH) // 2
    assert "NOTICE" in win.row(1)
    assert "Server not found" in win.row(4)
    assert CONTINUE_HINT in win.row(MESSAGE_HEIGHT - 2)
    assert ("box",) in win.calls
    assert ("nodelay", False) in win.calls


def test_show_message_centres_title():
    screen = FakeWindow(30, 100)
    win = FakeWindow(MESSAGE_HEIGHT, MESSAGE_WIDTH, fill=" ")
    with mock.patch("curses.newwin", return_value=win):
        key = show_message(screen, "TITLE", "x")
    assert key == ord("k")
    line = win.row(1)
    left = line.index("TITLE")
    right = MESSAGE_WIDTH - (left + len("TITLE"))
    assert abs(left - right) <= 1