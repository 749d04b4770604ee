"""Raw keypress input for the nonogram terminal frontend.

Keys are read one at a time, without waiting for Enter, and translated to
action names such as ``"up"``, ``"full"`` or ``"step"``.  Unix terminals are
put in raw mode for the duration of a read; Windows uses msvcrt.
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

# Each action and the plain keys bound to it (both cases for letters).
_BINDINGS: dict[str, str] = {
    "up": "w",
    "down": "s",
    "left": "a",
    "right": "d",
    "full": "f ",
    "empty": "x",
    "quit": "q\x03",
    "random": "r",
    "next": "l",
    "solve": "v",
    "step": "n",
    "peek": "p",
    "moves": "m",
    "enter": "\r\n",
}

_KEY_MAP: dict[str, str] = {
    key: action
    for action, keys in _BINDINGS.items()
    for key in keys + keys.upper()
}

# Final byte of an ``ESC [ x`` arrow-key sequence.
_ARROW_MAP: dict[str, str] = {"A": "up", "B": "down", "C": "right", "D": "left"}


def _resolve(ch: str) -> str:
    return _KEY_MAP.get(ch, ch if ch.isprintable() else "")


def _decode(first: str, read_next: Callable[[], str | None]) -> str:
    """Turn *first* (plus any escape sequence behind it) into an action.

    *read_next* returns the next pending character, or ``None`` when
    nothing follows quickly enough (a bare Escape).
    """
    if first != "\x1b":
        return _resolve(first)
    if read_next() != "[":
        return "quit"
    return _ARROW_MAP.get(read_next() or "", "")


# -- platform readers ---------------------------------------------------------


@contextmanager
def _raw_stdin() -> Iterator[int]:
    """Put the terminal in raw mode and yield its file descriptor."""
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _ready(fd: int, timeout: float) -> bool:
    import select

    return bool(select.select([fd], [], [], timeout)[0])


def _read_char(fd: int) -> str:
    # os.read is unbuffered, so select() still sees the rest of an escape
    # sequence that arrived in the same burst.
    return os.read(fd, 1).decode("utf-8", errors="ignore")


def _key_unix(fd: int) -> str:
    def read_next() -> str | None:
        return _read_char(fd) if _ready(fd, 0.1) else None

    return _decode(_read_char(fd), read_next)


def _wait_windows(timeout: float) -> bool:
    import msvcrt  # type: ignore[import-not-found]

    deadline = time.monotonic() + timeout
    while not msvcrt.kbhit():
        if time.monotonic() >= deadline:
            return False
        time.sleep(0.02)
    return True


def _key_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    def read_next() -> str | None:
        return msvcrt.getwch() if msvcrt.kbhit() else None

    return _decode(msvcrt.getwch(), read_next)


# -- public API ---------------------------------------------------------------


def get_key_timeout(timeout: float) -> str | None:
    """Like :func:`get_key`, but return ``None`` if nothing arrives in time.

    Timing out lets the caller repaint the clock between keypresses.
    """
    if os.name == "nt":
        return _key_windows() if _wait_windows(timeout) else None
    with _raw_stdin() as fd:
        return _key_unix(fd) if _ready(fd, timeout) else None


def get_key() -> str:
    """Block until a key is pressed and return its action.

    Possible return values:
        "up", "down", "left", "right": WASD or the arrow keys
        "full": f or space (guess Full)
        "empty": x (guess Empty)
        "quit": q, Ctrl-C or Escape
        "random": r (random board)
        "next": l (next puzzle)
        "solve": v (auto-solve)
        "step": n (one deduction step)
        "peek": p (toggle solution peek)
        "moves": m (list the guesses made so far)
        "enter": Enter or Return
        "<char>": unmapped printable char
        "": unrecognised key
    """
    if os.name == "nt":
        return _key_windows()
    with _raw_stdin() as fd:
        return _key_unix(fd)
