"""Interactive session loop and the build progress indicator.

The session owns the terminal for its lifetime: it enters raw mode on the
alternate screen, redraws the window around the focus after every key, and
restores the terminal on exit.
"""

from __future__ import annotations

import sys
import threading
from typing import TextIO

from .input import read_key
from .render import render_around_focus
from .terminal import TerminalController
from .tree_model import FOCUS_DOWN, FOCUS_LEFT, FOCUS_RIGHT, FOCUS_UP, TOGGLE_FOLD, FileTree
from .ui_theme import UITheme

BUILD_PROGRESS_INTERVAL_SECONDS = 0.5

# Up/down walk siblings; left/right leave or enter a directory.
KEY_COMMANDS: dict[str, str] = {
    "UP": FOCUS_LEFT,
    "k": FOCUS_LEFT,
    "DOWN": FOCUS_RIGHT,
    "j": FOCUS_RIGHT,
    "LEFT": FOCUS_UP,
    "h": FOCUS_UP,
    "RIGHT": FOCUS_DOWN,
    "l": FOCUS_DOWN,
    "SPACE": TOGGLE_FOLD,
    "ENTER_CR": TOGGLE_FOLD,
    "ENTER_LF": TOGGLE_FOLD,
    "TAB": TOGGLE_FOLD,
}

QUIT_KEYS = frozenset({"q", "Q", "CTRL_C", "CTRL_D", "ESC"})


class BuildProgress:
    """Print ``building`` followed by a dot per interval until stopped.

    Runs on one daemon thread and talks to the caller only through a stop
    event, so it never touches the tree being built.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        interval: float = BUILD_PROGRESS_INTERVAL_SECONDS,
    ) -> None:
        self._stream = stream if stream is not None else sys.stderr
        self._interval = interval
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    def _worker(self) -> None:
        self._stream.write("building")
        self._stream.flush()
        while not self._done.wait(self._interval):
            self._stream.write(".")
            self._stream.flush()
        self._stream.write("\n")
        self._stream.flush()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._worker, name="itree-build-progress", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._done.set()
        if self._thread is not None:
            self._thread.join()

    def __enter__(self) -> BuildProgress:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()


def command_for_key(key: str) -> str | None:
    return KEY_COMMANDS.get(key)


def draw_screen(terminal: TerminalController, tree: FileTree, theme: UITheme) -> None:
    columns, rows = terminal.size()
    terminal.write(theme.clear_screen + render_around_focus(tree, rows, columns, theme))


def run_session(tree: FileTree, theme: UITheme, stdin_fd: int, stdout_fd: int) -> None:
    """Browse ``tree`` interactively until a quit key or end of input."""
    terminal = TerminalController(stdin_fd, stdout_fd)
    with terminal.raw_mode():
        while True:
            draw_screen(terminal, tree, theme)
            key = read_key(stdin_fd)
            if not key or key in QUIT_KEYS:
                break
            command = command_for_key(key)
            if command is None:
                continue
            tree.apply(command)
