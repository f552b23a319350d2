"""
Keyboard input for the recorder

Single keypresses are turned into UserEvents and queued on the event loop.
"""

import asyncio
import logging
import os
import sys
from typing import List, Optional

from ..core.data_types import EventKind, UserEvent


CONTROLS = """Controls:
- SPACE: mark intuitive
- R: start/stop 10s recording
- 1-9: send p1-p9
- S: send 's' (start stream)
- D: send 'd' (resume stream)
- H: send 'h' (halt stream)
- Q or Ctrl+C: exit"""

LITERAL_COMMANDS = ("s", "d", "h")


def key_to_event(key: str) -> Optional[UserEvent]:
    """Map one keypress to an event, None for unbound keys"""
    key = key.lower()
    if key in ("q", "\x03"):
        return UserEvent(EventKind.QUIT)
    if key == " ":
        return UserEvent(EventKind.MARK_INTUITIVE)
    if key == "r":
        return UserEvent(EventKind.TOGGLE_RECORDING)
    if key in LITERAL_COMMANDS:
        return UserEvent(EventKind.SEND_COMMAND, key)
    if len(key) == 1 and key in "123456789":
        return UserEvent(EventKind.SEND_COMMAND, f"p{key}")
    return None


def split_keys(text: str) -> List[str]:
    """
    Split terminal input into single keypresses

    Escape sequences (arrows, Home, function keys) are dropped whole so
    their trailing letters never reach key_to_event.
    """
    keys = []
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1
        if ch != "\x1b":
            keys.append(ch)
            continue
        if text[i:i + 1] == "O":
            # SS3: one final byte
            i += 2
        elif text[i:i + 1] == "[":
            # CSI: parameters, then a final byte in @..~
            i += 1
            while i < len(text) and not "@" <= text[i] <= "~":
                i += 1
            i += 1
    return keys


class KeyboardReader:
    """
    Read keypresses from stdin without waiting for Enter

    Used as a context manager: the terminal is switched to cbreak mode on
    enter and restored on exit. Events land on `queue`.
    """

    def __init__(self, queue: "asyncio.Queue[UserEvent]", stream=None):
        self.queue = queue
        self.stream = stream if stream is not None else sys.stdin
        self._saved_attrs = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def __enter__(self) -> "KeyboardReader":
        fd = self.stream.fileno()
        if self.stream.isatty():
            import termios
            import tty
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(fd, self._on_readable)
        return self

    def __exit__(self, *exc_info) -> None:
        fd = self.stream.fileno()
        if self._loop is not None:
            self._loop.remove_reader(fd)
        if self._saved_attrs is not None:
            import termios
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def _on_readable(self) -> None:
        data = os.read(self.stream.fileno(), 32)
        if not data:
            logging.debug("stdin closed, keyboard input stopped")
            self._loop.remove_reader(self.stream.fileno())
            return
        for key in split_keys(data.decode("utf-8", errors="ignore")):
            event = key_to_event(key)
            if event is not None:
                self.queue.put_nowait(event)
