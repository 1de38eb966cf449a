"""Keyboard events read from the terminal between runs."""

import os
import sys
import time
from collections import deque
from dataclasses import dataclass, replace

IS_WINDOWS = sys.platform == "win32"

if IS_WINDOWS:
    import msvcrt
else:
    import select

ESC = "\x1b"

# msvcrt has no blocking read with a timeout
WINDOWS_POLL_INTERVAL = 0.05

_NAMED_KEYS = {
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
}


@dataclass(frozen=True)
class KeyEvent:
    """A single key press: a key code plus the control and Alt modifiers."""

    code: str
    ctrl: bool = False
    alt: bool = False

    def is_quit(self) -> bool:
        """True for 'q' with any modifiers and for Ctrl+C alone."""
        if self.code == "q":
            return True
        return self.code == "c" and self.ctrl and not self.alt


def _decode_char(ch: str) -> KeyEvent:
    if ch == ESC:
        return KeyEvent("escape")
    if ch in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[ch])
    if "\x01" <= ch <= "\x1a":
        return KeyEvent(chr(ord(ch) + 0x60), ctrl=True)
    if ch < " ":
        return KeyEvent(chr(ord(ch) + 0x40).lower(), ctrl=True)
    return KeyEvent(ch)


def decode_keys(data: bytes) -> list[KeyEvent]:
    """Turn raw bytes read from a raw-mode terminal into key events.

    Control bytes become Ctrl+letter events, ESC before a character marks an
    Alt chord, and CSI/SS3 sequences (arrow and function keys) collapse into a
    single "escape" event.
    """
    text = data.decode("utf-8", errors="replace")
    events = []
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1
        if ch == ESC and i < len(text) and text[i] in "[O":
            i += 1
            # CSI/SS3 parameters run until a final byte in @..~
            while i < len(text) and not ("@" <= text[i] <= "~"):
                i += 1
            i += 1
            events.append(KeyEvent("escape"))
        elif ch == ESC and i < len(text):
            events.append(replace(_decode_char(text[i]), alt=True))
            i += 1
        else:
            events.append(_decode_char(ch))
    return events


class KeyReader:
    """Waits for key presses on a terminal input descriptor."""

    def __init__(self, fd: int | None = None):
        self.fd = fd
        self._pending: deque[KeyEvent] = deque()
        self._closed = False

    def poll(self, timeout: float) -> KeyEvent | None:
        """Return the next key event, or None if none arrived within timeout."""
        if not self._pending:
            data = self._read(max(timeout, 0))
            if data:
                self._pending.extend(decode_keys(data))
        if self._pending:
            return self._pending.popleft()
        return None

    def _read(self, timeout: float) -> bytes:
        if IS_WINDOWS:
            return self._read_windows(timeout)
        if self._closed:
            time.sleep(timeout)
            return b""

        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return b""
        data = os.read(self.fd, 64)
        if not data:
            # EOF; keep honouring the timeout instead of spinning
            self._closed = True
        return data

    def _read_windows(self, timeout: float) -> bytes:
        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return b""
            time.sleep(min(WINDOWS_POLL_INTERVAL, remaining))

        chars = []
        while msvcrt.kbhit():
            ch = msvcrt.getwch()
            if ch in ("\x00", "\xe0"):
                # Special key prefix, the next char is the scan code
                msvcrt.getwch()
                chars.append(ESC + "O")
                chars.append("~")
                continue
            chars.append(ch)
        return "".join(chars).encode("utf-8")
