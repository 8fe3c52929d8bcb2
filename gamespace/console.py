from __future__ import annotations

import threading
from collections import deque
from typing import Callable, Deque, List, Optional

from .launch import WAIT_INTERRUPTED, ExitCode, OutputSink


class ConsoleLog:
    """Bounded line buffer shared by every launch; the web page polls it."""

    def __init__(self, max_lines: int = 2000) -> None:
        self._lines: Deque[str] = deque(maxlen=max_lines)
        self._lock = threading.Lock()
        self._seq = 0  # total lines ever appended

    def append(self, text: str) -> None:
        with self._lock:
            for line in text.splitlines() or [""]:
                self._lines.append(line)
                self._seq += 1

    def lines(self, since: Optional[int] = None) -> List[str]:
        """All buffered lines, or only those appended after sequence ``since``."""
        with self._lock:
            buf = list(self._lines)
            if since is None:
                return buf
            missing = self._seq - since
            if missing <= 0:
                return []
            return buf[-missing:]

    @property
    def seq(self) -> int:
        return self._seq

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()


def describe_exit(code: ExitCode) -> str:
    if code is WAIT_INTERRUPTED:
        return "Process wait interrupted"
    return f"Process exited with code: {code}"


class ConsoleSink(OutputSink):
    """Writes one launch's output to the console; calls ``on_done`` after the exit line."""

    def __init__(self, console: ConsoleLog, on_done: Optional[Callable[[ExitCode], None]] = None) -> None:
        self.console = console
        self._on_done = on_done

    def on_output_line(self, text: str) -> None:
        self.console.append(text)

    def on_exit(self, code: ExitCode) -> None:
        self.console.append(describe_exit(code))
        if self._on_done is not None:
            self._on_done(code)
