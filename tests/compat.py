#!/usr/bin/env python3
# Shared helpers for the test modules; also lets them run from a checkout.

from __future__ import annotations
import sys
import threading
from pathlib import Path
from typing import List

# Ensure project root import
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gamespace.launch import OutputSink


def touch(p: Path, data: bytes = b"") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data or b"stub")
    return p


class RecordingSink(OutputSink):
    def __init__(self):
        self.events: List[tuple] = []
        self.exited = threading.Event()
        self._lock = threading.Lock()

    def on_output_line(self, text):
        with self._lock:
            self.events.append(("line", text))

    def on_exit(self, code):
        with self._lock:
            self.events.append(("exit", code))
        self.exited.set()

    @property
    def lines(self):
        return [v for k, v in self.events if k == "line"]


class FakeStdout:
    """Iterates canned lines; optionally raises after them like a broken pipe."""

    def __init__(self, lines, error=None):
        self._lines = list(lines)
        self._error = error
        self.closed = False

    def __iter__(self):
        for line in self._lines:
            yield line
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True


def mock_popen_calls(lines=("a\n", "b\n", "c\n"), returncode=0, read_error=None, wait_error=None):
    calls = []

    class _P:
        pid = 4242

        def __init__(self, *a, **kw):
            calls.append((a, kw))
            self.stdout = FakeStdout(lines, read_error)
            self.returncode = None

        def wait(self):
            if wait_error is not None:
                raise wait_error
            self.returncode = returncode
            return returncode

    return _P, calls
