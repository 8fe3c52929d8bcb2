# gamespace/launch.py
from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from .errors import PathNotFound, SpawnFailure
from .models import Game
from .utils import path_exists

logger = logging.getLogger(__name__)


class _WaitInterrupted:
    def __repr__(self) -> str:
        return "WAIT_INTERRUPTED"


# Terminal event reported instead of an exit code when waiting failed.
WAIT_INTERRUPTED = _WaitInterrupted()

ExitCode = Union[int, _WaitInterrupted]


class OutputSink:
    """Receives events from a launched process.

    Both methods are called from background threads, possibly at the same time
    as each other and as the caller's thread.
    """

    def on_output_line(self, text: str) -> None:
        pass

    def on_exit(self, code: ExitCode) -> None:
        pass


# ──────────────────────────────────────────────────────────────────────────────
# Small helpers
# ──────────────────────────────────────────────────────────────────────────────

def split_args(args: Optional[str]) -> List[str]:
    """Space-separated tokens, empty ones dropped. No quoting."""
    return [t for t in (args or "").split(" ") if t]


def build_command(game: Game) -> List[str]:
    return [game.path] + split_args(game.args)


def working_dir_for(game: Game) -> str:
    return str(Path(game.path).resolve().parent)


def _materialize_first_token(argv: List[str]) -> List[str]:
    """Relative executables would otherwise resolve against the new cwd."""
    if argv and not Path(argv[0]).is_absolute():
        argv[0] = str(Path(argv[0]).resolve())
    return argv


# ──────────────────────────────────────────────────────────────────────────────
# Session
# ──────────────────────────────────────────────────────────────────────────────

class LaunchSession:
    """One spawned child plus its reader and waiter threads."""

    def __init__(self, record: Game, process: Any, sink: OutputSink) -> None:
        self.record = record
        self.process = process
        self.exit_code: Optional[ExitCode] = None
        self._sink = sink
        self._done = threading.Event()
        self.reader = threading.Thread(target=self._read, name="proc-stdout-reader", daemon=True)
        self.waiter = threading.Thread(target=self._wait, name="proc-waiter", daemon=True)

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.process, "pid", None)

    @property
    def running(self) -> bool:
        return not self._done.is_set()

    def start(self) -> "LaunchSession":
        self.reader.start()
        self.waiter.start()
        return self

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until the exit event was reported. Never touches the child."""
        return self._done.wait(timeout)

    def _read(self) -> None:
        stream = self.process.stdout
        if stream is None:
            return
        try:
            for line in stream:
                self._sink.on_output_line(line.rstrip("\r\n"))
        except (OSError, ValueError) as e:
            self._sink.on_output_line(f"Error reading process output: {e}")
        finally:
            try:
                stream.close()
            except (OSError, ValueError):
                pass

    def _wait(self) -> None:
        # exit is reported only after the reader drained everything it could
        self.reader.join()
        try:
            code: ExitCode = self.process.wait()
        except Exception as e:  # noqa: BLE001 - reported through the sink
            logger.warning("Waiting for %s failed: %s", self.record.name, e)
            code = WAIT_INTERRUPTED
        self.exit_code = code
        try:
            self._sink.on_exit(code)
        finally:
            self._done.set()


# ──────────────────────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────────────────────

class ProcessRunner:
    """Spawns one child per launch and streams its combined output to a sink.

    ``popen`` defaults to ``subprocess.Popen`` looked up at call time, so tests
    can swap either the argument or the module attribute.
    """

    def __init__(self, popen: Optional[Callable[..., Any]] = None) -> None:
        self._popen = popen

    def launch(self, game: Game, sink: OutputSink) -> LaunchSession:
        if not path_exists(game.path):
            raise PathNotFound(f"Executable not found: {game.path}")

        argv = _materialize_first_token(build_command(game))
        cwd = working_dir_for(game)
        popen = self._popen or subprocess.Popen
        try:
            p = popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except (OSError, ValueError) as e:
            raise SpawnFailure(f"Failed to launch: {e}", e) from e

        logger.info("Spawned %s (pid=%s) in %s: %s", game.name, getattr(p, "pid", None), cwd, argv)
        return LaunchSession(game, p, sink).start()
