from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Set, Tuple

from .console import ConsoleLog, ConsoleSink
from .errors import LaunchError, ValidationError
from .launch import ExitCode, LaunchSession, ProcessRunner
from .models import Game, GameInput
from .store import RecordStore
from .utils import PathLike, path_exists

logger = logging.getLogger(__name__)


class LauncherFacade:
    """What the UI calls. Every structural change is saved before returning."""

    def __init__(
        self,
        store: RecordStore,
        runner: Optional[ProcessRunner] = None,
        console: Optional[ConsoleLog] = None,
    ) -> None:
        self.store = store
        self.runner = runner or ProcessRunner()
        self.console = console or ConsoleLog()
        self._sessions: Dict[str, LaunchSession] = {}
        # ids between the running check and the end of spawning
        self._launching: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def records(self) -> Tuple[Game, ...]:
        return self.store.records

    def get(self, index: int) -> Game:
        return self.store.get(index)

    # --- add / edit / remove ---

    def add_or_edit(self, existing_id: Optional[str], data: Optional[GameInput]) -> Optional[Game]:
        """Returns the stored game, or None when the dialog was cancelled."""
        if data is None:
            return None
        name = (data.name or "").strip()
        path = (data.path or "").strip()
        args = (data.args or "").strip()
        if not name or not path:
            raise ValidationError("Name and path are required.")

        game = Game(name=name, path=path, args=args)
        if existing_id is not None:
            if self.store.find(existing_id) is None:
                raise KeyError(existing_id)
            self.store.replace(existing_id, game)
            self.console.append(f"Edited game: {game.name}")
        else:
            self.store.add(game)
            self.console.append(f"Added game: {game.name}")
        return game

    def remove(self, index: int) -> Game:
        removed = self.store.remove(index)
        self.console.append(f"Removed game at index {index}")
        return removed

    def remove_id(self, record_id: str) -> Game:
        index, removed = self.store.remove_id(record_id)
        self.console.append(f"Removed game at index {index}")
        return removed

    # --- launch ---

    def test_path(self, game: Game) -> bool:
        return path_exists(game.path)

    def is_running(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._sessions or record_id in self._launching

    def running_ids(self) -> Set[str]:
        with self._lock:
            return set(self._sessions) | self._launching

    def launch(self, index: int) -> LaunchSession:
        game = self.store.get(index)
        with self._lock:
            if game.id in self._sessions or game.id in self._launching:
                raise LaunchError(f"{game.name} is already running.")
            self._launching.add(game.id)

        def _forget(code: ExitCode) -> None:
            with self._lock:
                self._launching.discard(game.id)
                self._sessions.pop(game.id, None)
            logger.info("%s finished: %r", game.name, code)

        self.console.append(f"Launching {game.name} -> {game.path} {game.args}")
        try:
            session = self.runner.launch(game, ConsoleSink(self.console, on_done=_forget))
        except LaunchError as e:
            with self._lock:
                self._launching.discard(game.id)
            self.console.append(f"Launch failed: {e}")
            raise
        with self._lock:
            # a very short-lived child may already have been forgotten
            if game.id in self._launching:
                self._launching.discard(game.id)
                self._sessions[game.id] = session
        return session

    # --- persistence pass-through ---

    def load(self) -> Tuple[Game, ...]:
        return self.store.load()

    def save(self) -> None:
        self.store.save()

    def import_from(self, path: PathLike) -> Tuple[Game, ...]:
        records = self.store.import_from(path)
        self.console.append(f"Imported games from {path}")
        return records

    def export_to(self, path: PathLike) -> None:
        self.store.export_to(path)
        self.console.append(f"Exported games to {path}")
