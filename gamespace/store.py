# gamespace/store.py
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .codec import decode_record, encode_record
from .errors import DecodeError, PersistFailure
from .models import Game
from .utils import PathLike, atomic_write_lines

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Game, ...]], None]

# ──────────────────────────────────────────────────────────────────────────────
# File format
# ──────────────────────────────────────────────────────────────────────────────

def read_records(path: PathLike, missing_ok: bool = True) -> List[Game]:
    """Decode every well-formed line of ``path``.

    A missing file is an empty list unless ``missing_ok`` is false. Lines that
    are not UTF-8 or lack fields are logged and skipped one by one.
    """
    p = Path(path)
    if not p.exists():
        if missing_ok:
            return []
        raise PersistFailure(f"No such file: {p}")
    try:
        data = p.read_bytes()
    except OSError as e:
        raise PersistFailure(f"Failed to read games from {p}", e) from e

    records: List[Game] = []
    # split on "\n" only so a stray "\r" inside a field is not a line break
    for lineno, raw in enumerate(data.split(b"\n"), start=1):
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        if not raw:
            continue
        try:
            records.append(decode_record(raw.decode("utf-8")))
        except UnicodeDecodeError as e:
            logger.warning("Skipping %s:%d: not UTF-8 (%s)", p, lineno, e)
        except DecodeError as e:
            logger.debug("Skipping %s:%d: %s", p, lineno, e)
    return records


def write_records(path: PathLike, records: Sequence[Game]) -> None:
    try:
        atomic_write_lines(path, (encode_record(g) for g in records))
    except OSError as e:
        raise PersistFailure(f"Failed to save games to {path}", e) from e


# ──────────────────────────────────────────────────────────────────────────────
# Store
# ──────────────────────────────────────────────────────────────────────────────

class RecordStore:
    """Ordered games backed by one file, rewritten in full after every mutation.

    A failed save keeps the in-memory change and sets ``dirty`` until the next
    save succeeds. If the backing file could not be read, ``load_failed`` is set
    and nothing is written over it until a load or an import succeeds.
    """

    def __init__(self, backing_file: PathLike) -> None:
        self.backing_file = Path(backing_file)
        self._records: List[Game] = []
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self.dirty = False
        self.load_failed = False

    # --- read side ---

    @property
    def records(self) -> Tuple[Game, ...]:
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Game]:
        return iter(self.records)

    def get(self, index: int) -> Game:
        with self._lock:
            if not 0 <= index < len(self._records):
                raise IndexError(f"no game at index {index}")
            return self._records[index]

    def index_of(self, record_id: str) -> int:
        with self._lock:
            for i, g in enumerate(self._records):
                if g.id == record_id:
                    return i
        return -1

    def find(self, record_id: str) -> Optional[Game]:
        with self._lock:
            i = self.index_of(record_id)
            return self._records[i] if i >= 0 else None

    # --- listeners ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.records
        for cb in list(self._listeners):
            try:
                cb(snapshot)
            except Exception:
                logger.exception("Store listener %r failed", cb)

    # --- persistence ---

    def load(self) -> Tuple[Game, ...]:
        try:
            loaded = read_records(self.backing_file)
        except PersistFailure:
            self.load_failed = True
            raise
        with self._lock:
            self._records = loaded
            self.dirty = False
            self.load_failed = False
        logger.info("Loaded %d game(s) from %s", len(loaded), self.backing_file)
        self._notify()
        return self.records

    def save(self) -> None:
        with self._lock:
            if self.load_failed:
                self.dirty = True
                raise PersistFailure(
                    f"Not saving: {self.backing_file} could not be loaded and would be overwritten"
                )
            try:
                write_records(self.backing_file, self._records)
            except PersistFailure:
                self.dirty = True
                raise
            self.dirty = False

    def export_to(self, path: PathLike) -> None:
        write_records(path, self.records)
        logger.info("Exported %d game(s) to %s", len(self), path)

    def import_from(self, path: PathLike) -> Tuple[Game, ...]:
        """Replace every record with the content of ``path``."""
        imported = read_records(path, missing_ok=False)
        logger.info("Importing %d game(s) from %s", len(imported), path)
        with self._lock:
            # an explicit replacement may overwrite an unreadable backing file
            self.load_failed = False
        return self.replace_all(imported)

    # --- mutations; each ends with a save to the backing file ---

    def _commit(self) -> Tuple[Game, ...]:
        try:
            self.save()
        finally:
            self._notify()
        return self.records

    def add(self, record: Game) -> Tuple[Game, ...]:
        with self._lock:
            self._records.append(record)
        return self._commit()

    def replace(self, record_id: str, record: Game) -> Tuple[Game, ...]:
        with self._lock:
            i = self.index_of(record_id)
            if i < 0:
                raise KeyError(record_id)
            record.id = record_id
            self._records[i] = record
        return self._commit()

    def remove(self, index: int) -> Game:
        with self._lock:
            removed = self.get(index)
            del self._records[index]
        self._commit()
        return removed

    def replace_all(self, records: Sequence[Game]) -> Tuple[Game, ...]:
        with self._lock:
            self._records = list(records)
        return self._commit()

    def remove_id(self, record_id: str) -> Tuple[int, Game]:
        """Remove by id; returns the index it had and the record."""
        with self._lock:
            i = self.index_of(record_id)
            if i < 0:
                raise KeyError(record_id)
            removed = self._records.pop(i)
        self._commit()
        return i, removed
