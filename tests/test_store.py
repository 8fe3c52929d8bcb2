import os
import shutil
import tempfile
from pathlib import Path

import pytest

from compat import touch
from gamespace.codec import encode_record
from gamespace.errors import PersistFailure
from gamespace.models import Game
from gamespace.store import RecordStore, read_records, write_records


@pytest.fixture
def tmp():
    d = Path(tempfile.mkdtemp(prefix="gamespace_test_"))
    try:
        yield d
    finally:
        shutil.rmtree(d, ignore_errors=True)


def _games(n, prefix="g"):
    return [Game(f"{prefix}{i}", f"/bin/{prefix}{i}", "") for i in range(n)]


def test_missing_file_is_empty(tmp):
    assert read_records(tmp / "nope.txt") == []
    store = RecordStore(tmp / "nope.txt")
    assert store.load() == ()


def test_skip_malformed_keeps_order(tmp):
    good = _games(3)
    lines = [
        encode_record(good[0]),
        "just-a-name",
        encode_record(good[1]),
        "name|path-only",
        "",
        encode_record(good[2]),
    ]
    f = tmp / "games.txt"
    f.write_text("\r\n".join(lines) + "\n", encoding="utf-8")
    assert read_records(f) == good


def test_write_then_read(tmp):
    f = tmp / "games.txt"
    games = [Game("a|b", "/x\\y", "one\ntwo"), Game("plain", "/p", "")]
    write_records(f, games)
    assert read_records(f) == games
    assert len(f.read_text(encoding="utf-8").splitlines()) == 2


def test_failed_write_keeps_previous_content(tmp, monkeypatch):
    f = tmp / "games.txt"
    write_records(f, _games(2))
    before = f.read_bytes()

    import gamespace.utils as U

    def _boom(*a, **kw):
        raise OSError("disk full")

    monkeypatch.setattr(U.os, "replace", _boom)
    with pytest.raises(PersistFailure):
        write_records(f, _games(5))
    assert f.read_bytes() == before
    assert [p.name for p in tmp.iterdir()] == ["games.txt"], "temp file left behind"


def test_every_mutation_is_saved(tmp):
    f = tmp / "games.txt"
    store = RecordStore(f)
    a, b = Game("A", "/a"), Game("B", "/b", "-x")
    store.add(a)
    store.add(b)
    assert read_records(f) == [a, b]

    store.replace(a.id, Game("A2", "/a2"))
    assert read_records(f) == [Game("A2", "/a2"), b]
    assert store.get(0).id == a.id, "edit must keep the record id"

    removed = store.remove(1)
    assert removed is b
    assert read_records(f) == [Game("A2", "/a2")]


def test_import_replaces(tmp):
    store = RecordStore(tmp / "games.txt")
    store.replace_all(_games(5))
    ext = tmp / "other.txt"
    write_records(ext, _games(2, prefix="imp"))

    store.import_from(ext)
    assert [g.name for g in store] == ["imp0", "imp1"]
    assert read_records(tmp / "games.txt") == _games(2, prefix="imp")


def test_failed_import_leaves_store_alone(tmp):
    store = RecordStore(tmp / "games.txt")
    store.replace_all(_games(3))
    unreadable = tmp / "a_directory"
    unreadable.mkdir()
    with pytest.raises(PersistFailure):
        store.import_from(unreadable)
    assert len(store) == 3
    assert read_records(tmp / "games.txt") == _games(3)


def test_import_of_missing_file_leaves_store_alone(tmp):
    store = RecordStore(tmp / "games.txt")
    store.replace_all(_games(5))
    with pytest.raises(PersistFailure):
        store.import_from(tmp / "typo.txt")
    assert len(store) == 5
    assert read_records(tmp / "games.txt") == _games(5)


def test_undecodable_line_is_skipped(tmp):
    f = tmp / "games.txt"
    f.write_bytes(b"a|/a|\nb|/b|\n\xff\xfe bad|/x|\nc|/c|\n")
    assert [g.name for g in read_records(f)] == ["a", "b", "c"]

    store = RecordStore(f)
    store.load()
    store.add(Game("new", "/n"))
    assert [g.name for g in read_records(f)] == ["a", "b", "c", "new"]


def test_unreadable_backing_file_is_never_overwritten(tmp, monkeypatch):
    f = tmp / "games.txt"
    write_records(f, _games(2))
    before = f.read_bytes()

    import gamespace.store as S

    def _denied(self):
        raise PermissionError(13, "Permission denied")

    store = RecordStore(f)
    monkeypatch.setattr(S.Path, "read_bytes", _denied)
    with pytest.raises(PersistFailure):
        store.load()
    monkeypatch.undo()
    assert store.load_failed

    with pytest.raises(PersistFailure):
        store.add(Game("new", "/n"))
    assert f.read_bytes() == before, "backing file overwritten after a failed load"
    assert store.dirty and [g.name for g in store] == ["new"]

    # an explicit import is allowed to replace it
    ext = tmp / "other.txt"
    write_records(ext, _games(1, prefix="imp"))
    store.import_from(ext)
    assert not store.load_failed and not store.dirty
    assert read_records(f) == _games(1, prefix="imp")


def test_remove_by_id(tmp):
    store = RecordStore(tmp / "games.txt")
    store.replace_all(_games(3))
    target = store.get(1)
    index, removed = store.remove_id(target.id)
    assert (index, removed) == (1, target)
    assert [g.name for g in read_records(tmp / "games.txt")] == ["g0", "g2"]
    with pytest.raises(KeyError):
        store.remove_id(target.id)


def test_export_does_not_touch_backing_file(tmp):
    f = tmp / "games.txt"
    store = RecordStore(f)
    store.replace_all(_games(2))
    mtime = f.stat().st_mtime_ns
    store.export_to(tmp / "out.txt")
    assert read_records(tmp / "out.txt") == _games(2)
    assert store.backing_file == f and f.stat().st_mtime_ns == mtime


def test_listeners_see_new_snapshot(tmp):
    store = RecordStore(tmp / "games.txt")
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.add(Game("A", "/a"))
    store.add(Game("B", "/b"))
    unsubscribe()
    store.remove(0)
    assert [[g.name for g in snap] for snap in seen] == [["A"], ["A", "B"]]


def test_listeners_run_after_the_save(tmp, monkeypatch):
    f = tmp / "games.txt"
    store = RecordStore(f)
    on_disk = []
    store.subscribe(lambda snap: on_disk.append(read_records(f)))
    store.add(Game("A", "/a"))
    assert on_disk == [[Game("A", "/a")]], "listener saw a snapshot not yet on disk"

    import gamespace.store as S

    def _boom(*a, **kw):
        raise OSError("read-only")

    monkeypatch.setattr(S, "atomic_write_lines", _boom)
    seen = []
    store.subscribe(seen.append)
    with pytest.raises(PersistFailure):
        store.add(Game("B", "/b"))
    # memory keeps the change, so listeners still hear about it
    assert [[g.name for g in snap] for snap in seen] == [["A", "B"]]


def test_failed_save_keeps_memory_and_marks_dirty(tmp, monkeypatch):
    store = RecordStore(tmp / "games.txt")
    store.add(Game("A", "/a"))

    import gamespace.store as S
    real = S.atomic_write_lines

    def _boom(*a, **kw):
        raise OSError("read-only")

    monkeypatch.setattr(S, "atomic_write_lines", _boom)
    with pytest.raises(PersistFailure):
        store.add(Game("B", "/b"))
    assert [g.name for g in store] == ["A", "B"]
    assert store.dirty

    monkeypatch.setattr(S, "atomic_write_lines", real)
    store.save()
    assert not store.dirty
    assert [g.name for g in read_records(tmp / "games.txt")] == ["A", "B"]


@pytest.mark.skipif(os.name == "nt", reason="newline translation differs")
def test_lines_end_with_platform_separator(tmp):
    f = tmp / "games.txt"
    write_records(f, _games(1))
    assert f.read_bytes().endswith(os.linesep.encode())
