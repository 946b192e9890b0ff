import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from ac_backend.adapters.cache import MemoryCacheStore
from ac_backend.adapters.fs import ContentsWatcher, LocalFilesystemDriver
from ac_backend.adapters.fs import contents_watcher as cw
from ac_backend.container import AssetContainer

from tests.fakes import CountingStore, FakeDriver


class _FakeObserver:
    def __init__(self):
        self.started = False
        self.stopped = False
        self.joined = False
        self.scheduled = []

    def schedule(self, handler, path, recursive=True):
        self.scheduled.append({"handler": handler, "path": path, "recursive": recursive})

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=0):
        _ = timeout
        self.joined = True


def _event(src, dest=None, is_directory=False):
    return SimpleNamespace(src_path=src, dest_path=dest, is_directory=is_directory)


@pytest.fixture
def disk(tmp_path: Path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "one.txt").write_text("1", encoding="utf-8")
    store = CountingStore(MemoryCacheStore())
    container = AssetContainer("disk", LocalFilesystemDriver(tmp_path), store, watcher_enabled=True)
    container.contents().all()
    observer = _FakeObserver()
    watcher = ContentsWatcher(container, observer_factory=lambda: observer)
    return SimpleNamespace(root=tmp_path, container=container, store=store, watcher=watcher, observer=observer)


def test_requires_local_driver():
    container = AssetContainer("fake", FakeDriver({}), MemoryCacheStore())
    with pytest.raises(TypeError):
        ContentsWatcher(container)


def test_start_schedules_recursive_watch_and_stop_joins(disk):
    disk.watcher.start()
    assert disk.watcher.running
    assert disk.observer.started
    assert disk.observer.scheduled[0]["path"] == str(disk.root.resolve())
    assert disk.observer.scheduled[0]["recursive"] is True

    disk.watcher.stop()
    assert not disk.watcher.running
    assert disk.observer.stopped and disk.observer.joined


def test_created_file_is_added_and_saved(disk):
    disk.watcher.start()
    handler = disk.observer.scheduled[0]["handler"]
    (disk.root / "a" / "two.txt").write_text("22", encoding="utf-8")

    handler.on_created(_event(str(disk.root.resolve() / "a" / "two.txt")))
    assert disk.watcher.pending_count() == 1
    assert disk.watcher.flush() == 1

    contents = disk.container.contents()
    assert contents.all()["a/two.txt"]["size"] == 2
    assert ("put", "asset-list-contents-disk", 0) in disk.store.calls
    assert "a/two.txt" in (contents.cached() or {})


def test_deleted_directory_forgets_descendants(disk):
    handler = cw._ContentsEventHandler(disk.watcher)
    handler.on_deleted(_event(str(disk.root.resolve() / "a"), is_directory=True))
    disk.watcher.flush()

    listing = disk.container.contents().all()
    assert "a" not in listing
    assert "a/one.txt" not in listing


def test_moved_directory_reindexes_children(disk):
    (disk.root / "a").rename(disk.root / "b")
    handler = cw._ContentsEventHandler(disk.watcher)
    root = disk.root.resolve()
    handler.on_moved(_event(str(root / "a"), str(root / "b"), is_directory=True))
    disk.watcher.flush()

    listing = disk.container.contents().all()
    assert set(listing) == {"b", "b/one.txt"}


def test_directory_modified_events_are_ignored(disk):
    handler = cw._ContentsEventHandler(disk.watcher)
    handler.on_modified(_event(str(disk.root.resolve() / "a"), is_directory=True))
    assert disk.watcher.pending_count() == 0


def test_events_outside_root_are_ignored(disk, tmp_path_factory):
    other = tmp_path_factory.mktemp("other")
    disk.watcher.queue(cw.OP_ADD, str(other / "x.txt"))
    disk.watcher.queue(cw.OP_ADD, str(disk.root.resolve()))
    assert disk.watcher.pending_count() == 0


def test_latest_event_per_path_wins(disk):
    path = str(disk.root.resolve() / "a" / "one.txt")
    disk.watcher.queue(cw.OP_ADD, path)
    disk.watcher.queue(cw.OP_FORGET, path)
    (disk.root / "a" / "one.txt").unlink()
    assert disk.watcher.flush() == 1
    assert "a/one.txt" not in disk.container.contents().all()


def test_flush_without_events_does_not_save(disk):
    puts_before = disk.store.count("put")
    assert disk.watcher.flush() == 0
    assert disk.store.count("put") == puts_before


def test_auto_flush_schedules_debounced_timer(disk, monkeypatch):
    started = []

    class _FakeTimer:
        def __init__(self, delay, fn):
            self.delay = delay
            self.fn = fn
            self.daemon = False
            self.cancelled = False

        def start(self):
            started.append(self)

        def cancel(self):
            self.cancelled = True

    monkeypatch.setattr(cw.threading, "Timer", _FakeTimer)
    disk.watcher.start(auto_flush=True)
    (disk.root / "c.txt").write_text("c", encoding="utf-8")
    disk.watcher.queue(cw.OP_ADD, str(disk.root.resolve() / "c.txt"))
    disk.watcher.queue(cw.OP_ADD, str(disk.root.resolve() / "c.txt"))

    assert len(started) == 2
    assert started[0].cancelled
    started[-1].fn()
    assert "c.txt" in disk.container.contents().all()


def test_forget_then_add_becomes_replace():
    pending = {}
    cw._merge(pending, "d", cw.OP_FORGET)
    cw._merge(pending, "d", cw.OP_ADD)
    assert pending == {"d": cw.OP_REPLACE}

    cw._merge(pending, "d", cw.OP_FORGET)
    assert pending == {"d": cw.OP_FORGET}


def test_directory_recreated_before_flush_drops_old_children(disk, tmp_path_factory):
    (disk.root / "d").mkdir()
    (disk.root / "d" / "old.txt").write_text("old", encoding="utf-8")
    contents = disk.container.contents()
    contents.add("d/old.txt")
    assert "d/old.txt" in contents.all()

    root = disk.root.resolve()
    (disk.root / "d").rename(tmp_path_factory.mktemp("elsewhere") / "d")
    disk.watcher.queue(cw.OP_FORGET, str(root / "d"))
    (disk.root / "d").mkdir()
    disk.watcher.queue(cw.OP_ADD, str(root / "d"))
    disk.watcher.flush()

    listing = contents.all()
    assert listing["d"]["type"] == "dir"
    assert "d/old.txt" not in listing


def test_failed_flush_requeues_unapplied_events(disk, monkeypatch):
    (disk.root / "b.txt").write_text("b", encoding="utf-8")
    disk.watcher.queue(cw.OP_ADD, str(disk.root.resolve() / "b.txt"))
    puts_before = disk.store.count("put")

    def broken(path):
        raise OSError("disk went away")

    monkeypatch.setattr(disk.watcher._driver, "last_modified", broken)
    with pytest.raises(OSError):
        disk.watcher.flush()
    assert disk.watcher.pending_count() == 1
    assert disk.store.count("put") == puts_before

    monkeypatch.undo()
    assert disk.watcher.flush() == 1
    assert "b.txt" in disk.container.contents().all()
    assert disk.store.count("put") == puts_before + 1


def test_timer_flush_failure_is_logged(disk, monkeypatch, caplog):
    disk.watcher.queue(cw.OP_ADD, str(disk.root.resolve() / "a" / "one.txt"))

    def broken():
        raise RuntimeError("boom")

    monkeypatch.setattr(disk.watcher, "flush", broken)
    with caplog.at_level(logging.ERROR):
        disk.watcher._flush_from_timer()

    assert any("Watcher flush failed" in r.message and r.exc_info for r in caplog.records)
