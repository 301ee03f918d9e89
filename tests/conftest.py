"""Shared fakes: an in-memory filesystem and a scheduler driven by virtual milliseconds."""

import io
import random
import threading

import pytest

from player.core.controller import PlayerController
from player.core.state import Config
from player.fs import LocalFileSystem


class FakeFileSystem(LocalFileSystem):
    """Files live in a dict; MIME types still come from the path."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.unreadable = set()
        self.broken = set()
        self.opened = []

    def exists(self, path):
        return path in self.files

    def size(self, path):
        try:
            return len(self.files[path])
        except KeyError:
            raise FileNotFoundError(path)

    def open_read_stream(self, path):
        if path in self.unreadable or path not in self.files:
            raise FileNotFoundError(path)
        cls = _BrokenStream if path in self.broken else io.BytesIO
        stream = cls(self.files[path])
        self.opened.append(stream)
        return stream


class _BrokenStream(io.BytesIO):
    """Serves one read, then fails like a disk dropping out."""

    def __init__(self, data):
        super().__init__(data)
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("read failed")
        return super().read(size)


class BlockingFileSystem(FakeFileSystem):
    """exists() on a path in ``blocked`` waits for ``gate``; ``entered`` is set on arrival."""

    def __init__(self, files=None, blocked=()):
        super().__init__(files)
        self.blocked = set(blocked)
        self.entered = threading.Event()
        self.gate = threading.Event()

    def exists(self, path):
        if path in self.blocked:
            self.entered.set()
            self.gate.wait(5)
        return super().exists(path)


class _Handle:
    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Nothing fires until the test calls tick() or advance()."""

    def __init__(self):
        self.now = 0
        self._handles = []

    def call_later(self, delay_ms, callback):
        h = _Handle(self.now + max(0, delay_ms), callback)
        self._handles.append(h)
        return h

    @property
    def scheduled(self):
        return [h for h in self._handles if not h.cancelled]

    def advance(self, ms):
        self.now += ms
        while True:
            due = [h for h in self._handles if not h.cancelled and h.due <= self.now]
            if not due:
                break
            h = min(due, key=lambda x: x.due)
            self._handles.remove(h)
            h.callback()

    def tick(self):
        self.advance(0)


class Recorder:
    def __init__(self):
        self.sent = []

    def __call__(self, name, payload):
        self.sent.append((name, payload))

    def of(self, name):
        return [p for n, p in self.sent if n == name]


@pytest.fixture
def fs():
    return FakeFileSystem(
        {
            "a.mp4": b"a" * 10,
            "b.mp4": b"bb" * 10,
            "c.webm": b"c" * 7,
            "d.mkv": b"d" * 3,
        }
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def config():
    return Config(profile="test", resync_interval_s=3600.0)


@pytest.fixture
def controller(config, fs, scheduler, recorder):
    return PlayerController(config, recorder, fs=fs, scheduler=scheduler, rng=random.Random(7))


@pytest.fixture
def blocking_fs():
    fs = BlockingFileSystem({"a.mp4": b"a" * 10, "b.mp4": b"bb" * 10}, blocked={"a.mp4"})
    yield fs
    fs.gate.set()
