import time

import pytest

from cliphist.reader import ReadError
from cliphist.storage import StorageManager


@pytest.fixture
def storage():
    mgr = StorageManager(db_path=":memory:")
    yield mgr
    mgr.close()


class FakeReader:
    """Clipboard stand-in. Set ``content`` to a ReadError to simulate a failed read."""

    def __init__(self, content: str | ReadError = ""):
        self.content = content
        self.reads = 0

    def read(self) -> str:
        self.reads += 1
        if isinstance(self.content, ReadError):
            raise self.content
        return self.content


@pytest.fixture
def fake_reader():
    return FakeReader()


@pytest.fixture
def wait_until():
    def _wait_until(predicate, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.005)
        return predicate()

    return _wait_until
