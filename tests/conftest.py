import sys

import pytest

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ac_backend.adapters.cache import MemoryCacheStore  # noqa: E402
from ac_backend.container import AssetContainer  # noqa: E402

from tests.fakes import CountingStore, FakeDriver  # noqa: E402


@pytest.fixture
def driver():
    return FakeDriver(
        {
            "a": ("dir", 100),
            "a/one.txt": ("file", 101, 10),
            "a/b": ("dir", 102),
            "a/b/two.jpg": ("file", 103, 20),
            "a/.gitkeep": ("file", 104, 0),
            ".meta": ("dir", 105),
            ".meta/a.yaml": ("file", 106, 5),
            "a/.meta": ("dir", 107),
            "a/.meta/one.txt.yaml": ("file", 108, 5),
            "root.png": ("file", 109, 30),
        }
    )


@pytest.fixture
def store():
    return CountingStore(MemoryCacheStore())


@pytest.fixture
def container(driver, store):
    return AssetContainer("main", driver, store)
