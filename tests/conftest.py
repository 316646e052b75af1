# ABOUTME: Shared pytest fixtures for ireaderlink tests.
# ABOUTME: Provides fixture paths, saved Douban pages, and cache stores.

from pathlib import Path

import pytest

from ireaderlink.cache.store import MemoryKeyValueStore


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def wishlist_page(fixtures_dir: Path) -> Path:
    """A saved Douban wishlist page with three books."""
    return fixtures_dir / "douban_wishlist.html"


@pytest.fixture
def subject_page(fixtures_dir: Path) -> Path:
    """A saved Douban subject page for 三体."""
    return fixtures_dir / "douban_subject.html"


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """An empty, uncapped in-memory key/value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def cache_db_path(tmp_path: Path) -> Path:
    """Provide a temporary cache database path."""
    return tmp_path / "cache.db"
