"""Pytest configuration for file_explorer tests."""
import sys
from pathlib import Path

# Add src/back to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC_BACK = _PROJECT_ROOT / 'src' / 'back'
if str(_SRC_BACK) not in sys.path:
    sys.path.insert(0, str(_SRC_BACK))

import pytest

from file_explorer.api.storage import InMemoryStore, LocalStore


@pytest.fixture
def memory_store():
    """Empty in-memory store with a short timeout."""
    return InMemoryStore(timeout=0.5)


@pytest.fixture
def store_root(tmp_path):
    """Create a temporary directory backing a LocalStore."""
    root = tmp_path / 'store'
    root.mkdir()
    return root


@pytest.fixture
def local_store(store_root):
    return LocalStore(store_root, timeout=2.0)
