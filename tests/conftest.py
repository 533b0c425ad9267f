from pathlib import Path

import pytest

from public_ip_lookup.cache import CacheStorage


@pytest.fixture
def storage(tmp_path: Path) -> CacheStorage:
    """Plaintext cache file inside the test's temporary directory."""
    return CacheStorage(path=tmp_path / "lookup.cache")


@pytest.fixture
def encrypted_storage(tmp_path: Path) -> CacheStorage:
    """Encrypted cache file inside the test's temporary directory."""
    return CacheStorage(path=tmp_path / "lookup.cache", passphrase="test-passphrase")
