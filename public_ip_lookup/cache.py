"""Disk cache for lookup responses.

The cache keeps one record for the caller's own address and one record per
looked-up target address. Every record carries its own timestamp and TTL, so
the slots expire independently of each other.
"""

import contextlib
import os
import tempfile
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from ipaddress import ip_address
from pathlib import Path
from typing import Any

from platformdirs import user_cache_dir, user_data_dir
from pydantic import BaseModel, Field, PrivateAttr, ValidationError
from pydantic_core import PydanticSerializationError

from public_ip_lookup import crypto
from public_ip_lookup.config import APP_NAME, Settings, get_settings
from public_ip_lookup.errors import (
    CacheDecodeError,
    CacheError,
    CacheIOError,
    CacheNotFoundError,
    CacheSerdeError,
)
from public_ip_lookup.logger import logger
from public_ip_lookup.models.common import LookupResponse


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _candidate_dirs() -> list[Path]:
    candidates = [Path(user_cache_dir(APP_NAME)), Path(user_data_dir(APP_NAME))]
    try:
        candidates.append(Path.home())
    except RuntimeError as exc:
        logger.debug(f"Home directory unavailable for the response cache error={exc}")
    return candidates


def resolve_cache_dir() -> Path:
    """Pick the directory for the cache file.

    Tries the platform cache directory, then the platform data directory, then
    the home directory; the first one that exists or can be created wins. Falls
    back to the working directory.
    """
    for directory in _candidate_dirs():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug(f"Cannot use cache directory path={directory} error={exc}")
            continue
        return directory
    return Path.cwd()


@dataclass(frozen=True)
class CacheStorage:
    """Location of the cache file and, when encrypted, the passphrase protecting it."""

    path: Path
    passphrase: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None, file_name: str | None = None) -> "CacheStorage":
        settings = settings or get_settings()
        directory = Path(settings.cache_dir) if settings.cache_dir else resolve_cache_dir()
        passphrase = None
        if settings.cache_encryption:
            passphrase = settings.cache_passphrase or crypto.default_passphrase()
        return cls(path=directory / (file_name or settings.cache_file_name), passphrase=passphrase)

    @property
    def encrypted(self) -> bool:
        return self.passphrase is not None

    def with_file_name(self, file_name: str) -> "CacheStorage":
        return replace(self, path=self.path.with_name(file_name))

    def read(self) -> str:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise CacheNotFoundError(f"No cache file at {self.path}") from exc
        except OSError as exc:
            raise CacheIOError(f"Failed to read cache file {self.path}: {exc}") from exc

        if self.passphrase is not None:
            data = crypto.decrypt(data, self.passphrase)

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CacheDecodeError(f"Cache file {self.path} is not valid UTF-8") from exc

    def write(self, text: str) -> None:
        """Write the cache contents, replacing the previous file in one step.

        The data goes to a temporary file next to the target which is then moved
        over it, so readers see either the old or the new file. Concurrent writers
        are not coordinated; the last one wins.
        """
        data = text.encode("utf-8")
        if self.passphrase is not None:
            data = crypto.encrypt(data, self.passphrase)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise CacheIOError(f"Failed to write cache file {self.path}: {exc}") from exc

    def remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError as exc:
            raise CacheNotFoundError(f"No cache file at {self.path}") from exc
        except OSError as exc:
            raise CacheIOError(f"Failed to delete cache file {self.path}: {exc}") from exc


class ResponseRecord(BaseModel):
    """A cached response with the time it was stored and its TTL in seconds."""

    response: LookupResponse
    response_time: datetime = Field(default_factory=_utcnow)
    ttl: int | None = Field(default=None, ge=0)

    def is_expired(self, now: datetime | None = None) -> bool:
        """`ttl=None` never expires; `ttl=0` is expired as soon as it is read."""
        if self.ttl is None:
            return False
        now = now or _utcnow()
        return now - self.response_time >= timedelta(seconds=self.ttl)


def _key(ip: Any) -> str:
    return str(ip_address(str(ip)))


class ResponseCache(BaseModel):
    """Persisted lookup responses: the caller's own address plus per-target records."""

    current_address: ResponseRecord | None = None
    lookup_address: dict[str, ResponseRecord] = Field(default_factory=dict)

    _storage: CacheStorage | None = PrivateAttr(default=None)

    def __init__(self, storage: CacheStorage | None = None, **data: Any) -> None:
        super().__init__(**data)
        self._storage = storage

    @property
    def storage(self) -> CacheStorage:
        if self._storage is None:
            self._storage = CacheStorage.from_settings()
        return self._storage

    @classmethod
    def load(cls, storage: CacheStorage | None = None, file_name: str | None = None) -> "ResponseCache":
        """Read the cache from disk; raises a `CacheError` subclass on any failure."""
        storage = storage or CacheStorage.from_settings()
        if file_name:
            storage = storage.with_file_name(file_name)

        text = storage.read()
        try:
            cache = cls.model_validate_json(text)
        except ValidationError as exc:
            raise CacheSerdeError(f"Cache file {storage.path} has unexpected contents: {exc}") from exc
        cache._storage = storage
        return cache

    def save(self) -> None:
        try:
            text = self.model_dump_json()
        except PydanticSerializationError as exc:
            raise CacheSerdeError(f"Failed to serialize response cache: {exc}") from exc
        self.storage.write(text)
        logger.debug(f"Saved response cache path={self.storage.path} encrypted={self.storage.encrypted}")

    def delete(self) -> None:
        """Remove the cache file and drop every record held in memory."""
        self.storage.remove()
        self.clear()

    def clear(self) -> None:
        """Drop both slots in memory; call `save()` to persist."""
        self.current_address = None
        self.lookup_address = {}

    def update_current(self, response: LookupResponse, ttl: int | None = None) -> None:
        self.current_address = ResponseRecord(response=response.model_copy(deep=True), ttl=ttl)

    def update_target(self, ip: Any, response: LookupResponse, ttl: int | None = None) -> None:
        self.lookup_address[_key(ip)] = ResponseRecord(response=response.model_copy(deep=True), ttl=ttl)

    def current_is_expired(self) -> bool:
        return self.current_address is None or self.current_address.is_expired()

    def target_is_expired(self, ip: Any) -> bool:
        record = self.lookup_address.get(_key(ip))
        return record is None or record.is_expired()

    def current_response(self) -> LookupResponse | None:
        if self.current_address is None:
            return None
        return self.current_address.response.model_copy(deep=True)

    def target_response(self, ip: Any) -> LookupResponse | None:
        record = self.lookup_address.get(_key(ip))
        if record is None:
            return None
        return record.response.model_copy(deep=True)

    def current_ip(self) -> str | None:
        if self.current_address is None:
            return None
        return str(self.current_address.response.ip)

    def fresh_response(self, target: Any = None) -> LookupResponse | None:
        """Copy of the unexpired record for `target` (or the current address), if any."""
        if target is None:
            return None if self.current_is_expired() else self.current_response()
        return None if self.target_is_expired(target) else self.target_response(target)


def load_or_empty(storage: CacheStorage) -> ResponseCache:
    """Load the cache, treating a missing or unreadable file as an empty cache."""
    try:
        return ResponseCache.load(storage)
    except CacheNotFoundError:
        logger.debug(f"No response cache yet path={storage.path}")
    except CacheError as exc:
        logger.warning(f"Ignoring unreadable response cache path={storage.path} error={exc}")
    return ResponseCache(storage=storage)
