"""Key-value backends for the persisted store.

Every backend stores raw strings under string keys and reports I/O failures as
StorageReadError / StorageWriteError. The store decides what to do with them.

Usage:
    backend = get_storage_backend(settings)
    backend.set("soko-link-role", '"Buyer"')
    raw = backend.get("soko-link-role")
"""

from pathlib import Path
from typing import Optional, Protocol

import redis
import structlog

from sokolink.config.settings import Settings
from sokolink.core.exceptions import (
    ConfigurationError,
    StorageReadError,
    StorageWriteError,
)

logger = structlog.get_logger(__name__)


class StorageBackend(Protocol):
    """Protocol for key-value storage media."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, raw: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryBackend:
    """
    Dict-backed storage for tests or Redis fallback.

    WARNING: Does not persist across restarts.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, raw: str) -> None:
        self._data[key] = raw

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileBackend:
    """One file per key under a directory, the way a browser keeps local storage."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(key, f"Failed to read {path}: {e}")

    def set(self, key: str, raw: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(raw, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageWriteError(key, f"Failed to write {path}: {e}")

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(key, f"Failed to delete: {e}")


class RedisBackend:
    """
    Redis-backed storage shared by every process pointing at the same server.

    Args:
        redis_url: Redis connection URL
    """

    def __init__(self, redis_url: str):
        self._redis_url = redis_url
        self._client: Optional[redis.Redis] = None

    def connect(self) -> None:
        """Establish the connection and verify it with a ping."""
        self._client = redis.Redis.from_url(
            self._redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        self._client.ping()
        logger.info("redis_storage_connected", url=self._redis_url_masked)

    @property
    def _redis_url_masked(self) -> str:
        """Return masked Redis URL for logging (hide password)."""
        if "@" in self._redis_url:
            parts = self._redis_url.split("@")
            return f"{parts[0].rsplit(':', 1)[0]}:****@{parts[-1]}"
        return self._redis_url

    def _ensure_client(self) -> redis.Redis:
        if self._client is None:
            self.connect()
        return self._client

    def get(self, key: str) -> Optional[str]:
        try:
            return self._ensure_client().get(key)
        except (redis.RedisError, UnicodeDecodeError) as e:
            raise StorageReadError(key, f"Redis read failed: {e}")

    def set(self, key: str, raw: str) -> None:
        try:
            self._ensure_client().set(key, raw)
        except redis.RedisError as e:
            raise StorageWriteError(key, f"Redis write failed: {e}")

    def delete(self, key: str) -> None:
        try:
            self._ensure_client().delete(key)
        except redis.RedisError as e:
            raise StorageWriteError(key, f"Redis delete failed: {e}")


def get_storage_backend(settings: Settings) -> StorageBackend:
    """
    Build the backend named by settings.storage_backend.

    An unreachable Redis falls back to in-memory storage.
    """
    if settings.storage_backend == "memory":
        logger.info("storage_backend_initialized", backend="memory")
        return InMemoryBackend()

    if settings.storage_backend == "file":
        logger.info(
            "storage_backend_initialized",
            backend="file",
            directory=str(settings.storage_dir),
        )
        return JsonFileBackend(settings.storage_dir)

    if settings.storage_backend == "redis":
        backend = RedisBackend(settings.redis_url)
        try:
            backend.connect()
        except redis.RedisError as e:
            logger.warning(
                "redis_storage_unavailable",
                error=str(e),
                fallback="in-memory",
            )
            return InMemoryBackend()
        logger.info("storage_backend_initialized", backend="redis")
        return backend

    raise ConfigurationError(
        f"Unknown storage backend: {settings.storage_backend}",
        config_key="storage_backend",
    )
