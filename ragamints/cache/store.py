"""Durable key/value stores backing the cache.

Architecture:
    The cache only needs a tiny string-oriented contract: get, set, remove,
    clear and an ``enabled`` flag telling whether the store is usable at all.
    Any class implementing that contract can be plugged in.

Implementations:
    - InMemoryStore: dict-backed, for tests and cache-less runs
    - FileStore: one file per key in a directory, using aiofiles
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol
from urllib.parse import quote, unquote

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)


class KVStore(Protocol):
    """Protocol for string key/value stores."""

    @property
    def enabled(self) -> bool:
        """Whether the store can be used."""
        ...

    async def get(self, key: str) -> str | None:
        """Get the value stored under key, or None if absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        ...

    async def clear(self) -> None:
        """Remove all keys."""
        ...


class InMemoryStore:
    """Dict-backed store."""

    def __init__(self, *, enabled: bool = True) -> None:
        self._data: dict[str, str] = {}
        self.enabled = enabled

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class FileStore:
    """Directory-backed store, one UTF-8 file per key.

    Keys are percent-encoded into file names so any string is a valid key.
    """

    def __init__(self, directory: str | Path, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.encoding = encoding
        self._enabled = self._prepare()

    def _prepare(self) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cache directory {self.directory} is not usable: {e}")
            return False
        return os.access(self.directory, os.W_OK)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def path_for(self, key: str) -> Path:
        """Get the file path storing key."""
        return self.directory / quote(key, safe="")

    async def get(self, key: str) -> str | None:
        try:
            async with aiofiles.open(self.path_for(key), encoding=self.encoding) as f:
                return await f.read()
        except FileNotFoundError:
            return None

    async def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        # Write then rename so readers never observe a half-written entry
        tmp_path = path.with_name(f"{path.name}.tmp")
        async with aiofiles.open(tmp_path, "w", encoding=self.encoding) as f:
            await f.write(value)
        await aiofiles.os.replace(tmp_path, path)

    async def remove(self, key: str) -> None:
        try:
            await aiofiles.os.remove(self.path_for(key))
        except FileNotFoundError:
            pass

    async def _file_names(self) -> list[str]:
        with await aiofiles.os.scandir(self.directory) as entries:
            return [entry.name for entry in entries if entry.is_file()]

    async def clear(self) -> None:
        for name in await self._file_names():
            try:
                await aiofiles.os.remove(self.directory / name)
            except FileNotFoundError:
                pass

    async def keys(self) -> list[str]:
        """List stored keys."""
        names = await self._file_names()
        return sorted(unquote(name) for name in names if not name.endswith(".tmp"))
