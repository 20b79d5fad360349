# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Scoped key-value storage and the storage salt signal.

A salt is generated once per storage scope and reused by every later
collection in that scope. Stores available:
- MemoryStore: lives as long as the object (process scope)
- JsonFileStore: a JSON file on disk is the scope
- LocalStorageStore: a browser origin's localStorage (see ``signals.browser``)

Concurrent first-time collections may each generate a candidate salt; the
last write wins. There is no lock around the slot.
"""

from __future__ import annotations

import json
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from composite_fingerprint.config import DEFAULT_SALT_KEY
from composite_fingerprint.models import Sentinel
from composite_fingerprint.signals.base import SignalSource
from composite_fingerprint.utils.logger import logger


class KeyValueStore(ABC):
    """Abstract base class for salt storage scopes."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Read a value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Write a value."""


class MemoryStore(KeyValueStore):
    """In-memory store."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore(KeyValueStore):
    """
    Store backed by a JSON object in a file.

    A missing file reads as empty. A file that exists but is not a JSON
    object raises ``ValueError`` so the salt source reports it as
    unavailable instead of silently overwriting it.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"Salt store is not a JSON object: {self.path}")
        return data

    async def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")


def generate_salt() -> str:
    """Four random 32-bit unsigned integers joined with dashes."""
    return "-".join(str(secrets.randbits(32)) for _ in range(4))


class StorageSaltSource(SignalSource):
    """
    Returns the salt stored under ``key``, creating it on first use.

    Example:
        >>> source = StorageSaltSource(MemoryStore())
        >>> first = await source.probe()
        >>> assert await source.probe() == first
    """

    name = "storage_salt"

    def __init__(self, store: Optional[KeyValueStore], key: str = DEFAULT_SALT_KEY) -> None:
        self.store = store
        self.key = key

    async def probe(self) -> str:
        if self.store is None:
            return Sentinel.UNAVAILABLE.value

        try:
            salt = await self.store.get(self.key)
            if not salt:
                salt = generate_salt()
                await self.store.set(self.key, salt)
                logger.debug(f"Generated new storage salt under {self.key}")
            return salt
        except Exception as e:
            logger.debug(f"Storage salt unavailable: {type(e).__name__}: {e}")
            return Sentinel.UNAVAILABLE.value
