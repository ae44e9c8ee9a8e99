# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Process-level permission cache keyed by role id.

Entries expire after a bounded TTL and are evicted least-recently-used.
Each key carries a version counter: invalidation bumps it, and a value
loaded under an older version is refused on store. That way a lookup that
started before a revoke can never re-populate the cache with the old grants.
"""

import threading
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from adsguard.rbac.permissions import PermissionKey


@dataclass(frozen=True)
class RoleSnapshot:
    """Everything the resolver needs to know about one role."""

    role_id: uuid.UUID
    name: str
    level: int
    is_active: bool
    keys: frozenset[PermissionKey]
    # (module, name) pairs of rows matched by their conventional name
    names: frozenset[tuple[str, str]]
    wildcard_modules: frozenset[str]

    def grants(self, key: PermissionKey) -> bool:
        return (
            key in self.keys
            or (key.module, key.name) in self.names
            or key.module in self.wildcard_modules
        )


@dataclass
class _Entry:
    value: Any
    expires_at: float


class PermissionCache:
    """Thread-safe TTL + LRU cache with per-key versioning."""

    def __init__(
        self,
        maxsize: int = 1024,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Any, _Entry] = OrderedDict()
        self._versions: dict[Any, int] = {}
        self._generation = 0
        self._lock = threading.RLock()

    def version(self, key: Any) -> tuple[int, int]:
        """Return the token a loader must present to store a value for key."""
        with self._lock:
            return self._generation, self._versions.get(key, 0)

    def get(self, key: Any) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: Any, value: Any, version: tuple[int, int]) -> bool:
        """Store value if no invalidation happened since version was taken."""
        if self.ttl_seconds <= 0 or self.maxsize <= 0:
            return False
        with self._lock:
            if version != (self._generation, self._versions.get(key, 0)):
                return False
            self._entries[key] = _Entry(value, self._clock() + self.ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
            return True

    def invalidate(self, key: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._versions[key] = self._versions.get(key, 0) + 1

    def clear(self) -> None:
        """Drop every entry and refuse values loaded before this call."""
        with self._lock:
            self._entries.clear()
            self._versions.clear()
            self._generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._entries),
                "maxsize": self.maxsize,
                "ttl_seconds": self.ttl_seconds,
            }
