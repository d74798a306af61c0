"""
CacheStore Protocol - memoised lookup of derived asset URLs.

Design goals:
- At most one concurrent computation per key
- Values expire after a per-call TTL
- Failed computations leave no entry behind
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol, override, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for the key-value cache in front of the derivation pipeline."""

    def remember(self, key: str, ttl_seconds: float, compute: Callable[[], str]) -> str:
        """
        Return the cached value for `key`, computing and storing it on a miss.

        Implementations must run `compute` at most once concurrently per key
        and must not store anything when `compute` raises.
        """
        ...

    def get(self, key: str) -> str | None:
        """Return the live value for `key`, or None."""
        ...

    def forget(self, key: str) -> bool:
        """Drop `key`. Returns True if an entry was removed."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...


@dataclass
class _Entry:
    value: str
    expires_at: float


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class InMemoryCacheStore(CacheStore):
    """Process-local CacheStore with per-key single flight.

    Per-key locks live only while a caller holds or waits on them. Expired
    entries are swept on write, at most once every `sweep_interval` seconds.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ):
        self._clock: Callable[[], float] = clock
        self._sweep_interval: float = sweep_interval
        self._next_sweep: float = 0.0
        self._entries: dict[str, _Entry] = {}
        self._key_locks: dict[str, _KeyLock] = {}
        self._lock: threading.Lock = threading.Lock()

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        with self._lock:
            key_lock = self._key_locks.setdefault(key, _KeyLock())
            key_lock.users += 1
        try:
            with key_lock.lock:
                yield
        finally:
            with self._lock:
                key_lock.users -= 1
                if key_lock.users == 0 and self._key_locks.get(key) is key_lock:
                    del self._key_locks[key]

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            _ = self._entries.pop(key, None)
            return None
        return entry

    def _sweep(self, now: float) -> None:
        if now < self._next_sweep:
            return
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]
        self._next_sweep = now + self._sweep_interval

    @override
    def remember(self, key: str, ttl_seconds: float, compute: Callable[[], str]) -> str:
        with self._lock:
            entry = self._live(key)
        if entry is not None:
            return entry.value

        with self._locked(key):
            # Another caller may have filled the entry while we waited
            with self._lock:
                entry = self._live(key)
            if entry is not None:
                return entry.value

            value = compute()

            with self._lock:
                now = self._clock()
                self._sweep(now)
                self._entries[key] = _Entry(value=value, expires_at=now + ttl_seconds)
            return value

    @override
    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live(key)
        return entry.value if entry is not None else None

    @override
    def forget(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    @override
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
