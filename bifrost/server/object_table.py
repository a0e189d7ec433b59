"""Registry of server objects handed out to the client by reference."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger

from bifrost.utils.exceptions import UnknownReference


class ObjectTable:
    """Maps opaque identifiers to live objects.

    Identifiers come from a monotonic counter and are never reused once a
    client has seen them. The table pins every object it registers, so the
    identity index (keyed by ``id()`` and confirmed with ``is``) cannot be
    fooled by address reuse while the entry exists. Entries are never evicted.
    """

    def __init__(self, start: int = 1):
        self._entries: dict[int, Any] = {}
        self._by_identity: dict[int, int] = {}
        self._next = start
        self._lock = threading.RLock()

    def allocate_or_lookup(self, obj: Any) -> int:
        with self._lock:
            oid = self._by_identity.get(id(obj))
            if oid is not None and self._entries.get(oid) is obj:
                return oid
            oid = self._next
            self._next += 1
            self._entries[oid] = obj
            self._by_identity[id(obj)] = oid
        logger.debug("Registered {} as oid={}", type(obj).__name__, oid)
        return oid

    @contextmanager
    def pending(self) -> Iterator[None]:
        """Undo every allocation made inside the block if it raises.

        Rolled-back identifiers were never sent to a client and are handed out again.
        """
        with self._lock:
            mark = self._next
            try:
                yield
            except BaseException:
                for oid in range(mark, self._next):
                    obj = self._entries.pop(oid)
                    if self._by_identity.get(id(obj)) == oid:
                        del self._by_identity[id(obj)]
                logger.debug("Rolled back oids {}..{}", mark, self._next - 1)
                self._next = mark
                raise

    def resolve(self, oid: int) -> Any:
        with self._lock:
            try:
                return self._entries[oid]
            except (KeyError, TypeError):
                raise UnknownReference(oid) from None

    def __contains__(self, oid: object) -> bool:
        with self._lock:
            return oid in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
