"""Request/response records shared by both ends of a bridge connection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

REF_KEY = "__bifrost_ref__"
MAP_KEY = "__bifrost_map__"
RESERVED_KEYS = frozenset({REF_KEY, MAP_KEY})


@dataclass(slots=True, frozen=True)
class ObjectRef:
    """Neutral in-memory form of a reference to a server-owned object."""

    oid: int


@dataclass(slots=True)
class ModuleRequest:
    """Ask the server to load a module and hand back a reference to it."""

    module: str


@dataclass(slots=True)
class CallRequest:
    """Invoke ``method`` on the object registered under ``oid``.

    ``params`` are already tagged wire values.
    """

    oid: int
    method: str
    params: list[Any] = field(default_factory=list)


Request = ModuleRequest | CallRequest


@dataclass(slots=True)
class Response:
    """Exactly one of ``result`` or ``error``; ``error is None`` means success."""

    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, result: Any) -> "Response":
        return cls(result=result)

    @classmethod
    def failure(cls, message: str) -> "Response":
        return cls(error=message or "remote call failed")
