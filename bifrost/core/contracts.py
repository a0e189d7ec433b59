"""Runtime contracts the bridge core depends on."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class HostRuntime(Protocol):
    """Server-side capability to load modules and look up members by name."""

    def resolve_module(self, name: str) -> Any: ...
    def resolve_member(self, obj: Any, name: str) -> Callable[..., Any]: ...


@runtime_checkable
class Transport(Protocol):
    """Ordered, record-framed channel to one server process."""

    def send(self, line: str) -> None: ...
    def receive(self, timeout: float | None = None) -> str: ...
    def close(self) -> None: ...
