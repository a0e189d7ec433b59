"""Python host runtime: module loading and member lookup for the dispatcher."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Iterable

from loguru import logger

from bifrost.utils.exceptions import ModuleAccessDenied, UnknownMethod, UnknownModule

PROTOCOL_DUNDERS = frozenset(
    {
        "__call__",
        "__getitem__",
        "__setitem__",
        "__delitem__",
        "__len__",
        "__contains__",
        "__dir__",
        "__repr__",
        "__str__",
    }
)


def _matches(module: str, roots: set[str]) -> bool:
    return any(module == root or module.startswith(f"{root}.") for root in roots)


def module_allowed(module: str, *, allow: Iterable[str] = (), deny: Iterable[str] = ()) -> bool:
    """Deny list wins; a non-empty allow list restricts to its module trees."""
    if _matches(module, set(deny)):
        return False
    allow_set = set(allow)
    if allow_set and not _matches(module, allow_set):
        return False
    return True


def _describe(obj: Any) -> str:
    name = getattr(obj, "__name__", None)
    if isinstance(name, str):
        return name
    return type(obj).__name__


class PythonHostRuntime:
    """Resolve modules with importlib and members with getattr."""

    def __init__(
        self,
        *,
        allow_modules: Iterable[str] = (),
        deny_modules: Iterable[str] = (),
        expose_private: bool = False,
    ):
        self.allow_modules = [m.strip() for m in allow_modules if m.strip()]
        self.deny_modules = [m.strip() for m in deny_modules if m.strip()]
        self.expose_private = expose_private

    def resolve_module(self, name: str) -> Any:
        if not module_allowed(name, allow=self.allow_modules, deny=self.deny_modules):
            logger.warning("Refused module {}", name)
            raise ModuleAccessDenied(name)
        try:
            module = importlib.import_module(name)
        except ImportError as exc:
            raise UnknownModule(name, str(exc)) from exc
        logger.info("Loaded module {}", name)
        return module

    def resolve_member(self, obj: Any, name: str) -> Callable[..., Any]:
        if name.startswith("_") and name not in PROTOCOL_DUNDERS and not self.expose_private:
            raise UnknownMethod(name, _describe(obj))
        try:
            member = getattr(obj, name)
        except AttributeError:
            raise UnknownMethod(name, _describe(obj)) from None
        if callable(member):
            return member

        def read_attribute() -> Any:
            return member

        return read_attribute
