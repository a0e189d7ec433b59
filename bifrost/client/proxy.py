"""Client-side stand-ins for server-owned objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bifrost.client.gateway import CallGateway


class RemoteMethod:
    """A member name bound to a proxy; calling it performs the remote call."""

    __slots__ = ("_proxy", "_name")

    def __init__(self, proxy: "Proxy", name: str):
        self._proxy = proxy
        self._name = name

    def __call__(self, *args: Any) -> Any:
        return self._proxy._gateway.call(self._proxy._oid, self._name, args)

    def __repr__(self) -> str:
        return f"<RemoteMethod {self._name} of oid={self._proxy._oid}>"


class Proxy:
    """Forwards every member access to the server object ``oid``.

    Holds no state besides the identifier and the gateway; nothing is cached.
    """

    __slots__ = ("_gateway", "_oid")

    def __init__(self, gateway: "CallGateway", oid: int):
        object.__setattr__(self, "_gateway", gateway)
        object.__setattr__(self, "_oid", oid)

    @property
    def oid(self) -> int:
        return self._oid

    def __getattr__(self, name: str) -> RemoteMethod:
        # copy/pickle/inspect probe dunders; only the explicit ones below are forwarded
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return RemoteMethod(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"cannot set {name!r} on a bridge proxy")

    def __call__(self, *args: Any) -> Any:
        return self._gateway.call(self._oid, "__call__", args)

    def __getitem__(self, key: Any) -> Any:
        return self._gateway.call(self._oid, "__getitem__", (key,))

    def __setitem__(self, key: Any, value: Any) -> None:
        self._gateway.call(self._oid, "__setitem__", (key, value))

    def __delitem__(self, key: Any) -> None:
        self._gateway.call(self._oid, "__delitem__", (key,))

    def __len__(self) -> int:
        return self._gateway.call(self._oid, "__len__", ())

    def __contains__(self, item: Any) -> bool:
        return bool(self._gateway.call(self._oid, "__contains__", (item,)))

    def __dir__(self) -> list[str]:
        names = self._gateway.call(self._oid, "__dir__", ())
        return [str(n) for n in names] if isinstance(names, list) else []

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<bifrost.Proxy oid={self._oid}>"
