"""Client-side marshaller: proxies go out as references, references come back as proxies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bifrost.client.proxy import Proxy
from bifrost.core.marshal import DEFAULT_MAX_DEPTH, ValueMarshaller
from bifrost.core.protocol import ObjectRef
from bifrost.utils.exceptions import MarshalError

if TYPE_CHECKING:
    from bifrost.client.gateway import CallGateway


class ClientMarshaller(ValueMarshaller):
    def __init__(self, gateway: "CallGateway", max_depth: int = DEFAULT_MAX_DEPTH):
        super().__init__(max_depth=max_depth)
        self.gateway = gateway

    def encode_object(self, value: Any) -> ObjectRef:
        if isinstance(value, Proxy):
            if value._gateway is not self.gateway:
                raise MarshalError(f"proxy oid={value.oid} belongs to another bridge connection")
            return ObjectRef(value.oid)
        raise MarshalError(f"cannot send value of type {type(value).__name__} across the bridge")

    def decode_ref(self, oid: int) -> Proxy:
        return Proxy(self.gateway, oid)
