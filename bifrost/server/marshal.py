"""Server-side marshaller backed by the object table."""

from __future__ import annotations

from typing import Any

from bifrost.core.marshal import DEFAULT_MAX_DEPTH, ValueMarshaller
from bifrost.core.protocol import ObjectRef
from bifrost.server.object_table import ObjectTable


class ServerMarshaller(ValueMarshaller):
    """Opaque results become references; incoming references resolve to live objects."""

    def __init__(self, table: ObjectTable, max_depth: int = DEFAULT_MAX_DEPTH):
        super().__init__(max_depth=max_depth)
        self.table = table

    def encode(self, value: Any) -> Any:
        """Encode a result; objects registered along the way are dropped if encoding fails."""
        with self.table.pending():
            return super().encode(value)

    def encode_object(self, value: Any) -> ObjectRef:
        return ObjectRef(self.table.allocate_or_lookup(value))

    def decode_ref(self, oid: int) -> Any:
        return self.table.resolve(oid)
