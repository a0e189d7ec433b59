"""Recursive conversion between native values and tagged wire values.

Grammar on the wire (JSON):

- ``null``, booleans, numbers and strings stand for themselves
- arrays are ordered sequences
- objects are mappings with text keys
- ``{"__bifrost_ref__": <oid>}`` is a reference to a server-owned object
- ``{"__bifrost_map__": [[key, value], ...]}`` is a user mapping whose keys
  include a reserved key; it keeps plain mappings free of reserved keys so
  the reference form is never ambiguous
"""

from __future__ import annotations

import math
from typing import Any

from bifrost.core.codec import is_identifier
from bifrost.core.protocol import MAP_KEY, REF_KEY, RESERVED_KEYS, ObjectRef
from bifrost.utils.exceptions import MarshalError

SCALAR_TYPES = (str, int, float, bool)
DEFAULT_MAX_DEPTH = 64


def encode_ref(oid: int) -> dict[str, int]:
    return {REF_KEY: oid}


class ValueMarshaller:
    """Base marshaller; subclasses decide what opaque objects and references become."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def encode_object(self, value: Any) -> ObjectRef:
        """Turn a value outside the grammar into a reference."""
        raise MarshalError(f"cannot marshal value of type {type(value).__name__}")

    def decode_ref(self, oid: int) -> Any:
        """Turn a decoded reference into a native value."""
        return ObjectRef(oid)

    def encode(self, value: Any) -> Any:
        return self._encode(value, "$", 0)

    def decode(self, tagged: Any) -> Any:
        return self._decode(tagged, "$", 0)

    def _encode(self, value: Any, path: str, depth: int) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            raise MarshalError(f"non-finite number {value!r} has no JSON form", path)
        if value is None or isinstance(value, SCALAR_TYPES):
            return value
        if depth >= self.max_depth:
            raise MarshalError(f"nesting deeper than {self.max_depth}", path)
        if isinstance(value, ObjectRef):
            return encode_ref(value.oid)
        if isinstance(value, (list, tuple)):
            return [self._encode(item, f"{path}[{i}]", depth + 1) for i, item in enumerate(value)]
        if isinstance(value, dict):
            for key in value:
                if not isinstance(key, str):
                    raise MarshalError(f"mapping key {key!r} is not text", path)
            if RESERVED_KEYS.intersection(value):
                return {
                    MAP_KEY: [[key, self._encode(item, f"{path}.{key}", depth + 1)] for key, item in value.items()]
                }
            return {key: self._encode(item, f"{path}.{key}", depth + 1) for key, item in value.items()}
        ref = self.encode_object(value)
        return encode_ref(ref.oid)

    def _decode(self, tagged: Any, path: str, depth: int) -> Any:
        if tagged is None or isinstance(tagged, SCALAR_TYPES):
            return tagged
        if depth >= self.max_depth:
            raise MarshalError(f"nesting deeper than {self.max_depth}", path)
        if isinstance(tagged, list):
            return [self._decode(item, f"{path}[{i}]", depth + 1) for i, item in enumerate(tagged)]
        if not isinstance(tagged, dict):
            raise MarshalError(f"unsupported tagged value of type {type(tagged).__name__}", path)
        if REF_KEY in tagged:
            if len(tagged) != 1:
                raise MarshalError("object reference carries extra keys", path)
            oid = tagged[REF_KEY]
            if not is_identifier(oid):
                raise MarshalError(f"object reference id must be a positive integer, got {oid!r}", path)
            return self.decode_ref(oid)
        if MAP_KEY in tagged:
            if len(tagged) != 1:
                raise MarshalError("escaped mapping carries extra keys", path)
            return self._decode_pairs(tagged[MAP_KEY], path, depth)
        out: dict[str, Any] = {}
        for key, item in tagged.items():
            if not isinstance(key, str):
                raise MarshalError(f"mapping key {key!r} is not text", path)
            out[key] = self._decode(item, f"{path}.{key}", depth + 1)
        return out

    def _decode_pairs(self, pairs: Any, path: str, depth: int) -> dict[str, Any]:
        if not isinstance(pairs, list):
            raise MarshalError("escaped mapping must hold a list of pairs", path)
        out: dict[str, Any] = {}
        for pair in pairs:
            if not isinstance(pair, list) or len(pair) != 2 or not isinstance(pair[0], str):
                raise MarshalError("escaped mapping entry must be a [text, value] pair", path)
            key, item = pair
            out[key] = self._decode(item, f"{path}.{key}", depth + 1)
        return out
