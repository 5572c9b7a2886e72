"""Field-type keyed registry of composite value codecs."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..enums import FieldType
from .handlers import DEFAULT_CODECS, FieldCodec

# Process-wide registry, built on first use
_default_registry: Optional["CodecRegistry"] = None


class CodecRegistry:
    """Dispatches wire <-> value conversion by field type.

    Types without a codec are passed through: ``from_api`` returns the wire
    value unchanged and ``to_api`` keeps mappings and drops anything else.
    """

    def __init__(self, register_defaults: bool = True):
        self._codecs: Dict[FieldType, FieldCodec] = {}
        if register_defaults:
            for codec_class in DEFAULT_CODECS:
                self.register(codec_class())

    def register(self, codec: FieldCodec) -> None:
        self._codecs[codec.field_type] = codec

    def has_codec(self, field_type: FieldType) -> bool:
        return field_type in self._codecs

    def get_codec(self, field_type: FieldType) -> Optional[FieldCodec]:
        return self._codecs.get(field_type)

    def codecs(self) -> List[FieldCodec]:
        return list(self._codecs.values())

    def from_api(self, field_type: FieldType, wire: Any) -> Any:
        codec = self._codecs.get(field_type)
        if codec is None:
            return wire
        return codec.from_api(wire)

    def to_api(self, field_type: FieldType, value: Any) -> Dict[str, Any]:
        codec = self._codecs.get(field_type)
        if codec is None:
            return dict(value) if isinstance(value, Mapping) else {}
        return codec.to_api(value)

    def value_type(self, field_type: FieldType) -> Optional[str]:
        """Name of the value class the codec decodes to, or None."""
        codec = self._codecs.get(field_type)
        return codec.value_type_name if codec else None


def default_registry() -> CodecRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = CodecRegistry()
    return _default_registry
