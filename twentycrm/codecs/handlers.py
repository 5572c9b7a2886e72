"""Codecs between composite wire objects and the value types in ``values``.

Every codec exposes the same four members: ``field_type``, ``value_type``,
``from_api(wire)`` and ``to_api(value)``. ``from_api`` returns None for an
empty payload; ``to_api`` passes mappings through unchanged so encoding an
already-encoded value is a no-op.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

from ..enums import FieldType
from .values import Address, Currency, EmailCollection, FullName, LinkCollection, PhoneCollection


class FieldCodec:
    """Base codec for a composite value type with ``from_dict``/``to_dict``."""

    field_type: FieldType
    value_type: Type[Any]

    def from_api(self, wire: Any) -> Optional[Any]:
        if not isinstance(wire, Mapping) or not wire:
            return None
        return self.value_type.from_dict(dict(wire))

    def to_api(self, value: Any) -> Dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return dict(value)
        if isinstance(value, self.value_type):
            return value.to_dict()
        return self._coerce(value)

    def _coerce(self, value: Any) -> Dict[str, Any]:
        return {}

    @property
    def value_type_name(self) -> str:
        return self.value_type.__name__


class AddressCodec(FieldCodec):
    field_type = FieldType.ADDRESS
    value_type = Address


class CurrencyCodec(FieldCodec):
    field_type = FieldType.CURRENCY
    value_type = Currency

    def from_api(self, wire: Any) -> Optional[Currency]:
        if not isinstance(wire, Mapping) or wire.get("amountMicros") is None:
            return None
        return Currency.from_dict(dict(wire))

    def _coerce(self, value: Any) -> Dict[str, Any]:
        # A bare number is an amount in US dollars.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return Currency.from_amount(value).to_dict()
        return {}


class FullNameCodec(FieldCodec):
    field_type = FieldType.FULL_NAME
    value_type = FullName


class EmailsCodec(FieldCodec):
    field_type = FieldType.EMAILS
    value_type = EmailCollection

    def _coerce(self, value: Any) -> Dict[str, Any]:
        if isinstance(value, str) and value:
            return {"primaryEmail": value}
        return {}


class PhonesCodec(FieldCodec):
    field_type = FieldType.PHONES
    value_type = PhoneCollection


class LinksCodec(FieldCodec):
    field_type = FieldType.LINKS
    value_type = LinkCollection


DEFAULT_CODECS = (
    AddressCodec,
    CurrencyCodec,
    FullNameCodec,
    EmailsCodec,
    PhonesCodec,
    LinksCodec,
)
