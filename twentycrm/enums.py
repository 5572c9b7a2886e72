"""Closed enumerations for Twenty field and relation types."""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    # Basic types
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    UUID = "UUID"
    DATE_TIME = "DATE_TIME"
    DATE = "DATE"
    POSITION = "POSITION"

    # Composite types
    SELECT = "SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    RELATION = "RELATION"
    EMAILS = "EMAILS"
    PHONES = "PHONES"
    LINKS = "LINKS"
    FULL_NAME = "FULL_NAME"
    ADDRESS = "ADDRESS"
    CURRENCY = "CURRENCY"
    ACTOR = "ACTOR"
    RATING = "RATING"

    # System types
    TS_VECTOR = "TS_VECTOR"
    RAW_JSON = "RAW_JSON"

    @property
    def requires_nested_handler(self) -> bool:
        """True for composite types whose wire value is a nested object."""
        return self in _NESTED_TYPES

    @property
    def is_relation(self) -> bool:
        return self is FieldType.RELATION

    @property
    def is_system_type(self) -> bool:
        return self in _SYSTEM_TYPES

    @property
    def is_select(self) -> bool:
        return self in (FieldType.SELECT, FieldType.MULTI_SELECT)


_NESTED_TYPES = frozenset(
    {
        FieldType.EMAILS,
        FieldType.PHONES,
        FieldType.LINKS,
        FieldType.FULL_NAME,
        FieldType.ADDRESS,
        FieldType.CURRENCY,
    }
)

_SYSTEM_TYPES = frozenset({FieldType.TS_VECTOR, FieldType.ACTOR, FieldType.POSITION})


class RelationType(str, Enum):
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"
    ONE_TO_ONE = "ONE_TO_ONE"

    @property
    def returns_collection(self) -> bool:
        return self in (RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY)

    @property
    def returns_single(self) -> bool:
        return self in (RelationType.MANY_TO_ONE, RelationType.ONE_TO_ONE)
