"""Fluent builder for Twenty REST ``filter`` query strings.

Conditions render as ``field[op]:value`` and are joined with commas (AND).
In OR mode the joined conditions are wrapped in ``or(...)``::

    FilterBuilder().equals("name", "John").use_or().equals("city", "Paris")
    # -> or(name[eq]:"John",city[eq]:"Paris")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from ..metadata.models import EntityDefinition, SelectField
from ..utils.errors import FilterError

VALID_OPERATORS = (
    "eq",
    "neq",
    "gt",
    "gte",
    "lt",
    "lte",
    "in",
    "containsAny",
    "is",
    "startsWith",
    "like",
    "ilike",
)

NULL = "NULL"


class Filter(Protocol):
    def build_filter_string(self) -> Optional[str]:
        ...

    def has_filters(self) -> bool:
        ...


@dataclass(frozen=True)
class RawFilter:
    """A hand-written filter string."""

    filter_string: Optional[str] = None

    def build_filter_string(self) -> Optional[str]:
        return self.filter_string

    def has_filters(self) -> bool:
        return self.filter_string is not None and self.filter_string.strip() != ""


def format_value(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return NULL
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(format_value(item) for item in value) + "]"
    return str(value)


def escape_like_value(value: str) -> str:
    """Escape LIKE wildcards so they match literally."""
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    return value.replace("_", "\\_")


class FilterBuilder:
    """Accumulates filter conditions, validated against a definition if given."""

    def __init__(self, definition: Optional[EntityDefinition] = None):
        self.definition = definition
        self._conditions: List[Dict[str, Any]] = []
        self._logical_operator = "and"

    @classmethod
    def for_entity(cls, definition: EntityDefinition) -> "FilterBuilder":
        return cls(definition)

    def where(self, field: str, operator: str, value: Any) -> "FilterBuilder":
        if operator not in VALID_OPERATORS:
            raise FilterError(
                f"Invalid operator: {operator}. Valid operators: {', '.join(VALID_OPERATORS)}",
                field=field,
                value=value,
            )
        if self.definition is not None:
            self._validate_field(field, value)
        self._conditions.append({"field": field, "operator": operator, "value": value})
        return self

    def equals(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "eq", value)

    def not_equals(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "neq", value)

    def greater_than(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "gt", value)

    def greater_than_or_equals(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "gte", value)

    def less_than(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "lt", value)

    def less_than_or_equals(self, field: str, value: Any) -> "FilterBuilder":
        return self.where(field, "lte", value)

    def in_(self, field: str, values: List[Any]) -> "FilterBuilder":
        return self.where(field, "in", list(values))

    def contains(self, field: str, value: str) -> "FilterBuilder":
        """Case-insensitive substring match."""
        return self.where(field, "ilike", f"%{escape_like_value(value)}%")

    def like(self, field: str, value: str) -> "FilterBuilder":
        return self.where(field, "like", value)

    def ilike(self, field: str, value: str) -> "FilterBuilder":
        return self.where(field, "ilike", value)

    def starts_with(self, field: str, value: str) -> "FilterBuilder":
        return self.where(field, "startsWith", value)

    def is_null(self, field: str) -> "FilterBuilder":
        return self.where(field, "is", NULL)

    def is_not_null(self, field: str) -> "FilterBuilder":
        return self.where(field, "neq", NULL)

    def set_logical_operator(self, operator: str) -> "FilterBuilder":
        operator = operator.lower()
        if operator not in ("and", "or"):
            raise FilterError(f"Invalid logical operator: {operator}. Use 'and' or 'or'.")
        self._logical_operator = operator
        return self

    def use_or(self) -> "FilterBuilder":
        return self.set_logical_operator("or")

    def use_and(self) -> "FilterBuilder":
        return self.set_logical_operator("and")

    @property
    def logical_operator(self) -> str:
        return self._logical_operator

    @property
    def conditions(self) -> List[Dict[str, Any]]:
        return [dict(condition) for condition in self._conditions]

    def has_filters(self) -> bool:
        return bool(self._conditions)

    def clear(self) -> "FilterBuilder":
        self._conditions = []
        return self

    def build_filter_string(self) -> Optional[str]:
        if not self._conditions:
            return None
        parts = [self._build_condition(condition) for condition in self._conditions]
        if self._logical_operator == "or":
            return "or(" + ",".join(parts) + ")"
        return ",".join(parts)

    def build(self) -> RawFilter:
        return RawFilter(self.build_filter_string())

    def _build_condition(self, condition: Dict[str, Any]) -> str:
        field = condition["field"]
        operator = condition["operator"]
        value = condition["value"]
        if value == NULL and operator in ("is", "neq"):
            return f"{field}[{operator}]:{NULL}"
        return f"{field}[{operator}]:{format_value(value)}"

    def _validate_field(self, field: str, value: Any) -> None:
        definition = self.definition
        base_field = field.split(".", 1)[0]
        field_meta = definition.get_field(base_field)
        if field_meta is None:
            raise FilterError(
                f"Unknown field: {base_field} for entity {definition.object_name}",
                field=base_field,
                value=value,
            )
        if not isinstance(field_meta, SelectField):
            return

        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None or item == NULL:
                continue
            if not isinstance(item, str) or not field_meta.is_valid_value(item):
                raise FilterError(
                    f"Invalid value '{item}' for SELECT field '{base_field}'. "
                    f"Valid values: {', '.join(field_meta.valid_values)}",
                    field=base_field,
                    value=item,
                )
