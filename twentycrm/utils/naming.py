"""Name conversions for generated modules and accessors."""

from __future__ import annotations

import keyword
import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_IDENTIFIER = re.compile(r"[^0-9a-zA-Z_]+")


def to_snake_case(name: str) -> str:
    """``primaryLinkUrl`` -> ``primary_link_url``; ``HTTPServer`` -> ``http_server``."""
    name = _NON_IDENTIFIER.sub("_", name)
    snake = _CAMEL_BOUNDARY.sub("_", name).lower().strip("_")
    snake = re.sub(r"_+", "_", snake)
    if not snake:
        return "_"
    if snake[0].isdigit() or keyword.iskeyword(snake):
        snake = f"_{snake}" if snake[0].isdigit() else f"{snake}_"
    return snake


def to_pascal_case(name: str) -> str:
    """``opportunity`` -> ``Opportunity``; ``workspaceMember`` -> ``WorkspaceMember``."""
    parts = [part for part in to_snake_case(name).split("_") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Entity"


def pluralize(name: str) -> str:
    """Naive English plural: company -> companies, address -> addresses."""
    if name.endswith("y") and name[-2:-1] not in ("a", "e", "i", "o", "u"):
        return name[:-1] + "ies"
    if name.endswith("s"):
        return name + "es"
    return name + "s"
