"""Paging and ordering options for ``find`` calls."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

DEFAULT_LIMIT = 20


@dataclass(frozen=True)
class SearchOptions:
    """Query options for list endpoints.

    Attributes:
        limit: Page size.
        order_by: Twenty ``order_by`` expression, e.g. ``createdAt[DescNullsLast]``.
        depth: Relation depth the API should embed.
        starting_after: Cursor to read forward from.
        ending_before: Cursor to read backward from.
        with_relations: Relation names to eager load after the page arrives.
    """

    limit: int = DEFAULT_LIMIT
    order_by: Optional[str] = None
    depth: Optional[int] = None
    starting_after: Optional[str] = None
    ending_before: Optional[str] = None
    with_relations: Tuple[str, ...] = field(default_factory=tuple)

    def to_query_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": self.limit}
        if self.order_by is not None:
            params["order_by"] = self.order_by
        if self.depth is not None:
            params["depth"] = self.depth
        if self.starting_after is not None:
            params["starting_after"] = self.starting_after
        if self.ending_before is not None:
            params["ending_before"] = self.ending_before
        return params

    def after(self, cursor: str) -> "SearchOptions":
        """Options for the page following ``cursor``."""
        return replace(self, starting_after=cursor, ending_before=None)
