"""A page of entities that fetches following pages on demand."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..metadata.models import EntityDefinition
from ..utils.errors import TwentyCrmError
from .runtime import Entity

logger = logging.getLogger(__name__)

# Called with the end cursor of the last loaded page, returns the next page.
PageFetcher = Callable[[str], "EntityCollection"]


class EntityCollection:
    """Entities from one ``find`` call plus lazily fetched later pages.

    Iteration walks the loaded items and, once they run out, fetches the next
    page when ``has_more`` is set and both a fetcher and a cursor are present.
    A failed fetch ends iteration; the exception is kept on ``fetch_error``.
    ``len()`` counts loaded items only.
    """

    def __init__(
        self,
        definition: EntityDefinition,
        items: Optional[List[Entity]] = None,
        total: Optional[int] = None,
        has_more: bool = False,
        start_cursor: Optional[str] = None,
        end_cursor: Optional[str] = None,
        fetcher: Optional[PageFetcher] = None,
    ):
        self.definition = definition
        self._items: List[Entity] = list(items or [])
        self._total = total
        self.has_more = has_more
        self.start_cursor = start_cursor
        self.end_cursor = end_cursor
        self._fetcher = fetcher
        self.fetch_error: Optional[Exception] = None

    @property
    def items(self) -> List[Entity]:
        return list(self._items)

    @property
    def total(self) -> int:
        """Total count reported by the API, or the loaded count if absent."""
        return self._total if self._total is not None else len(self._items)

    @property
    def loaded_count(self) -> int:
        return len(self._items)

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def first(self) -> Optional[Entity]:
        return self._items[0] if self._items else None

    def to_api(self) -> List[Dict[str, Any]]:
        return [entity.to_api() for entity in self._items]

    def _fetch_next_page(self) -> bool:
        if not self.has_more or self._fetcher is None or not self.end_cursor:
            return False

        cursor = self.end_cursor
        try:
            page = self._fetcher(cursor)
        except TwentyCrmError as exc:
            logger.warning(
                "Stopped pagination after fetch failure",
                extra={"object": self.definition.object_name, "cursor": cursor, "error": str(exc)},
            )
            self.fetch_error = exc
            self.has_more = False
            return False

        self._items.extend(page.items)
        self.has_more = page.has_more
        self.end_cursor = page.end_cursor
        if page.is_empty() and page.end_cursor == cursor:
            self.has_more = False
        return True

    def __iter__(self) -> Iterator[Entity]:
        index = 0
        while True:
            while index < len(self._items):
                yield self._items[index]
                index += 1
            if not self._fetch_next_page():
                return

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Entity:
        return self._items[index]

    def __repr__(self) -> str:
        return (
            f"<EntityCollection {self.definition.object_name_plural} "
            f"loaded={len(self._items)} has_more={self.has_more}>"
        )
