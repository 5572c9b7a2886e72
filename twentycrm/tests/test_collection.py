"""Tests for lazy pagination in EntityCollection."""

from unittest.mock import Mock

from twentycrm.entity.collection import EntityCollection
from twentycrm.entity.runtime import Entity
from twentycrm.services.entity_service import GenericEntityService
from twentycrm.services.options import SearchOptions
from twentycrm.utils.errors import ApiError


def _entities(definition, *ids):
    return [Entity.from_definition(definition, {"id": entity_id}) for entity_id in ids]


def test_no_fetch_when_has_more_is_false(person_definition):
    fetcher = Mock()
    collection = EntityCollection(person_definition, _entities(person_definition, "a", "b"), fetcher=fetcher)
    assert [e.get_id() for e in collection] == ["a", "b"]
    fetcher.assert_not_called()


def test_one_fetch_per_exhausted_page(person_definition):
    last_page = EntityCollection(person_definition, _entities(person_definition, "c"), end_cursor="cur-2")
    fetcher = Mock(return_value=last_page)
    collection = EntityCollection(
        person_definition,
        _entities(person_definition, "a", "b"),
        has_more=True,
        end_cursor="cur-1",
        fetcher=fetcher,
    )

    assert [e.get_id() for e in collection] == ["a", "b", "c"]
    fetcher.assert_called_once_with("cur-1")
    assert not collection.has_more
    assert collection.loaded_count == 3


def test_no_fetch_without_cursor(person_definition):
    fetcher = Mock()
    collection = EntityCollection(person_definition, [], has_more=True, fetcher=fetcher)
    assert list(collection) == []
    fetcher.assert_not_called()


def test_fetch_failure_ends_iteration(person_definition):
    error = ApiError("boom", status_code=500)
    fetcher = Mock(side_effect=error)
    collection = EntityCollection(
        person_definition,
        _entities(person_definition, "a"),
        has_more=True,
        end_cursor="cur-1",
        fetcher=fetcher,
    )

    assert [e.get_id() for e in collection] == ["a"]
    assert collection.fetch_error is error
    assert not collection.has_more
    fetcher.assert_called_once()


def test_len_counts_loaded_items_only(person_definition):
    collection = EntityCollection(
        person_definition, _entities(person_definition, "a"), total=50, has_more=True, end_cursor="x"
    )
    assert len(collection) == 1
    assert collection.count() == 1
    assert collection.total == 50
    assert collection.to_api() == [{"id": "a"}]


def test_service_pages_with_starting_after(mock_transport, person_definition):
    mock_transport.request.side_effect = [
        {
            "data": {"people": [{"id": "a"}]},
            "pageInfo": {"hasNextPage": True, "endCursor": "cur-1"},
        },
        {
            "data": {"people": [{"id": "b"}]},
            "pageInfo": {"hasNextPage": False, "endCursor": "cur-2"},
        },
    ]
    service = GenericEntityService(mock_transport, person_definition)

    ids = [e.get_id() for e in service.find(options=SearchOptions(limit=1))]

    assert ids == ["a", "b"]
    assert mock_transport.request.call_count == 2
    assert mock_transport.request.call_args.kwargs["query"] == {"limit": 1, "starting_after": "cur-1"}
