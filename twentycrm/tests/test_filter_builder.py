"""Unit tests for filter building."""

import pytest

from twentycrm.query.filter_builder import FilterBuilder, RawFilter, escape_like_value
from twentycrm.services.options import SearchOptions
from twentycrm.utils.errors import FilterError


def test_equals():
    assert FilterBuilder().equals("name", "John").build_filter_string() == 'name[eq]:"John"'


def test_chained_conditions_join_with_comma():
    result = FilterBuilder().equals("city", "Paris").greater_than("employees", 10).build_filter_string()
    assert result == 'city[eq]:"Paris",employees[gt]:10'


def test_or_mode_wraps_conditions():
    result = FilterBuilder().use_or().equals("a", 1).equals("b", 2).build_filter_string()
    assert result == "or(a[eq]:1,b[eq]:2)"


def test_contains_escapes_and_wraps():
    assert FilterBuilder().contains("email", "@x.com").build_filter_string() == 'email[ilike]:"%@x.com%"'
    assert FilterBuilder().contains("code", "50%_a\\b").build_filter_string() == (
        'code[ilike]:"%50\\%\\_a\\\\b%"'
    )


def test_value_formatting():
    builder = (
        FilterBuilder()
        .equals("active", True)
        .in_("status", ["A", "B"])
        .equals("title", 'say "hi"')
        .not_equals("archived", False)
    )
    assert builder.build_filter_string() == (
        'active[eq]:true,status[in]:["A","B"],title[eq]:"say \\"hi\\"",archived[neq]:false'
    )


def test_null_helpers():
    assert FilterBuilder().is_null("deletedAt").build_filter_string() == "deletedAt[is]:NULL"
    assert FilterBuilder().is_not_null("deletedAt").build_filter_string() == "deletedAt[neq]:NULL"


def test_empty_builder():
    builder = FilterBuilder()
    assert builder.build_filter_string() is None
    assert not builder.has_filters()
    assert not builder.build().has_filters()


def test_invalid_operator():
    with pytest.raises(FilterError):
        FilterBuilder().where("name", "contains", "x")


def test_invalid_logical_operator():
    with pytest.raises(FilterError):
        FilterBuilder().set_logical_operator("xor")


def test_clear_and_conditions():
    builder = FilterBuilder().equals("a", 1)
    assert builder.conditions == [{"field": "a", "operator": "eq", "value": 1}]
    builder.clear()
    assert not builder.has_filters()


def test_unknown_field_rejected_with_definition(person_definition):
    with pytest.raises(FilterError):
        FilterBuilder.for_entity(person_definition).equals("nickname", "x")


def test_dotted_field_validates_base(person_definition):
    result = FilterBuilder(person_definition).equals("name.firstName", "Ada").build_filter_string()
    assert result == 'name.firstName[eq]:"Ada"'


def test_select_value_validated(person_definition):
    builder = FilterBuilder(person_definition)
    builder.equals("status", "LEAD")
    with pytest.raises(FilterError) as excinfo:
        builder.equals("status", "PROSPECT")
    assert "status" in str(excinfo.value)
    assert "PROSPECT" in str(excinfo.value)
    assert excinfo.value.field == "status"


def test_select_list_values_validated(person_definition):
    with pytest.raises(FilterError):
        FilterBuilder(person_definition).in_("status", ["LEAD", "NOPE"])


def test_raw_filter():
    assert RawFilter('city[eq]:"Paris"').has_filters()
    assert not RawFilter("  ").has_filters()
    assert RawFilter(None).build_filter_string() is None


def test_escape_like_value():
    assert escape_like_value("50%_off\\") == "50\\%\\_off\\\\"


def test_search_options_query_params():
    assert SearchOptions().to_query_params() == {"limit": 20}
    options = SearchOptions(limit=5, order_by="createdAt[DescNullsLast]", depth=1, ending_before="c0")
    assert options.to_query_params() == {
        "limit": 5,
        "order_by": "createdAt[DescNullsLast]",
        "depth": 1,
        "ending_before": "c0",
    }
    assert options.after("c9").to_query_params()["starting_after"] == "c9"
    assert "ending_before" not in options.after("c9").to_query_params()


def test_select_rejects_non_string_scalars(person_definition):
    builder = FilterBuilder(person_definition)
    with pytest.raises(FilterError) as excinfo:
        builder.equals("status", 5)
    assert excinfo.value.value == 5
    with pytest.raises(FilterError):
        builder.in_("status", ["LEAD", True])
    builder.is_null("status").is_not_null("status")
    assert len(builder.conditions) == 2
