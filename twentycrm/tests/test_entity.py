"""Unit tests for the entity runtime."""

import pytest

from twentycrm.codecs.values import Address, Currency, FullName
from twentycrm.entity.runtime import UNKNOWN_FIELD, DefinitionMetadata, Entity, StaticMetadata


@pytest.fixture
def person(person_definition):
    return Entity.from_definition(
        person_definition,
        {
            "id": "p-1",
            "name": {"firstName": "Ada", "lastName": "Lovelace"},
            "city": "London",
            "companyId": "c-1",
            "customThing": {"nested": True},
        },
    )


def test_get_decodes_composite_fields(person):
    name = person.get("name")
    assert isinstance(name, FullName)
    assert name.full_name == "Ada Lovelace"
    assert person.get("city") == "London"


def test_get_falls_back_to_wire_name(person):
    assert person.get("company") == "c-1"
    assert person.has("company")
    assert "company" in person


def test_unknown_fields_pass_through(person):
    assert person.get("customThing") == {"nested": True}
    assert person.to_api()["customThing"] == {"nested": True}
    assert person.metadata.lookup("customThing") is UNKNOWN_FIELD


def test_set_relation_field_uses_id_wire_key(person):
    person.set("company", "c-2")
    payload = person.to_api()
    assert payload["companyId"] == "c-2"
    assert "company" not in payload
    assert "companyId" not in person.raw()


def test_set_relation_field_on_empty_entity(person_definition):
    entity = Entity.from_definition(person_definition)
    entity.set("company", "c-9")
    assert entity.to_api() == {"companyId": "c-9"}


def test_to_api_encodes_value_objects(company_definition):
    company = Entity.from_definition(company_definition)
    company.set("address", Address(city="Paris", post_code="75001"))
    company.set("annualRecurringRevenue", Currency.from_amount(10))
    payload = company.to_api()
    assert payload["address"] == {"addressCity": "Paris", "addressPostcode": "75001"}
    assert payload["annualRecurringRevenue"] == {"amountMicros": 10000000, "currencyCode": "USD"}


def test_to_api_keeps_wire_dicts(person):
    assert person.to_api()["name"] == {"firstName": "Ada", "lastName": "Lovelace"}


def test_id_accessors(person):
    assert person.get_id() == "p-1"
    person.set_id(None)
    assert person.get_id() is None
    assert "id" not in person.to_api()


def test_mapping_protocol(person):
    assert person["city"] == "London"
    person["city"] = "Paris"
    assert person.get("city") == "Paris"
    del person["city"]
    assert "city" not in person
    with pytest.raises(KeyError):
        person["city"]
    assert "company" in list(person)
    assert len(person) == len(person.field_names)


def test_unset_removes_both_names(person):
    person.unset("company")
    assert not person.has("company")
    assert "companyId" not in person.raw()


def test_relation_cache_is_not_serialized(person):
    person.set_relation("company", "loaded")
    assert person.has_loaded_relation("company")
    assert person.get_relation("company") == "loaded"
    assert person.loaded_relations == ["company"]
    assert person.to_api()["companyId"] == "c-1"


def test_static_metadata_round_trips_definition(person_definition):
    static = StaticMetadata(
        object_name="person",
        object_name_plural="people",
        api_endpoint="/people",
        fields={
            "name": {"type": "FULL_NAME", "label": "Name"},
            "company": {"type": "RELATION", "label": "Company"},
            "createdAt": {"type": "DATE_TIME", "nullable": False},
        },
        field_to_api={"company": "companyId"},
        relations={"company": {"type": "MANY_TO_ONE", "target_object_name": "company"}},
    )
    entity = Entity(static, {"companyId": "c-1", "name": {"firstName": "Ada"}})
    assert entity.get("company") == "c-1"
    assert isinstance(entity.get("name"), FullName)

    definition = static.to_definition()
    assert definition.map_field_to_api("company") == "companyId"
    assert definition.get_relation("company").target_object_name == "company"
    assert definition.get_required_fields().keys() == {"createdAt"}


def test_definition_metadata_lookup(person_definition):
    metadata = DefinitionMetadata(person_definition)
    spec = metadata.lookup("emails")
    assert spec.known and spec.has_codec
    assert not metadata.lookup("city").has_codec
    assert not metadata.lookup("nothing").known


def test_embedded_relation_does_not_replace_foreign_key(person_definition):
    entity = Entity.from_definition(
        person_definition,
        {"id": "p1", "companyId": "c1", "company": {"id": "c1", "name": "Acme"}},
    )
    assert entity.to_api() == {"id": "p1", "companyId": "c1"}

    entity = Entity.from_definition(
        person_definition,
        {"id": "p1", "company": {"id": "c1", "name": "Acme"}, "companyId": "c1"},
    )
    assert entity.to_api()["companyId"] == "c1"


def test_embedded_relation_alone_serializes_its_id(person_definition):
    entity = Entity.from_definition(person_definition, {"company": {"id": "c1", "name": "Acme"}})
    assert entity.to_api() == {"companyId": "c1"}


def test_set_relation_after_embedded_response(person_definition):
    entity = Entity.from_definition(
        person_definition,
        {"id": "p1", "companyId": "c1", "company": {"id": "c1", "name": "Acme"}},
    )
    entity.set("company", "c2")
    assert entity.to_api()["companyId"] == "c2"


def test_embedded_collection_relation_is_not_serialized(company_definition):
    entity = Entity.from_definition(
        company_definition,
        {"id": "c1", "name": "Acme", "people": [{"id": "p1"}, {"id": "p2"}]},
    )
    assert entity.to_api() == {"id": "c1", "name": "Acme"}
