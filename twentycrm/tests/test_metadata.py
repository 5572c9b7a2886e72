"""Unit tests for metadata models, discovery parsing and updatability."""

import pytest

from twentycrm.enums import FieldType, RelationType
from twentycrm.metadata.factory import definition_from_dict, field_from_dict, relation_from_dict
from twentycrm.metadata.field_constants import (
    AUTO_MANAGED_FIELDS,
    filter_updatable_fields,
    is_updatable,
)
from twentycrm.metadata.models import EntityDefinition, FieldMetadata, SelectField
from twentycrm.utils.errors import MetadataParseError


def test_definition_from_payload(person_definition):
    assert person_definition.object_name == "person"
    assert person_definition.object_name_plural == "people"
    assert person_definition.api_endpoint == "/people"
    assert person_definition.field_names[:3] == ["id", "name", "emails"]
    assert person_definition.get_field("name").type is FieldType.FULL_NAME
    assert person_definition.get_field("city").object_metadata_id == "obj-person"


def test_malformed_field_is_skipped(person_definition):
    assert not person_definition.has_field("mystery")
    assert person_definition.has_field("searchVector")


def test_object_without_plural_is_skipped(object_payloads):
    assert definition_from_dict(object_payloads["broken"]) is None


def test_relation_fields_map_to_id_suffix(person_definition, company_definition):
    for definition in (person_definition, company_definition):
        for name, field in definition.fields.items():
            if field.type.is_relation:
                assert definition.map_field_to_api(name) == f"{name}Id"
                assert definition.map_api_to_field(f"{name}Id") == name
            else:
                assert definition.map_field_to_api(name) == name
                assert definition.map_api_to_field(name) == name


def test_unknown_names_map_to_themselves(person_definition):
    assert person_definition.map_field_to_api("notAField") == "notAField"
    assert person_definition.map_api_to_field("notAFieldId") == "notAFieldId"


def test_relations_parsed(person_definition, company_definition):
    company = person_definition.get_relation("company")
    assert company.type is RelationType.MANY_TO_ONE
    assert company.target_object_name == "company"
    assert company.target_field_name == "people"
    assert company.returns_single

    people = company_definition.get_relation("people")
    assert people.returns_collection
    assert people.target_field_name == "company"
    assert company_definition.relation_names == ["people"]
    assert person_definition.has_relation("company")
    assert not person_definition.has_relation("people")


def test_standard_and_custom_fields(person_definition):
    assert person_definition.is_custom_field("status")
    assert person_definition.is_standard_field("city")
    assert set(person_definition.get_custom_fields()) == {"status", "score"}
    assert not person_definition.is_custom_field("notAField")


def test_required_fields(person_definition):
    assert set(person_definition.get_required_fields()) == {"id", "createdAt", "updatedAt"}


def test_select_field_options(person_definition):
    status = person_definition.get_field("status")
    assert isinstance(status, SelectField)
    assert status.valid_values == ["LEAD", "CUSTOMER"]
    assert status.is_valid_value("LEAD")
    assert not status.is_valid_value("lead")
    assert status.label_for_value("CUSTOMER") == "Customer"
    assert status.options_map == {"LEAD": "Lead", "CUSTOMER": "Customer"}
    assert status.option_for_value("MISSING") is None


def test_field_from_dict_defaults():
    field = field_from_dict({"name": "nickname"})
    assert field.type is FieldType.TEXT
    assert field.is_nullable
    assert field.is_active
    assert not field.is_system
    assert not field.is_custom


def test_field_from_dict_rejects_unknown_type():
    with pytest.raises(MetadataParseError):
        field_from_dict({"name": "weird", "type": "HOLOGRAM"})


def test_relation_from_dict_without_relation_payload():
    assert relation_from_dict({"name": "company", "type": "RELATION"}) is None


def test_duplicate_fields_rejected():
    field = FieldMetadata(name="city", type=FieldType.TEXT)
    with pytest.raises(ValueError):
        EntityDefinition.build("person", "people", fields=[field, field])


def test_definition_is_frozen(person_definition):
    with pytest.raises(Exception):
        person_definition.object_name = "other"


def test_field_type_predicates():
    assert FieldType.CURRENCY.requires_nested_handler
    assert not FieldType.TEXT.requires_nested_handler
    assert FieldType.TS_VECTOR.is_system_type
    assert FieldType.RELATION.is_relation


def test_updatability(person_definition, company_definition):
    assert is_updatable(person_definition.get_field("city"))
    assert not is_updatable(person_definition.get_field("id"))
    assert not is_updatable(person_definition.get_field("createdAt"))
    assert not is_updatable(person_definition.get_field("updatedAt"))
    assert not is_updatable(company_definition.get_field("createdBy"))
    assert AUTO_MANAGED_FIELDS == {"createdAt", "updatedAt", "deletedAt", "createdBy"}


def test_filter_updatable_fields(person_definition):
    data = {
        "city": "Paris",
        "createdAt": "2024-01-01",
        "deletedAt": None,
        "position": 3,
        "companyId": "c-1",
        "unknownField": "x",
    }
    filtered = filter_updatable_fields(data, person_definition.fields, person_definition.map_api_to_field)
    assert filtered == {"city": "Paris", "companyId": "c-1"}


@pytest.mark.parametrize(
    "key", ["sourceObjectMetadata", "targetObjectMetadata", "targetFieldMetadata"]
)
def test_relation_from_dict_rejects_non_mapping_parts(key):
    relation = {
        "type": "MANY_TO_ONE",
        "sourceObjectMetadata": {"nameSingular": "person"},
        "targetObjectMetadata": {"nameSingular": "company"},
        "targetFieldMetadata": {"name": "people"},
    }
    relation[key] = "company"
    with pytest.raises(MetadataParseError, match=key):
        relation_from_dict({"name": "company", "type": "RELATION", "relation": relation})
