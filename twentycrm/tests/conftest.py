"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from twentycrm.metadata.factory import definition_from_dict
from twentycrm.metadata.models import EntityDefinition
from twentycrm.services import registry as registry_module


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def metadata_payload(fixtures_dir: Path) -> Dict[str, Any]:
    """Load the ``metadata/objects`` discovery response."""
    with open(fixtures_dir / "metadata_objects.json") as f:
        return json.load(f)


@pytest.fixture
def object_payloads(metadata_payload) -> Dict[str, Dict[str, Any]]:
    return {
        obj["nameSingular"]: obj for obj in metadata_payload["data"]["objects"]
    }


@pytest.fixture
def person_definition(object_payloads) -> EntityDefinition:
    return definition_from_dict(object_payloads["person"])


@pytest.fixture
def company_definition(object_payloads) -> EntityDefinition:
    return definition_from_dict(object_payloads["company"])


@pytest.fixture
def mock_transport():
    """Create a mocked transport."""
    transport = Mock()
    transport.request = Mock(return_value={})
    return transport


@pytest.fixture(autouse=True)
def clear_definition_cache():
    """Keep the process-wide discovery cache out of other tests."""
    registry_module.clear_cache()
    yield
    registry_module.clear_cache()
