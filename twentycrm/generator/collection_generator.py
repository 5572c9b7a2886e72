"""Render typed collection wrappers."""

from __future__ import annotations

from ..metadata.models import EntityDefinition
from .entity_generator import GeneratedNames, render_template
from .templates import COLLECTION_TEMPLATE


class CollectionGenerator:
    def render(self, definition: EntityDefinition, package: str) -> str:
        names = GeneratedNames.for_definition(definition)
        return render_template(
            COLLECTION_TEMPLATE,
            package=package,
            class_name=names.class_name,
            entity_module=names.entity_module,
            collection_class=names.collection_class,
            plural_getter=names.plural_getter,
        )
