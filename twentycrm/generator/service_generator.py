"""Render typed service wrappers around GenericEntityService."""

from __future__ import annotations

from ..metadata.models import EntityDefinition
from .entity_generator import GeneratedNames, render_template
from .templates import SERVICE_TEMPLATE


class ServiceGenerator:
    def render(self, definition: EntityDefinition, package: str, with_collection: bool = True) -> str:
        """Render the service module.

        Without a collection wrapper ``find`` and ``batch_upsert`` return a
        plain list of entities.
        """
        names = GeneratedNames.for_definition(definition)
        find_return = names.collection_class if with_collection else f"List[{names.class_name}]"
        return render_template(
            SERVICE_TEMPLATE,
            package=package,
            object_name=definition.object_name,
            class_name=names.class_name,
            entity_module=names.entity_module,
            collection_class=names.collection_class,
            collection_module=names.collection_module,
            service_class=names.service_class,
            with_collection=with_collection,
            find_return=find_return,
        )
