"""Write generated modules for the configured entities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..clients.logging import log_codegen
from ..codecs.registry import CodecRegistry
from ..config.settings import CodegenConfig
from ..metadata.models import EntityDefinition
from ..services.registry import EntityRegistry
from ..utils.errors import CodegenError
from .collection_generator import CollectionGenerator
from .entity_generator import EntityGenerator, GeneratedNames, render_template
from .service_generator import ServiceGenerator
from .templates import INIT_TEMPLATE

logger = logging.getLogger(__name__)


class CodegenWriter:
    """Generates entity, collection and service modules into ``output_dir``.

    Args:
        config: Code generation settings.
        registry: Source of entity definitions, usually backed by discovery.
        codec_registry: Decides which fields get composite value types.
    """

    def __init__(
        self,
        config: CodegenConfig,
        registry: EntityRegistry,
        codec_registry: Optional[CodecRegistry] = None,
    ):
        self.config = config
        self.registry = registry
        self.entity_generator = EntityGenerator(codec_registry)
        self.collection_generator = CollectionGenerator()
        self.service_generator = ServiceGenerator()

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    def _plan(self, object_names: List[str]) -> Dict[str, Dict[Path, str]]:
        """Render every requested entity and check its target paths.

        Nothing is written here, so a failure leaves the output directory
        untouched.
        """
        planned: Dict[str, Dict[Path, str]] = {}
        for object_name in object_names:
            definition = self.registry.get_definition(object_name)
            if definition is None:
                raise CodegenError(f"Entity not found: {object_name}")
            files = {
                self.output_dir / file_name: source
                for file_name, source in self.render_entity(definition).items()
            }
            if not self.config.options.overwrite:
                for path in files:
                    if path.exists():
                        raise CodegenError(f"File already exists (use --overwrite to replace): {path}")
            planned[object_name] = files
        return planned

    def _write_planned(self, object_name: str, files: Dict[Path, str]) -> List[Path]:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for path, source in files.items():
            path.write_text(source, encoding="utf-8")
        written = list(files)
        log_codegen(logger, object_name, [str(path) for path in written])
        return written

    def render_entity(self, definition: EntityDefinition) -> Dict[str, str]:
        """Render every module for one definition, keyed by file name."""
        names = GeneratedNames.for_definition(definition)
        options = self.config.options
        package = self.config.package

        files = {f"{names.entity_module}.py": self.entity_generator.render(definition)}
        if options.generate_collections:
            files[f"{names.collection_module}.py"] = self.collection_generator.render(definition, package)
        if options.generate_services:
            files[f"{names.service_module}.py"] = self.service_generator.render(
                definition, package, with_collection=options.generate_collections
            )
        return files

    def generate_entity(self, object_name: str) -> List[Path]:
        files = self._plan([object_name])[object_name]
        return self._write_planned(object_name, files)

    def _exports(self, object_names: List[str]) -> List[Tuple[str, List[str]]]:
        exports: List[Tuple[str, List[str]]] = []
        options = self.config.options
        for object_name in object_names:
            definition = self.registry.get_definition(object_name)
            if definition is None:
                continue
            names = GeneratedNames.for_definition(definition)
            exports.append((names.entity_module, [names.class_name]))
            if options.generate_collections:
                exports.append((names.collection_module, [names.collection_class]))
            if options.generate_services:
                exports.append((names.service_module, [names.service_class]))
        return exports

    def generate(self, object_names: Optional[List[str]] = None) -> Dict[str, List[Path]]:
        """Generate the given entities (default: ``config.entities``) plus ``__init__.py``.

        All entities are rendered and checked before the first file is
        written, so a failure leaves the output directory as it was.

        Raises:
            CodegenError: If no entities are selected, an entity is unknown or
                a file exists and overwriting is off.
        """
        object_names = list(object_names if object_names is not None else self.config.entities)
        if not object_names:
            raise CodegenError("No entities selected for generation")

        planned = self._plan(object_names)
        generated: Dict[str, List[Path]] = {}
        for object_name, files in planned.items():
            generated[object_name] = self._write_planned(object_name, files)

        init_path = self.output_dir / "__init__.py"
        init_source = render_template(
            INIT_TEMPLATE,
            package=self.config.package,
            exports=self._exports(object_names),
        )
        # __init__.py lists every generated module and is always refreshed
        init_path.write_text(init_source, encoding="utf-8")
        generated["__init__"] = [init_path]
        return generated
