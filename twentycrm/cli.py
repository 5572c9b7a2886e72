"""Generate typed entity modules from a Twenty workspace schema.

Examples:
    twentycrm-generate --config twenty-codegen.yaml
    twentycrm-generate --package myapp.crm --output src/myapp/crm --entities person,company
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .clients.transport import Transport, TwentyTransport
from .config.config_loader import config_from_env, load_codegen_config
from .config.settings import ApiConfig, CodegenConfig, CodegenOptions
from .generator.writer import CodegenWriter
from .services.metadata_service import MetadataService
from .services.registry import EntityRegistry
from .utils.errors import ConfigError, TwentyCrmError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twentycrm-generate",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML codegen config file.")
    parser.add_argument("--package", default=None, help="Dotted package name of the generated modules.")
    parser.add_argument("--output", default=None, help="Directory to write generated modules into.")
    parser.add_argument("--api-url", default=None, help="Twenty REST base URL (default: $TWENTY_API_URL).")
    parser.add_argument("--api-token", default=None, help="Twenty API key (default: $TWENTY_API_TOKEN).")
    parser.add_argument("--entities", default=None, help="Comma-separated object names, e.g. person,company.")
    parser.add_argument("--all", action="store_true", help="Generate every object the workspace exposes.")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing files.")
    parser.add_argument("--no-services", action="store_true", help="Skip service wrappers.")
    parser.add_argument("--no-collections", action="store_true", help="Skip collection wrappers.")
    return parser


def _split_entities(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def resolve_config(args: argparse.Namespace) -> CodegenConfig:
    """Build the codegen config from a config file or the command line.

    Command-line flags override the file where both are given.
    """
    if args.config is not None:
        config = load_codegen_config(args.config)
        updates = {}
        if args.package:
            updates["package"] = args.package
        if args.output:
            updates["output_dir"] = args.output
        if args.entities:
            updates["entities"] = _split_entities(args.entities)
        if args.api_url or args.api_token:
            updates["api"] = config.api.model_copy(
                update={k: v for k, v in (("api_url", args.api_url), ("api_token", args.api_token)) if v}
            )
        options = config.options.model_copy(
            update={
                "overwrite": config.options.overwrite or args.overwrite,
                "generate_services": config.options.generate_services and not args.no_services,
                "generate_collections": config.options.generate_collections and not args.no_collections,
            }
        )
        updates["options"] = options
        return config.model_copy(update=updates)

    if not args.package:
        raise ConfigError("Missing required option: --package (or --config)")
    if not args.output:
        raise ConfigError("Missing required option: --output (or --config)")

    if args.api_url and args.api_token:
        api = ApiConfig(api_url=args.api_url, api_token=args.api_token)
    else:
        api = config_from_env()
        api = api.model_copy(
            update={k: v for k, v in (("api_url", args.api_url), ("api_token", args.api_token)) if v}
        )

    return CodegenConfig(
        package=args.package,
        output_dir=args.output,
        api=api,
        entities=_split_entities(args.entities),
        options=CodegenOptions(
            overwrite=args.overwrite,
            generate_services=not args.no_services,
            generate_collections=not args.no_collections,
        ),
    )


def main(argv: Optional[List[str]] = None, transport: Optional[Transport] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
        if transport is None:
            transport = TwentyTransport(config.api.api_url, config.api.api_token, config.api.timeout)

        registry = EntityRegistry(transport, MetadataService(transport))
        entities = registry.get_all_entity_names() if args.all else config.entities
        writer = CodegenWriter(config, registry)
        generated = writer.generate(entities)
    except (TwentyCrmError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for object_name, paths in generated.items():
        for path in paths:
            print(f"{object_name}: {path}")
    print(f"Generated {len(generated) - 1} entit{'y' if len(generated) == 2 else 'ies'} into {config.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
