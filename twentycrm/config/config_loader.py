"""Load API and code generation configuration."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..utils.errors import ConfigError
from .settings import ApiConfig, CodegenConfig

logger = logging.getLogger(__name__)

API_URL_ENV = "TWENTY_API_URL"
API_TOKEN_ENV = "TWENTY_API_TOKEN"
TIMEOUT_ENV = "TWENTY_API_TIMEOUT"

# Pattern to match env("VAR_NAME") placeholders
ENV_PATTERN = re.compile(r'env\("([^"]+)"\)')


def _resolve_env_placeholders(value: Any) -> Any:
    """Recursively resolve env("VAR") placeholders in YAML values.

    A placeholder embedded in a longer string is substituted in place, so
    ``env("HOST")/rest`` works as expected.
    """
    if isinstance(value, str):
        def _substitute(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable {var_name} not set (required by config)")
            return env_value

        return ENV_PATTERN.sub(_substitute, value)
    elif isinstance(value, dict):
        return {k: _resolve_env_placeholders(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_placeholders(item) for item in value]
    else:
        return value


def load_codegen_config(path: Union[str, Path]) -> CodegenConfig:
    """Load a code generation config from YAML.

    A ``.env`` file next to the config is loaded first (existing environment
    variables win), then ``env("VAR")`` placeholders are resolved.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated CodegenConfig.

    Raises:
        ConfigError: If the file is missing, is not a mapping, references an
            unset variable or fails validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    env_file = config_path.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    resolved = _resolve_env_placeholders(raw)
    try:
        config = CodegenConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {config_path}: {exc}") from exc

    logger.info(
        "Codegen config loaded",
        extra={"path": str(config_path), "package": config.package, "entities": config.entities},
    )
    return config


def config_from_env(env_file: Optional[Union[str, Path]] = None) -> ApiConfig:
    """Build the API config from ``TWENTY_API_URL`` / ``TWENTY_API_TOKEN``."""
    if env_file is not None:
        load_dotenv(env_file)

    api_url = os.getenv(API_URL_ENV)
    api_token = os.getenv(API_TOKEN_ENV)
    if not api_url:
        raise ConfigError(f"Set {API_URL_ENV} to the Twenty REST base URL")
    if not api_token:
        raise ConfigError(f"Set {API_TOKEN_ENV} to a Twenty API key")

    kwargs: dict = {"api_url": api_url, "api_token": api_token}
    timeout = os.getenv(TIMEOUT_ENV)
    if timeout:
        kwargs["timeout"] = int(timeout)
    return ApiConfig(**kwargs)
