"""Configuration models for the API connection and code generation."""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, field_validator

from ..clients.transport import DEFAULT_TIMEOUT_SECONDS

PACKAGE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class ApiConfig(BaseModel):
    api_url: str
    api_token: str
    timeout: int = DEFAULT_TIMEOUT_SECONDS


class CodegenOptions(BaseModel):
    overwrite: bool = False
    generate_services: bool = True
    generate_collections: bool = True


class CodegenConfig(BaseModel):
    package: str
    output_dir: str
    api: ApiConfig
    entities: List[str] = []
    options: CodegenOptions = CodegenOptions()

    @field_validator("package")
    @classmethod
    def _check_package(cls, value: str) -> str:
        if not PACKAGE_PATTERN.match(value):
            raise ValueError(f"Invalid package name: {value}")
        return value
