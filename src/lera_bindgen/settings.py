"""Generator settings.

Settings are validated by pydantic and immutable once created. They can be
built explicitly, from a properties dictionary, or from ``LERA_BINDGEN_*``
environment variables.
"""

from __future__ import annotations

import os
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lera_bindgen.errors import ConfigurationError

_ENV_PREFIX = "LERA_BINDGEN_"


class BindgenSettings(BaseModel):
    """Settings controlling where model sources are found and how they are parsed.

    Attributes:
        source_subdir: Crate subdirectory scanned (non-recursively) for sources
        source_extension: Extension of source files, including the dot
        parse_workers: Number of threads used to parse files (1 = sequential)

    Example:
        ```python
        settings = BindgenSettings.from_properties({"parse_workers": 4})

        # Zero-config, reads LERA_BINDGEN_* variables
        settings = BindgenSettings.from_env()
        ```

    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
    )

    source_subdir: str = Field(
        default="src", description="Crate subdirectory holding model sources"
    )
    source_extension: str = Field(
        default=".rs", description="Extension of source files to parse"
    )
    parse_workers: int = Field(
        default=1, gt=0, description="Threads used to parse source files"
    )

    @field_validator("source_subdir")
    @classmethod
    def validate_source_subdir(cls, v: str) -> str:
        """Validate that the subdirectory is a non-empty relative path.

        Raises:
            ValueError: If the path is empty or absolute

        """
        stripped = v.strip()
        if not stripped:
            raise ValueError("source_subdir cannot be empty")
        if os.path.isabs(stripped):
            raise ValueError(f"source_subdir must be relative, got: {v}")
        return stripped

    @field_validator("source_extension")
    @classmethod
    def validate_source_extension(cls, v: str) -> str:
        """Validate and normalise the extension to ``.ext`` form.

        Raises:
            ValueError: If the extension is empty

        """
        stripped = v.strip()
        if not stripped or stripped == ".":
            raise ValueError("source_extension cannot be empty")
        if not stripped.startswith("."):
            stripped = f".{stripped}"
        return stripped

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create settings from a properties dictionary with validation.

        Args:
            properties: Dictionary containing settings

        Returns:
            Validated settings instance

        Raises:
            ConfigurationError: If properties are invalid

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid bindgen settings: {e}") from e

    @classmethod
    def from_env(cls, overrides: dict[str, Any] | None = None) -> Self:
        """Create settings from environment variables.

        Environment variables used:
        - LERA_BINDGEN_SOURCE_SUBDIR
        - LERA_BINDGEN_SOURCE_EXTENSION
        - LERA_BINDGEN_PARSE_WORKERS

        Explicit overrides take priority over the environment.

        Raises:
            ConfigurationError: If the resulting settings are invalid

        """
        properties: dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.environ.get(f"{_ENV_PREFIX}{name.upper()}")
            if value is not None:
                properties[name] = value

        if overrides:
            properties.update(
                {key: value for key, value in overrides.items() if value is not None}
            )
        return cls.from_properties(properties)
