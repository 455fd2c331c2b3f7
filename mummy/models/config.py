"""Site configuration models.

Loaded from ``mummy.toml`` (top-level keys) or from the ``[tool.mummy]``
table of ``pyproject.toml`` in the project directory.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageAspectConfig(BaseModel):
    """Overrides for one named image aspect, e.g. ``preview`` or ``thumbnail``."""

    model_config = ConfigDict(frozen=True)

    scale_max_length: int | None = Field(default=None, gt=0)
    compression_quality: float | None = Field(default=None, gt=0, le=1)


class ImageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    process_threshold_file_size: int = Field(default=800_000, ge=0)
    scale_max_length: int = Field(default=2560, gt=0)
    compression_quality: float = Field(default=0.8, gt=0, le=1)
    with_aspects: list[str] = []
    aspects: dict[str, ImageAspectConfig] = {}


class PageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    names_bare: bool = False  # "clean" URLs: no `.html` extension on targets


class SiteConfig(BaseModel):
    """Project-level configuration for planning and mummification."""

    model_config = ConfigDict(frozen=True)

    content_base_names: list[str] = ["index"]
    veil_name_pattern: str = r"^_(.*)$"
    asset_name_pattern: str = r"^\$(.*)$"
    ignore_patterns: list[str] = []
    text_output_line_separator: str = "\n"
    image: ImageConfig = ImageConfig()
    page: PageConfig = PageConfig()

    @field_validator("content_base_names")
    @classmethod
    def _no_blank_base_names(cls, value: list[str]) -> list[str]:
        if any(not name.strip() for name in value):
            raise ValueError("content base names must not be blank")
        return value

    @classmethod
    def load(cls, path: Path) -> SiteConfig:
        """Load configuration from a TOML file.

        ``pyproject.toml`` is read from its ``[tool.mummy]`` table; any other
        file is read from its top level.
        """
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("mummy", {})
        return cls.model_validate(data)

    @classmethod
    def discover(cls, project_dir: Path, config_file: str = "mummy.toml") -> SiteConfig:
        """Find and load the project configuration, or return the defaults."""
        for candidate in (project_dir / config_file, project_dir / "pyproject.toml"):
            if candidate.is_file():
                return cls.load(candidate)
        return cls()
