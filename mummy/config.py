"""Runtime settings: env-driven.

Centralized settings using pydantic-settings. Reads from a ``.env`` file and
``MUMMY_*`` environment variables. Site-specific configuration (content base
names, image scaling, ...) lives in :class:`mummy.models.config.SiteConfig`.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MummySettings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export MUMMY_LOG_LEVEL=DEBUG
        export MUMMY_WORKERS=8
        export MUMMY_MANIFEST_PATH=.mummy/manifest.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MUMMY_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Leaf mummification concurrency; 1 is strictly sequential depth-first.
    workers: int = Field(default=1, ge=1)

    # Site configuration file looked up in the project directory
    config_file: str = "mummy.toml"

    # Build manifest output; disabled when unset
    manifest_path: Path | None = None
