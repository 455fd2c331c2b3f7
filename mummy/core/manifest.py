"""Build manifest: content-addressed record of one mummification run.

Each produced file is recorded with its relative target path, the source
paths it depends on and a ``sha256:<hex>`` fingerprint of its bytes. The
manifest as a whole is sealed with a hash over the canonical JSON of its
entries, so two builds producing identical output have identical
manifest hashes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict, Field

from mummy.core.hasher import content_address, file_content_address
from mummy.core.plan import MummyPlan

logger = logging.getLogger(__name__)


class ManifestEntry(BaseModel):
    """One produced file."""

    model_config = ConfigDict(frozen=True)

    target: str
    source: str | None = None  # None for phantom artifacts
    referent_sources: list[str] = Field(default_factory=list)
    mummifier: str
    content_type: str | None = None
    size_bytes: int = 0
    fingerprint: str


class BuildManifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_directory: str
    target_directory: str
    entries: list[ManifestEntry] = Field(default_factory=list)
    manifest_hash: str

    def find_entry(self, target: str) -> ManifestEntry | None:
        return next((e for e in self.entries if e.target == target), None)

    def write(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Wrote build manifest `%s`.", path)

    @classmethod
    def read(cls, path: Path) -> BuildManifest:
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


def _relative(path: Path, base: Path) -> str:
    return PurePath(path.relative_to(base)).as_posix()


def build_manifest(plan: MummyPlan) -> BuildManifest:
    """Fingerprint every file produced for a mummified plan.

    Directories are not recorded; their content artifacts are.
    """
    source_directory = plan.root.source_path
    target_directory = plan.root.target_path
    entries: list[ManifestEntry] = []
    for artifact in plan.walk():
        if artifact.is_directory:
            continue
        target_path = artifact.target_path
        entries.append(
            ManifestEntry(
                target=_relative(target_path, target_directory),
                source=None if artifact.is_phantom else _relative(artifact.source_path, source_directory),
                referent_sources=sorted(
                    _relative(p, source_directory) for p in artifact.referent_source_paths
                ),
                mummifier=type(artifact.mummifier).__name__,
                content_type=artifact.resource_description.content_type,
                size_bytes=target_path.stat().st_size,
                fingerprint=file_content_address(target_path),
            )
        )
    entries.sort(key=lambda e: e.target)
    manifest_hash = content_address([e.model_dump(mode="json") for e in entries])
    return BuildManifest(
        source_directory=str(source_directory),
        target_directory=str(target_directory),
        entries=entries,
        manifest_hash=manifest_hash,
    )
