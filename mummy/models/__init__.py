"""Mummy data models: all Pydantic v2, all frozen (immutable)."""

from mummy.models.artifacts import (
    Artifact,
    AspectualArtifact,
    CorporealSource,
    DirectoryArtifact,
    FileArtifact,
    PhantomSource,
)
from mummy.models.config import ImageAspectConfig, ImageConfig, PageConfig, SiteConfig
from mummy.models.description import (
    EMPTY_DESCRIPTION,
    MetadataParseError,
    ResourceDescription,
)

__all__ = [
    # artifacts
    "Artifact",
    "AspectualArtifact",
    "CorporealSource",
    "DirectoryArtifact",
    "FileArtifact",
    "PhantomSource",
    # config
    "ImageAspectConfig",
    "ImageConfig",
    "PageConfig",
    "SiteConfig",
    # description
    "EMPTY_DESCRIPTION",
    "MetadataParseError",
    "ResourceDescription",
]
