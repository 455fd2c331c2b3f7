"""Artifact models: the immutable nodes of the build graph.

An artifact describes one resource to be produced in the site target tree.
Artifacts are created at plan time by their mummifier and never mutated
afterwards; mummification only reads them.

The source of an artifact is a tagged variant:

- :class:`CorporealSource`: a real file or directory in the source tree.
- :class:`PhantomSource`: a nominal path inside the source tree that does not
  exist on disk, used for synthesized directory content.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict

from mummy.models.description import EMPTY_DESCRIPTION, ResourceDescription

if TYPE_CHECKING:
    from mummy.mummify.base import Mummifier


class CorporealSource(BaseModel):
    """A source path backed by a real file or directory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["corporeal"] = "corporeal"
    path: Path


class PhantomSource(BaseModel):
    """A nominal source path with no backing file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["phantom"] = "phantom"
    path: Path


class Artifact(BaseModel):
    """Base of all artifacts.

    The ``mummifier`` is a back-reference to the strategy that planned the
    artifact and will materialize it; the artifact does not own it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mummifier: Any
    source: CorporealSource | PhantomSource
    target_path: Path
    navigable: bool = False

    @property
    def source_path(self) -> Path:
        return self.source.path

    @property
    def is_phantom(self) -> bool:
        return isinstance(self.source, PhantomSource)

    @property
    def is_source_path_file(self) -> bool:
        return True

    @property
    def is_directory(self) -> bool:
        return not self.is_source_path_file

    @property
    def resource_description(self) -> ResourceDescription:
        raise NotImplementedError

    @property
    def referent_source_paths(self) -> frozenset[Path]:
        """Source paths that count as this artifact for references and change detection."""
        return frozenset({self.source_path})

    @property
    def comprised_artifacts(self) -> tuple[Artifact, ...]:
        """Every artifact directly inside this one (full subtree walk)."""
        return ()

    @property
    def subsumed_artifacts(self) -> tuple[Artifact, ...]:
        """Artifacts that semantically represent this one."""
        return ()

    @property
    def derived_artifacts(self) -> tuple[Artifact, ...]:
        """Artifacts produced as a by-product of this one, e.g. image aspects."""
        return ()

    def determine_title(self) -> str:
        """The description title, falling back to the source filename."""
        title = self.resource_description.title
        if title:
            return title
        return self.source_path.name

    def __repr__(self) -> str:
        phantom = " phantom" if self.is_phantom else ""
        return f"<{type(self).__name__}{phantom} {self.source_path} -> {self.target_path}>"

    def __str__(self) -> str:
        return repr(self)


class FileArtifact(Artifact):
    """An artifact produced from a single (possibly phantom) source file."""

    description: ResourceDescription = EMPTY_DESCRIPTION
    is_post: bool = False

    @property
    def resource_description(self) -> ResourceDescription:
        return self.description

    @property
    def aspect(self) -> str | None:
        return self.description.aspect


class AspectualArtifact(FileArtifact):
    """A file artifact that also produces aspect variants (e.g. thumbnails)."""

    aspects: tuple[FileArtifact, ...] = ()

    @property
    def derived_artifacts(self) -> tuple[Artifact, ...]:
        return self.aspects

    def find_aspect(self, aspect_id: str) -> FileArtifact | None:
        return next((a for a in self.aspects if a.aspect == aspect_id), None)


class DirectoryArtifact(Artifact):
    """A directory, with an optional content artifact and child artifacts.

    Directories never carry metadata of their own: the resource description is
    always that of the content artifact, or empty when there is none.
    """

    navigable: bool = True
    content_artifact: Artifact | None = None
    child_artifacts: tuple[Artifact, ...] = ()

    @property
    def is_source_path_file(self) -> bool:
        return False

    @property
    def resource_description(self) -> ResourceDescription:
        if self.content_artifact is not None:
            return self.content_artifact.resource_description
        return EMPTY_DESCRIPTION

    @property
    def referent_source_paths(self) -> frozenset[Path]:
        paths = {self.source_path}
        if self.content_artifact is not None:
            paths |= self.content_artifact.referent_source_paths
        return frozenset(paths)

    @property
    def comprised_artifacts(self) -> tuple[Artifact, ...]:
        if self.content_artifact is not None:
            return (self.content_artifact, *self.child_artifacts)
        return self.child_artifacts

    @property
    def subsumed_artifacts(self) -> tuple[Artifact, ...]:
        if self.content_artifact is not None:
            return (self.content_artifact,)
        return ()

    def determine_title(self) -> str:
        title = self.resource_description.title
        if title:
            return title
        return self.target_path.name or self.source_path.name
