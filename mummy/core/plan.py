"""Mummy plan: queries over the complete artifact graph.

The plan indexes every artifact once, right after planning:

- by target path (duplicates are a :class:`TargetPathCollisionError`),
- by referent source path (a directory claims its content file's source),
- by parent, where a directory's content artifact shares the directory's
  parent, since the directory is its *principal* artifact.

Artifacts are indexed by identity; they are immutable and kept alive by the
plan's root.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path, PurePath

from mummy.models.artifacts import Artifact, DirectoryArtifact

logger = logging.getLogger(__name__)


class TargetPathCollisionError(ValueError):
    """Raised when two artifacts are planned for the same target path."""

    def __init__(self, target_path: Path, existing: Artifact, artifact: Artifact) -> None:
        self.target_path = target_path
        self.existing = existing
        self.artifact = artifact
        super().__init__(
            f"Target path `{target_path}` planned for both {existing} and {artifact}."
        )


def _source_base(artifact: Artifact) -> Path:
    """The source directory against which an artifact's references resolve."""
    return artifact.source_path if artifact.is_directory else artifact.source_path.parent


def _target_base(artifact: Artifact) -> Path:
    return artifact.target_path if artifact.is_directory else artifact.target_path.parent


def _posix_relpath(path: Path, start: Path) -> str:
    return PurePath(os.path.relpath(path, start)).as_posix()


class MummyPlan:
    """The planned artifact graph of one site, rooted at its top directory."""

    def __init__(self, root: Artifact) -> None:
        self.root = root
        self._by_target: dict[Path, Artifact] = {}
        self._by_source: dict[Path, Artifact] = {}
        self._parents: dict[int, Artifact] = {}
        self._principals: dict[int, Artifact] = {}
        self._index(root, None)

    def _index(self, artifact: Artifact, parent: Artifact | None) -> None:
        existing = self._by_target.get(artifact.target_path)
        if existing is not None:
            raise TargetPathCollisionError(artifact.target_path, existing, artifact)
        self._by_target[artifact.target_path] = artifact
        if parent is not None:
            self._parents[id(artifact)] = parent
        # the first artifact claiming a source path wins: directories before their content
        for source_path in sorted(artifact.referent_source_paths):
            self._by_source.setdefault(source_path, artifact)
        for derived in artifact.derived_artifacts:
            self._index(derived, parent)
        if isinstance(artifact, DirectoryArtifact):
            content = artifact.content_artifact
            if content is not None:
                self._principals[id(content)] = artifact
                self._index(content, parent)
            for child in artifact.child_artifacts:
                self._index(child, artifact)

    def __len__(self) -> int:
        return len(self._by_target)

    @property
    def artifacts(self) -> list[Artifact]:
        """Every artifact, in depth-first plan order."""
        return list(self._by_target.values())

    def walk(self) -> Iterator[Artifact]:
        """Depth-first walk: each directory, then its content, then its children."""
        yield from self._by_target.values()

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def find_parent_artifact(self, artifact: Artifact) -> Artifact | None:
        """The directory containing the artifact; the root has none.

        A directory's content artifact has the directory's parent.
        """
        return self._parents.get(id(artifact))

    def principal_artifact(self, artifact: Artifact) -> Artifact:
        """The artifact semantically represented by *artifact*.

        For a directory's content artifact this is the directory; any other
        artifact is its own principal.
        """
        return self._principals.get(id(artifact), artifact)

    def child_navigation_artifacts(self, artifact: Artifact) -> list[Artifact]:
        """Navigable artifacts listed by the page for *artifact*.

        A directory lists its children; any other artifact lists its siblings.
        """
        principal = self.principal_artifact(artifact)
        if isinstance(principal, DirectoryArtifact):
            candidates: tuple[Artifact, ...] = principal.child_artifacts
        else:
            parent = self.find_parent_artifact(principal)
            candidates = parent.child_artifacts if isinstance(parent, DirectoryArtifact) else ()
        return [c for c in candidates if c.navigable]

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def find_artifact_by_target(self, target_path: Path) -> Artifact | None:
        return self._by_target.get(Path(target_path))

    def find_artifact_by_source_reference(self, source_path: Path) -> Artifact | None:
        """The artifact for which *source_path* is a referent source path."""
        return self._by_source.get(Path(os.path.normpath(source_path)))

    def find_artifact_by_source_relative_reference(
        self, context_artifact: Artifact, reference: str
    ) -> Artifact | None:
        """Resolve a reference made in *context_artifact*'s source, e.g. ``../about.md``."""
        return self.find_artifact_by_source_reference(_source_base(context_artifact) / reference)

    def relativize_source_reference(self, context_artifact: Artifact, referent: Artifact) -> str:
        """The source-tree reference from *context_artifact* to *referent*.

        Directory references end with ``/``.
        """
        reference = _posix_relpath(referent.source_path, _source_base(context_artifact))
        return reference + "/" if referent.is_directory else reference

    def reference_in_target(self, context_artifact: Artifact, referent: Artifact) -> str:
        """The target-tree reference from *context_artifact* to *referent*.

        A reference to a directory resolves to its content artifact's file;
        a directory without content is referenced as ``name/``.
        """
        base = _target_base(context_artifact)
        if isinstance(referent, DirectoryArtifact):
            if referent.content_artifact is not None:
                return _posix_relpath(referent.content_artifact.target_path, base)
            return _posix_relpath(referent.target_path, base) + "/"
        return _posix_relpath(referent.target_path, base)
