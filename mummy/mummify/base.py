"""Mummifier interface and shared file mummification lifecycle.

A mummifier is a stateless strategy object shared across a whole run. It
knows how to:

1. ``plan``: produce an :class:`~mummy.models.artifacts.Artifact` for a
   source path without writing anything, and
2. ``mummify``: materialize a planned artifact into the target tree.

Planning and mummification are separate phases so that the entire artifact
graph can be inspected (reference resolution, navigation listings) before any
output file is written.
"""

from __future__ import annotations

import abc
import logging
import re
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, final

from mummy.models.artifacts import Artifact, CorporealSource, FileArtifact
from mummy.models.description import ResourceDescription

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)

# `@2020-01-02-name.ext`: dated post, published on the date in its filename.
POST_FILENAME_PATTERN = re.compile(r"@((\d{4})-(\d{2})-(\d{2}))-(([^.]+)\.(.+))")


def _mummifier_name(mummifier: Any) -> str:
    return type(mummifier).__name__


class PlanError(RuntimeError):
    """Raised when planning an artifact for a source path fails."""

    def __init__(
        self,
        source_path: Path,
        target_path: Path | None,
        mummifier: Any,
        cause: BaseException,
    ) -> None:
        self.source_path = source_path
        self.target_path = target_path
        self.mummifier = mummifier
        super().__init__(
            f"Planning `{source_path}` -> `{target_path}` with "
            f"{_mummifier_name(mummifier)} failed: {cause}"
        )


class MummifyError(RuntimeError):
    """Raised when materializing an artifact into the target tree fails."""

    def __init__(self, artifact: Artifact, cause: BaseException) -> None:
        self.artifact = artifact
        super().__init__(
            f"Mummifying `{artifact.source_path}` -> `{artifact.target_path}` with "
            f"{_mummifier_name(artifact.mummifier)} failed: {cause}"
        )


class Mummifier(abc.ABC):
    """Abstract base for all mummifiers.

    Subclasses **must** implement:
        * ``plan(context, source_path, target_path)``
        * ``mummify(context, context_artifact, artifact)``

    Subclasses **may** override:
        * ``supported_extensions``: filename extensions (lowercase, without
          the dot) this mummifier is registered for.
        * ``media_type_for(context, path)``
        * ``plan_target_filename(context, filename)``: target filename
          translation, e.g. ``page.md`` -> ``page.html``.
    """

    supported_extensions: ClassVar[frozenset[str]] = frozenset()

    def media_type_for(self, context: MummyContext, path: Path) -> str | None:
        """The media type of the artifact produced for *path*, if known."""
        return None

    def plan_target_filename(self, context: MummyContext, filename: str) -> str:
        """Return the target filename for a source filename; unchanged by default."""
        return filename

    @abc.abstractmethod
    def plan(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path | None = None,
    ) -> Artifact:
        """Plan the artifact for *source_path*.

        When *target_path* is not given it mirrors the source path's location
        relative to the site source directory.
        """
        ...

    @abc.abstractmethod
    def mummify(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        """Materialize *artifact*, in the context of *context_artifact*.

        The context artifact is the artifact on whose behalf the output is
        produced; for a directory's content artifact it is the directory.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class AbstractFileMummifier(Mummifier):
    """Base for mummifiers producing one target file per source file."""

    def plan(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path | None = None,
    ) -> Artifact:
        if target_path is None:
            target_path = context.target_path_for(source_path, self)
        logger.debug("Planning artifact for source file `%s` ...", source_path)
        description = self.load_description(context, source_path)
        return self.create_artifact(context, source_path, target_path, description)

    def create_artifact(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path,
        description: ResourceDescription,
    ) -> Artifact:
        """Create the artifact; a plain :class:`FileArtifact` by default."""
        return FileArtifact(
            mummifier=self,
            source=CorporealSource(path=source_path),
            target_path=target_path,
            description=description,
            is_post=is_post_filename(source_path.name),
        )

    def load_description(
        self, context: MummyContext, source_path: Path
    ) -> ResourceDescription:
        """Describe the source file from its metadata and filename.

        Embedded metadata comes first (first property wins), then a
        ``publishedOn`` date for posts, then the media type.
        """
        description = ResourceDescription.from_properties(
            self.load_source_metadata(context, source_path)
        )
        changes: dict[str, Any] = {}
        if description.published_on is None:
            published_on = post_published_on(source_path.name)
            if published_on is not None:
                changes["published_on"] = published_on
        media_type = self.media_type_for(context, source_path)
        if media_type is not None:
            changes["content_type"] = media_type
        return description.with_properties(**changes) if changes else description

    @abc.abstractmethod
    def load_source_metadata(
        self, context: MummyContext, source_path: Path
    ) -> Iterable[tuple[str, Any]]:
        """Metadata stored in the source file itself, as (name, value) pairs.

        Names may repeat; the first occurrence wins.
        """
        ...

    @final
    def mummify(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        """Ensure the parent directory exists, then produce the target file.

        **Do not override**; implement :meth:`mummify_file` instead.
        """
        logger.debug("Mummifying file artifact %s ...", artifact)
        target_path = artifact.target_path
        # posts may be planned several levels below their directory
        target_path.parent.mkdir(parents=True, exist_ok=True)
        self.mummify_file(context, context_artifact, artifact)
        if not target_path.exists():
            raise FileNotFoundError(
                f"Mummification of `{artifact.source_path}` did not produce "
                f"target file `{target_path}`."
            )
        logger.debug("Mummified file artifact %s.", artifact)

    @abc.abstractmethod
    def mummify_file(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        """Unconditionally write the target file for *artifact*."""
        ...


def is_post_filename(filename: str) -> bool:
    return POST_FILENAME_PATTERN.fullmatch(filename) is not None


def post_published_on(filename: str) -> date | None:
    """The publication date encoded in a post filename, if it is one."""
    match = POST_FILENAME_PATTERN.fullmatch(filename)
    if match is None:
        return None
    return date(int(match.group(2)), int(match.group(3)), int(match.group(4)))
