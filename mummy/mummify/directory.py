"""Directory mummifier: plans a directory's content page and children.

Each directory is represented by a *content artifact*: the first source
page whose base name appears in the configured content base names (e.g.
``index.md``), or else a synthesized phantom page. Everything else in the
directory that is not ignored becomes a child artifact.

Child target names are derived from their source names:

- ``$name`` (asset): marker removed; pages are copied, never rendered, and
  nothing below an asset directory is renamed.
- ``@2020-01-02-name.md`` (post): placed at ``2020/01/02/name.html``.
- ``_name`` (veiled): marker removed; not navigable.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from mummy.models.artifacts import Artifact, CorporealSource, DirectoryArtifact
from mummy.mummify.base import POST_FILENAME_PATTERN, Mummifier, PlanError
from mummy.mummify.page import PHANTOM_SOURCE_EXTENSION, AbstractPageMummifier

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)


class DirectoryMummifier(Mummifier):
    """Plans and materializes directories."""

    def plan(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path | None = None,
    ) -> Artifact:
        if not source_path.is_dir():
            raise NotADirectoryError(f"Source path `{source_path}` is not a directory.")
        if target_path is None:
            target_path = context.target_path_for(source_path, self)
        logger.debug("Planning directory `%s` ...", source_path)
        is_asset_tree = context.is_asset(source_path, check_ancestors=True)
        entries = sorted(
            (p for p in source_path.iterdir() if not context.is_ignored(p)),
            key=lambda p: p.name,
        )

        # asset trees are copied as they are, so they have no content page
        content_source = None if is_asset_tree else self.discover_content_file(context, entries)
        content_artifact: Artifact | None
        if content_source is not None:
            content_artifact = self.plan_content(context, content_source, target_path)
        elif is_asset_tree or context.is_veiled(source_path):
            content_artifact = None
        else:
            content_artifact = self.plan_phantom_content(context, source_path, target_path)

        child_artifacts = tuple(
            self.plan_child(context, child, target_path, is_asset_tree)
            for child in entries
            if child != content_source
        )
        return DirectoryArtifact(
            mummifier=self,
            source=CorporealSource(path=source_path),
            target_path=target_path,
            content_artifact=content_artifact,
            child_artifacts=child_artifacts,
        )

    def discover_content_file(
        self, context: MummyContext, entries: list[Path]
    ) -> Path | None:
        """The first page file matching a content base name, in base name order."""
        for base_name in context.content_base_names():
            for entry in entries:
                if entry.stem != base_name or not entry.is_file():
                    continue
                if isinstance(context.find_registered_mummifier(entry), AbstractPageMummifier):
                    return entry
        return None

    def plan_content(
        self, context: MummyContext, content_source: Path, target_directory: Path
    ) -> Artifact:
        mummifier = context.find_registered_mummifier(content_source)
        # the content target always uses the first base name, e.g. home.md -> index.html
        base_name = context.content_base_names()[0]
        normalized = base_name + content_source.suffix
        target_path = target_directory / mummifier.plan_target_filename(context, normalized)
        return self._plan_with(mummifier, context, content_source, target_path)

    def plan_phantom_content(
        self, context: MummyContext, source_directory: Path, target_directory: Path
    ) -> Artifact | None:
        base_names = context.content_base_names()
        if not base_names:
            return None
        filename = f"{base_names[0]}.{PHANTOM_SOURCE_EXTENSION}"
        phantom_source = source_directory / filename
        mummifier = context.find_registered_mummifier(phantom_source)
        if not isinstance(mummifier, AbstractPageMummifier):
            raise LookupError(
                f"No page mummifier registered for phantom content `{phantom_source}`."
            )
        target_path = target_directory / mummifier.plan_target_filename(context, filename)
        title = source_directory.name
        logger.debug("Synthesizing phantom content `%s` for `%s`.", filename, source_directory)
        return mummifier.plan_phantom(context, phantom_source, target_path, title)

    def plan_child(
        self,
        context: MummyContext,
        child_source: Path,
        target_directory: Path,
        is_asset_tree: bool,
    ) -> Artifact:
        filename = child_source.name
        mummifier = context.mummifier_for_path(child_source)
        is_asset = is_asset_tree or context.asset_pattern.fullmatch(filename) is not None
        if is_asset and isinstance(mummifier, AbstractPageMummifier):
            mummifier = context.default_file_mummifier
        navigable = not is_asset

        if not is_asset_tree:
            asset_match = context.asset_pattern.fullmatch(filename)
            if asset_match is not None:
                filename = _renamed(asset_match, filename)
            else:
                post_match = POST_FILENAME_PATTERN.fullmatch(filename)
                if post_match is not None and child_source.is_file():
                    target_directory = target_directory.joinpath(
                        post_match.group(2), post_match.group(3), post_match.group(4)
                    )
                    filename = post_match.group(5)
                veil_match = context.veil_pattern.fullmatch(filename)
                if veil_match is not None:
                    filename = _renamed(veil_match, filename)
                    navigable = False

        target_path = target_directory / mummifier.plan_target_filename(context, filename)
        artifact = self._plan_with(mummifier, context, child_source, target_path)
        if artifact.navigable and not navigable:
            artifact = artifact.model_copy(update={"navigable": False})
        return artifact

    @staticmethod
    def _plan_with(
        mummifier: Mummifier, context: MummyContext, source_path: Path, target_path: Path
    ) -> Artifact:
        try:
            return mummifier.plan(context, source_path, target_path)
        except PlanError:
            raise
        except Exception as exc:
            raise PlanError(source_path, target_path, mummifier, exc) from exc

    def mummify(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        if not isinstance(artifact, DirectoryArtifact):
            raise TypeError(f"Artifact {artifact} is not a directory artifact.")
        artifact.target_path.mkdir(parents=True, exist_ok=True)
        logger.debug("Mummified directory %s.", artifact)
        if artifact.content_artifact is not None:
            context.dispatch(artifact, artifact.content_artifact)
        for child in artifact.child_artifacts:
            context.dispatch(child, child)


def _renamed(match: re.Match[str], filename: str) -> str:
    """The first group of a marker match, or the filename if the pattern has none."""
    if match.re.groups == 0 or match.group(1) is None:
        return filename
    renamed = match.group(1)
    if renamed in ("", ".", ".."):
        raise ValueError(
            f"Name pattern /{match.re.pattern}/ renamed `{filename}` to forbidden name `{renamed}`."
        )
    return renamed
