"""Mummifier registry: resolves the mummifier for a source path.

Usage::

    from mummy.core.registry import MummifierRegistry

    registry = MummifierRegistry.default()
    mummifier = registry.mummifier_for(Path("site/about.md"))

Resolution order for :meth:`MummifierRegistry.mummifier_for`:

1. a directory resolves to the directory mummifier;
2. a file resolves by filename extension, longest compound extension first
   (``archive.tar.gz`` tries ``tar.gz`` before ``gz``), case-insensitively;
3. anything else resolves to the fallback mummifier, if one is configured.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mummy.mummify.base import Mummifier
from mummy.mummify.directory import DirectoryMummifier
from mummy.mummify.image import ImageMummifier
from mummy.mummify.opaque import OpaqueFileMummifier
from mummy.mummify.page import HtmlPageMummifier, MarkdownPageMummifier

logger = logging.getLogger(__name__)


class UnresolvableMummifierError(LookupError):
    """Raised when no mummifier is registered for a path and there is no fallback."""


def filename_extensions(filename: str) -> list[str]:
    """Candidate extensions of a filename, longest compound extension first.

    ``"a.tar.gz"`` -> ``["tar.gz", "gz"]``; ``"README"`` -> ``[]``.
    """
    parts = filename.lower().split(".")[1:]
    return [".".join(parts[i:]) for i in range(len(parts)) if all(parts[i:])]


class MummifierRegistry:
    """Maps filename extensions to mummifiers.

    Parameters
    ----------
    directory_mummifier:
        Mummifier for directories.
    fallback:
        Mummifier for files with no registered extension; ``None`` makes such
        files unresolvable.
    """

    def __init__(
        self,
        directory_mummifier: Mummifier | None = None,
        fallback: Mummifier | None = None,
    ) -> None:
        self.directory_mummifier = directory_mummifier or DirectoryMummifier()
        self.fallback = fallback
        self._by_extension: dict[str, Mummifier] = {}

    def register(self, mummifier: Mummifier) -> None:
        """Register a mummifier for each of its supported extensions.

        A later registration for the same extension replaces the earlier one.
        """
        for extension in mummifier.supported_extensions:
            previous = self._by_extension.get(extension.lower())
            if previous is not None and previous is not mummifier:
                logger.debug(
                    "Extension `%s` re-registered from %r to %r.", extension, previous, mummifier
                )
            self._by_extension[extension.lower()] = mummifier

    @property
    def registered_extensions(self) -> frozenset[str]:
        return frozenset(self._by_extension)

    def find_registered_for_file(self, path: Path) -> Mummifier | None:
        """The mummifier registered for the path's extension, if any.

        Path shape only; the filesystem is not consulted.
        """
        for extension in filename_extensions(path.name):
            mummifier = self._by_extension.get(extension)
            if mummifier is not None:
                return mummifier
        return None

    def mummifier_for(self, path: Path) -> Mummifier:
        """Resolve the mummifier for a source path.

        Raises ``UnresolvableMummifierError`` for an unregistered file
        extension when no fallback is configured.
        """
        if path.is_dir():
            return self.directory_mummifier
        mummifier = self.find_registered_for_file(path)
        if mummifier is not None:
            return mummifier
        if self.fallback is None:
            raise UnresolvableMummifierError(
                f"No mummifier registered for `{path}`. "
                f"Registered extensions: {sorted(self._by_extension)}"
            )
        return self.fallback

    @classmethod
    def default(cls) -> MummifierRegistry:
        """A registry with the page, image and opaque file mummifiers."""
        registry = cls(DirectoryMummifier(), OpaqueFileMummifier())
        registry.register(HtmlPageMummifier())
        registry.register(MarkdownPageMummifier())
        registry.register(ImageMummifier())
        return registry
