"""Mummification context: configuration and predicates shared by a run.

The context is read-only during planning and mummification with two
exceptions: the plan is attached once planning completes, and the driver
may install a dispatcher for the duration of mummification.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from mummy.core.registry import MummifierRegistry, UnresolvableMummifierError
from mummy.models.artifacts import Artifact
from mummy.models.config import SiteConfig
from mummy.mummify.base import Mummifier, MummifyError

if TYPE_CHECKING:
    from mummy.core.plan import MummyPlan

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Artifact, Artifact], None]


class MummyContext:
    """Site-wide collaborators for planning and mummifying one site.

    Parameters
    ----------
    source_directory:
        Root of the site source tree.
    target_directory:
        Root of the site target tree.
    configuration:
        Site configuration; defaults apply when omitted.
    registry:
        Mummifier registry; :meth:`MummifierRegistry.default` when omitted.
    """

    def __init__(
        self,
        source_directory: Path,
        target_directory: Path,
        configuration: SiteConfig | None = None,
        registry: MummifierRegistry | None = None,
    ) -> None:
        self.source_directory = Path(source_directory).resolve()
        self.target_directory = Path(target_directory).resolve()
        self.configuration = configuration or SiteConfig()
        self.registry = registry or MummifierRegistry.default()
        self._plan: MummyPlan | None = None
        self._dispatcher: Dispatcher | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def lookup(self, key: str, default: Any = None) -> Any:
        """Look up a dotted configuration key, e.g. ``image.aspects.preview.scale_max_length``.

        Missing keys and unset (``None``) values yield *default*.
        """
        value: Any = self.configuration
        for part in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, part, None)
            elif isinstance(value, dict):
                value = value.get(part)
            else:
                value = None
            if value is None:
                return default
        return value

    def content_base_names(self) -> list[str]:
        """Base names of directory content files, in priority order."""
        return list(self.configuration.content_base_names)

    @cached_property
    def veil_pattern(self) -> re.Pattern[str]:
        return re.compile(self.configuration.veil_name_pattern)

    @cached_property
    def asset_pattern(self) -> re.Pattern[str]:
        return re.compile(self.configuration.asset_name_pattern)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_ignored(self, path: Path) -> bool:
        """Whether a source path is excluded from the site entirely.

        Dotfiles, entries that are neither regular files nor directories, and
        names matching a configured ignore pattern are ignored. So is the
        target tree when it lies inside the source tree.
        """
        if path.name.startswith("."):
            return True
        if self.is_target(path):
            return True
        if not (path.is_file() or path.is_dir()):
            return True
        patterns = self.configuration.ignore_patterns
        if patterns:
            relative = self._relative_source(path).as_posix()
            return any(
                fnmatch.fnmatch(path.name, p) or fnmatch.fnmatch(relative, p) for p in patterns
            )
        return False

    def is_target(self, path: Path) -> bool:
        """Whether *path* is the target directory or lies beneath it."""
        path = Path(path).resolve()
        if path == self.source_directory:
            return False
        return path == self.target_directory or self.target_directory in path.parents

    def is_veiled(self, path: Path) -> bool:
        """Whether a source path's name carries the veil marker; never the site root."""
        if Path(path) == self.source_directory:
            return False
        return self.veil_pattern.fullmatch(path.name) is not None

    def is_asset(self, path: Path, check_ancestors: bool = False) -> bool:
        """Whether a source path is an asset, optionally by way of an asset ancestor."""
        relative = self._relative_source(path)
        names = relative.parts if check_ancestors else relative.parts[-1:]
        return any(self.asset_pattern.fullmatch(name) for name in names)

    def _relative_source(self, path: Path) -> Path:
        try:
            return Path(path).relative_to(self.source_directory)
        except ValueError:
            raise ValueError(
                f"Source path `{path}` is not inside site source directory "
                f"`{self.source_directory}`."
            ) from None

    # ------------------------------------------------------------------
    # Mummifiers
    # ------------------------------------------------------------------

    def mummifier_for_path(self, path: Path) -> Mummifier:
        return self.registry.mummifier_for(path)

    def find_registered_mummifier(self, path: Path) -> Mummifier | None:
        return self.registry.find_registered_for_file(path)

    @property
    def default_file_mummifier(self) -> Mummifier:
        """The mummifier for files handled without interpretation, e.g. assets."""
        if self.registry.fallback is None:
            raise UnresolvableMummifierError("No fallback file mummifier is configured.")
        return self.registry.fallback

    def target_path_for(self, source_path: Path, mummifier: Mummifier) -> Path:
        """Mirror a source path into the target tree, translating its filename."""
        relative = self._relative_source(source_path)
        if not relative.parts:
            return self.target_directory
        filename = mummifier.plan_target_filename(self, relative.name)
        return self.target_directory / relative.parent / filename

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    @property
    def plan(self) -> MummyPlan:
        if self._plan is None:
            raise RuntimeError("The site has not been planned.")
        return self._plan

    @plan.setter
    def plan(self, plan: MummyPlan) -> None:
        if self._plan is not None:
            raise RuntimeError("The site has already been planned.")
        self._plan = plan

    @property
    def is_planned(self) -> bool:
        return self._plan is not None

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @contextmanager
    def dispatching(self, dispatcher: Dispatcher) -> Iterator[None]:
        """Route :meth:`dispatch` calls to *dispatcher* within the block."""
        previous, self._dispatcher = self._dispatcher, dispatcher
        try:
            yield
        finally:
            self._dispatcher = previous

    def dispatch(self, context_artifact: Artifact, artifact: Artifact) -> None:
        """Hand an artifact to the active dispatcher, or mummify it inline."""
        if self._dispatcher is not None:
            self._dispatcher(context_artifact, artifact)
        else:
            self.mummify_artifact(context_artifact, artifact)

    def mummify_artifact(self, context_artifact: Artifact, artifact: Artifact) -> None:
        """Mummify one artifact with its own mummifier.

        Failures surface as ``MummifyError`` naming the artifact.
        """
        try:
            artifact.mummifier.mummify(self, context_artifact, artifact)
        except MummifyError:
            raise
        except Exception as exc:
            raise MummifyError(artifact, exc) from exc
