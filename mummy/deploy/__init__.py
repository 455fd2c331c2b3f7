"""Deployment boundary: protocols invoked once the site is fully mummified.

Cloud backends (DNS providers, object-storage hosting, CDNs) implement these
protocols outside this package. :class:`DirectoryDeployTarget` publishes the
target tree to a local directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mummy.models.artifacts import Artifact

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class Dns(Protocol):
    """Protocol for DNS providers serving the deployed site."""

    def prepare(self, context: MummyContext) -> None:
        """Ensure the DNS configuration needed by the site exists."""
        ...


@runtime_checkable
class DeployTarget(Protocol):
    """Protocol for deployment targets.

    Any object with ``prepare(context)`` and ``deploy(context, root)``
    satisfies this protocol.
    """

    def prepare(self, context: MummyContext) -> None:
        """Prepare the target, e.g. create a bucket; called before any deployment."""
        ...

    def deploy(self, context: MummyContext, root: Artifact) -> str | None:
        """Deploy the mummified tree of *root*.

        Returns
        -------
        str | None
            The URL of the deployed site, if known.
        """
        ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------


class DirectoryDeployTarget:
    """Copies the mummified target tree into a local directory.

    Parameters
    ----------
    destination:
        Directory to publish into; created if absent. Existing files with
        the same names are overwritten, other files are left alone.
    """

    def __init__(self, destination: Path) -> None:
        self.destination = Path(destination)

    def prepare(self, context: MummyContext) -> None:
        destination = self.destination.resolve()
        target = context.target_directory
        if destination == target or target in destination.parents:
            raise ValueError(
                f"Deploy directory `{destination}` may not be inside target directory `{target}`."
            )
        destination.mkdir(parents=True, exist_ok=True)

    def deploy(self, context: MummyContext, root: Artifact) -> str | None:
        shutil.copytree(root.target_path, self.destination, dirs_exist_ok=True)
        logger.info("Deployed `%s` to `%s`.", root.target_path, self.destination)
        return self.destination.resolve().as_uri()
