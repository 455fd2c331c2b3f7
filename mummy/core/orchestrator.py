"""Mummy: wires planning, mummification, manifest and deployment together.

Usage::

    from mummy.core.orchestrator import Mummy

    mummy = Mummy(workers=4)
    plan = mummy.mummify(Path("site"), Path("build"))
    urls = mummy.deploy(plan)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from mummy.core.context import MummyContext
from mummy.core.driver import MummificationDriver
from mummy.core.manifest import BuildManifest, build_manifest
from mummy.core.plan import MummyPlan
from mummy.core.planner import Planner
from mummy.core.registry import MummifierRegistry
from mummy.deploy import DeployTarget, Dns
from mummy.models.config import SiteConfig

logger = logging.getLogger(__name__)


class Mummy:
    """Plans and mummifies sites.

    Parameters
    ----------
    configuration:
        Site configuration; defaults apply when omitted.
    registry:
        Mummifier registry; :meth:`MummifierRegistry.default` when omitted.
    workers:
        Leaf mummification concurrency.
    manifest_path:
        Where to write the build manifest after mummification; none when
        omitted.
    deploy_targets, dns:
        Deployment collaborators used by :meth:`deploy`.
    """

    def __init__(
        self,
        configuration: SiteConfig | None = None,
        registry: MummifierRegistry | None = None,
        workers: int = 1,
        manifest_path: Path | None = None,
        deploy_targets: Sequence[DeployTarget] = (),
        dns: Dns | None = None,
    ) -> None:
        self.configuration = configuration or SiteConfig()
        self.registry = registry or MummifierRegistry.default()
        self.workers = workers
        self.manifest_path = manifest_path
        self.deploy_targets = list(deploy_targets)
        self.dns = dns
        self.context: MummyContext | None = None
        self.manifest: BuildManifest | None = None

    def _new_context(self, source_directory: Path, target_directory: Path) -> MummyContext:
        self.context = MummyContext(
            source_directory, target_directory, self.configuration, self.registry
        )
        return self.context

    def plan(self, source_directory: Path, target_directory: Path) -> MummyPlan:
        """Plan a site without writing anything."""
        context = self._new_context(source_directory, target_directory)
        return Planner(context).plan()

    def mummify(self, source_directory: Path, target_directory: Path) -> MummyPlan:
        """Plan and mummify a site, writing the manifest if configured."""
        context = self._new_context(source_directory, target_directory)
        plan = Planner(context).plan()
        MummificationDriver(context, self.workers).mummify(plan)
        if self.manifest_path is not None:
            self.manifest = build_manifest(plan)
            self.manifest.write(self.manifest_path)
        return plan

    def deploy(self, plan: MummyPlan) -> list[str]:
        """Deploy a mummified plan to every deploy target.

        Returns the URLs reported by the targets.
        """
        if self.context is None:
            raise RuntimeError("Nothing has been mummified to deploy.")
        if self.dns is not None:
            self.dns.prepare(self.context)
        for target in self.deploy_targets:
            target.prepare(self.context)
        urls: list[str] = []
        for target in self.deploy_targets:
            url = target.deploy(self.context, plan.root)
            if url is not None:
                urls.append(url)
        return urls
