"""Planner: builds the artifact graph for a whole site before anything is written."""

from __future__ import annotations

import logging

from mummy.core.context import MummyContext
from mummy.core.plan import MummyPlan
from mummy.mummify.base import PlanError

logger = logging.getLogger(__name__)


class Planner:
    """Plans a source tree into a :class:`MummyPlan`.

    Planning is fail-fast: the first error aborts the run, and no partial
    plan is attached to the context.
    """

    def __init__(self, context: MummyContext) -> None:
        self._context = context

    def plan(self) -> MummyPlan:
        """Plan the context's source tree into its target tree.

        The resulting plan is attached to the context.
        """
        context = self._context
        source_directory = context.source_directory
        target_directory = context.target_directory
        if not source_directory.is_dir():
            raise NotADirectoryError(f"Site source `{source_directory}` is not a directory.")
        logger.info("Planning site `%s` -> `%s` ...", source_directory, target_directory)
        mummifier = context.mummifier_for_path(source_directory)
        try:
            root = mummifier.plan(context, source_directory, target_directory)
        except PlanError:
            raise
        except Exception as exc:
            raise PlanError(source_directory, target_directory, mummifier, exc) from exc
        plan = MummyPlan(root)
        context.plan = plan
        logger.info("Planned %d artifacts.", len(plan))
        return plan
