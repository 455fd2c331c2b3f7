"""Mummification driver: materializes a plan into the target tree.

With one worker, mummification is a single depth-first pass. With more,
directories are still created on the walking thread, which makes directory
creation the ordering point for everything beneath it, while leaf artifacts
are written by a bounded thread pool. After the first failure no new work
is launched; work already running is allowed to finish.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

from mummy.core.context import MummyContext
from mummy.core.plan import MummyPlan
from mummy.models.artifacts import Artifact
from mummy.mummify.base import MummifyError

logger = logging.getLogger(__name__)


class _PoolDispatcher:
    """Runs directories inline and submits leaves to the pool."""

    def __init__(self, context: MummyContext, executor: ThreadPoolExecutor) -> None:
        self._context = context
        self._executor = executor
        self._futures: list[Future[None]] = []
        self._lock = threading.Lock()
        self.failure: BaseException | None = None

    def __call__(self, context_artifact: Artifact, artifact: Artifact) -> None:
        if self.failure is not None:
            raise self.failure
        if artifact.is_directory:
            self._context.mummify_artifact(context_artifact, artifact)
            return
        future = self._executor.submit(
            self._context.mummify_artifact, context_artifact, artifact
        )
        future.add_done_callback(self._record)
        self._futures.append(future)

    def _record(self, future: Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            with self._lock:
                if self.failure is None:
                    self.failure = exc

    def wait(self) -> None:
        wait(self._futures)
        # done callbacks may still be pending when wait() returns
        for future in self._futures:
            self._record(future)
        if self.failure is not None:
            raise self.failure


class MummificationDriver:
    """Mummifies a planned site.

    Parameters
    ----------
    context:
        The context the site was planned with.
    workers:
        Maximum number of leaf artifacts written concurrently; ``1`` is
        strictly sequential.
    """

    def __init__(self, context: MummyContext, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, not {workers}")
        self._context = context
        self.workers = workers

    def mummify(self, plan: MummyPlan | None = None) -> None:
        """Mummify every artifact of the plan, raising the first ``MummifyError``."""
        plan = plan or self._context.plan
        root = plan.root
        logger.info("Mummifying %d artifacts with %d worker(s) ...", len(plan), self.workers)
        if self.workers == 1:
            self._context.mummify_artifact(root, root)
        else:
            self._mummify_pooled(root)
        logger.info("Mummified site into `%s`.", root.target_path)

    def _mummify_pooled(self, root: Artifact) -> None:
        executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="mummy")
        dispatcher = _PoolDispatcher(self._context, executor)
        try:
            with self._context.dispatching(dispatcher):
                self._context.mummify_artifact(root, root)
            dispatcher.wait()
        except MummifyError as exc:
            executor.shutdown(wait=True, cancel_futures=True)
            raise dispatcher.failure or exc
        finally:
            executor.shutdown(wait=True)
