"""Bounded background worker pool for pipeline jobs."""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

logger = logging.getLogger(__name__)


class JobRunner:
    """Runs submitted work on a fixed number of worker threads.

    Submitting never blocks; work beyond ``max_workers`` waits in the
    executor queue until a worker frees up.
    """

    def __init__(self, max_workers: int):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix='job-worker',
        )
        logger.info(f"Job runner started with {max_workers} worker(s)")

    def submit(self, fn: Callable, *args) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(self._log_crash)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_crash(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Worker crash: {exc}", exc_info=exc)
