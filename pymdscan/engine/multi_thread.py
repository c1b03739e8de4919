"""Engine with multi-threading parallelization."""

import copy
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Union

from .base import Engine, resolve_n_workers
from .task import Task

logger = logging.getLogger(__name__)


class MultiThreadEngine(Engine):
    """
    Run the ranges of a scan in threads.

    Models are not thread-safe, so every task is deep-copied and each
    thread scans its own model. The tasks passed in are left untouched.
    Pure Python objectives gain little, since the threads share the GIL.

    Parameters
    ----------
    n_threads:
        Maximum number of threads, the CPU count by default. No more
        threads than tasks are started.
    """

    def __init__(self, n_threads: Union[int, None] = None):
        self.n_threads: int = resolve_n_workers(n_threads, "threads")

    def execute(
        self, tasks: list[Task], progress_bar: bool = None
    ) -> list[Any]:
        """See :meth:`Engine.execute`."""
        if not tasks:
            return []
        start_time = time.time()
        copied_tasks = [copy.deepcopy(task) for task in tasks]

        n_threads = min(self.n_threads, len(tasks))
        logger.debug(f"Scanning {len(tasks)} ranges on {n_threads} threads.")
        with ThreadPoolExecutor(max_workers=n_threads) as pool:
            return self._collect(
                pool.map(lambda task: task.execute(), copied_tasks),
                tasks,
                start_time,
                progress_bar,
            )
