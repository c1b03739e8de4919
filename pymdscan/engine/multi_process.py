"""Engine with multi-process parallelization."""

import logging
import multiprocessing
import time
from typing import Any, Union

import cloudpickle as pickle

from .base import Engine, resolve_n_workers
from .task import Task

logger = logging.getLogger(__name__)


def work(pickled_task: bytes):
    """Unpickle and execute task."""
    task = pickle.loads(pickled_task)
    return task.execute()


class MultiProcessEngine(Engine):
    """
    Run the ranges of a scan in separate processes.

    Tasks are serialized with cloudpickle, so objectives may be closures
    or lambdas, and each process scans its own copy of the model. The
    committed points come back with the results; sinks that write files
    are only fed by the calling process.

    Parameters
    ----------
    n_procs:
        Maximum number of processes, the CPU count by default. No more
        processes than tasks are started.
    method:
        Start method, any of "fork", "spawn", "forkserver", or None for
        the platform default.
    """

    def __init__(
        self,
        n_procs: Union[int, None] = None,
        method: Union[str, None] = None,
    ):
        self.n_procs: int = resolve_n_workers(n_procs, "processes")
        self.method: str = method

    def execute(
        self, tasks: list[Task], progress_bar: bool = None
    ) -> list[Any]:
        """See :meth:`Engine.execute`."""
        if not tasks:
            return []
        start_time = time.time()
        pickled_tasks = [pickle.dumps(task) for task in tasks]

        n_procs = min(self.n_procs, len(tasks))
        logger.debug(
            f"Scanning {len(tasks)} ranges on {n_procs} processes "
            f"({self.method or 'default'} start method)."
        )
        ctx = multiprocessing.get_context(method=self.method)
        with ctx.Pool(processes=n_procs) as pool:
            return self._collect(
                pool.imap(work, pickled_tasks),
                tasks,
                start_time,
                progress_bar,
            )
