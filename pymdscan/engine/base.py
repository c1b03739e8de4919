"""Abstract engine base class."""

import abc
import logging
import os
import time
from collections.abc import Iterable, Sequence
from typing import Any, Union

from ..util import tqdm
from .task import Task

logger = logging.getLogger(__name__)


def resolve_n_workers(n_workers: Union[int, None], unit: str) -> int:
    """Number of parallel workers, the CPU count if not given."""
    if n_workers is None:
        n_workers = os.cpu_count()
        logger.info(f"Engine will use up to {n_workers} {unit} (= CPU count).")
    if n_workers < 1:
        raise ValueError(f"The number of {unit} must be >= 1.")
    return n_workers


class Engine(abc.ABC):
    """
    Abstract engine base class.

    An engine executes the tasks of a partitioned scan, one per index
    range, and hands back their results in task order.
    """

    @abc.abstractmethod
    def execute(
        self, tasks: list[Task], progress_bar: bool = None
    ) -> list[Any]:
        """Execute tasks.

        Parameters
        ----------
        tasks:
            List of tasks to execute.
        progress_bar:
            Whether to display a progress bar over the tasks.

        Returns
        -------
        The task results, in task order.
        """

    def _collect(
        self,
        results: Iterable[Any],
        tasks: Sequence[Task],
        start_time: float,
        progress_bar: bool = None,
    ) -> list[Any]:
        """Gather the results of `tasks`, which arrive in task order."""
        collected = []
        for task, result in zip(
            tasks, tqdm(results, total=len(tasks), enable=progress_bar)
        ):
            logger.debug(f"Finished {task.label}.")
            collected.append(result)
        if len(collected) != len(tasks):
            raise AssertionError(
                f"Expected {len(tasks)} results, got {len(collected)}."
            )
        logger.info(
            f"{self.__class__.__name__} executed {len(tasks)} tasks in "
            f"{time.time() - start_time:.2f}s."
        )
        return collected
