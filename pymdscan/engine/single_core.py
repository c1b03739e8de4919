"""Engine without parallelization."""

import time
from typing import Any

from .base import Engine
from .task import Task


class SingleCoreEngine(Engine):
    """Run tasks one after the other on the model they were given."""

    def execute(
        self, tasks: list[Task], progress_bar: bool = None
    ) -> list[Any]:
        """See :meth:`Engine.execute`."""
        start_time = time.time()
        results = (task.execute() for task in tasks)
        return self._collect(results, tasks, start_time, progress_bar)
