"""Abstract Task class."""

import abc
from typing import Any


class Task(abc.ABC):
    """
    One independent unit of work handed to an :class:`Engine`.

    For scans this is one index range of a partitioned scan. Tasks must not
    share mutable state, since engines may run them concurrently.
    """

    @property
    def label(self) -> str:
        """Short description used in log messages."""
        return self.__class__.__name__

    @abc.abstractmethod
    def execute(self) -> Any:
        """Execute the task and return its results."""
