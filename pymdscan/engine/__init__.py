"""
Engines
=======

Scans split into index ranges can be executed in parallel in different
ways. Each task works on its own copy of the model; results are returned
in task order.
"""

from .base import Engine
from .multi_process import MultiProcessEngine
from .multi_thread import MultiThreadEngine
from .single_core import SingleCoreEngine
from .task import Task
