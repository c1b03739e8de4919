"""
Optimize
========

Local optimization of the free model parameters, used for the global best
fit and for profiling the nuisance parameters at each scan point.
"""

from .optimizer import Optimizer, ScipyOptimizer
from .result import OptimizerResult
