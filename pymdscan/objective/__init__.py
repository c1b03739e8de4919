"""
Objective
=========

Negative log-likelihood wrappers with evaluation error bookkeeping.
"""

from .base import EVALUATION_ERRORS, ObjectiveBase
from .function import NLLObjective
