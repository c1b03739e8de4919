"""
Model
=====

Parameters and the negative log-likelihood they are passed to.
"""

from .base import Model
from .parameter import Parameter, ParameterSnapshot
