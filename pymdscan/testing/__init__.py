"""
Testing
=======

Synthetic models with known likelihood shapes, for tests and demos.
"""

from .models import (
    circle_model,
    crescent_model,
    correlated_gaussian_model,
    gaussian_model,
    invalid_region_model,
)
