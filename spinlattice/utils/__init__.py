"""
Shared utilities: numerical tolerances and logging setup.
"""

from .math_utils import EPSILON, normalized, are_parallel, are_orthogonal
from .logging_config import setup_logging

__all__ = [
    'EPSILON',
    'normalized',
    'are_parallel',
    'are_orthogonal',
    'setup_logging',
]
