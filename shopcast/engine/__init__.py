"""Pipeline stages.

Each stage is a pure function of the previous stage's output:

    sanitize -> merge -> compute_statistics / project
"""

from shopcast.engine.merger import merge
from shopcast.engine.projection import project
from shopcast.engine.sanitizer import sanitize
from shopcast.engine.statistics import compute_statistics

__all__ = [
    "compute_statistics",
    "merge",
    "project",
    "sanitize",
]
