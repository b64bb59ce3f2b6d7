"""
Framework builders: configure, build and locate output for each supported variant.
"""

from .base import BuildContext, Builder
from .registry import BUILDERS, get_builder

__all__ = [
    "BuildContext",
    "Builder",
    "BUILDERS",
    "get_builder",
]
