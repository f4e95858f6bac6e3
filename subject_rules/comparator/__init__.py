"""
subject-rules Comparator Package

Exports the comparator used to check rule values.
"""

from .comparator import Comparator, compare

__all__ = ["Comparator", "compare"]
