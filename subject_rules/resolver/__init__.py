"""
subject-rules Resolver Package

Exports the value resolver and the capability registry.
"""

from .capabilities import capabilities_for, find_capability
from .value_resolver import ValueResolver, resolve

__all__ = ["ValueResolver", "resolve", "capabilities_for", "find_capability"]
