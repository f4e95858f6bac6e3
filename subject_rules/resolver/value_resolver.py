"""
Value Resolver

Resolves dot paths against a subject, invoking zero-argument capabilities
for segments that end with the capability marker.
"""

import logging
from typing import Any, List, Mapping, Optional

from subject_rules.resolver.capabilities import find_capability, is_public

# Values that cannot carry attributes or capabilities of their own
PRIMITIVE_TYPES = (str, bytes, bytearray, bool, int, float, complex)


def is_traversable(value: Any) -> bool:
    """Check whether a path can continue through this value."""
    return value is not None and not isinstance(value, PRIMITIVE_TYPES)


def read_attribute(current: Any, name: str) -> Any:
    """
    Read one public attribute, mapping key or list index.

    Returns:
        The value, or None when it does not exist
    """
    if not is_public(name):
        return None

    if isinstance(current, Mapping):
        return current.get(name)

    if isinstance(current, (list, tuple)):
        if not name.isdigit():
            return None
        index = int(name)
        return current[index] if index < len(current) else None

    return getattr(current, name, None)


class ValueResolver:
    """
    Resolve field paths like 'role', 'profile.status' or 'profile.isActive()'.

    An unresolvable path yields None rather than raising: missing attributes,
    primitives in the middle of a path, private names and capabilities that
    need arguments all resolve to None.
    """

    def __init__(
        self,
        capability_marker: str = "()",
        path_separator: str = ".",
        logger: Optional[logging.Logger] = None
    ):
        self.capability_marker = capability_marker
        self.path_separator = path_separator
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, subject: Any, path: str) -> Any:
        """
        Resolve a field path against a subject.

        Args:
            subject: Object or mapping to read from
            path: Dot path (e.g., 'tags' or 'profile.isActive()')

        Returns:
            Resolved value or None if the path cannot be followed
        """
        if not path:
            return None

        segments = path.split(self.path_separator)

        if self.capability_marker not in path:
            return self._resolve_attributes(subject, segments, path)

        current = subject
        for segment in segments:
            if not is_traversable(current):
                return None

            if segment.endswith(self.capability_marker):
                name = segment[:-len(self.capability_marker)]
                current = self._invoke(current, name, path)
            else:
                current = self._read(current, segment, path)

        return current

    def _resolve_attributes(self, subject: Any, segments: List[str], path: str) -> Any:
        """Plain attribute traversal for paths without capability segments."""
        current = subject
        for segment in segments:
            if not is_traversable(current):
                return None
            current = self._read(current, segment, path)
        return current

    def _read(self, current: Any, name: str, path: str) -> Any:
        try:
            return read_attribute(current, name)
        except Exception as e:
            # Properties can raise; the path is treated as unresolvable
            self.logger.debug(f"Reading '{name}' failed while resolving '{path}': {e}")
            return None

    def _invoke(self, current: Any, name: str, path: str) -> Any:
        invoker = find_capability(current, name)
        if invoker is None:
            self.logger.debug(
                f"No public zero-argument capability '{name}' on {type(current).__name__} (path '{path}')"
            )
            return None

        try:
            return invoker(current)
        except Exception as e:
            self.logger.debug(f"Capability '{name}' raised while resolving '{path}': {e}")
            return None


_default_resolver = ValueResolver()


def resolve(subject: Any, path: str) -> Any:
    """Resolve a path with the default resolver."""
    return _default_resolver.resolve(subject, path)
