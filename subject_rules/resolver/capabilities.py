"""
Capability Registry

Maps capability names to zero-argument invokers, built once per subject type.
"""

import inspect
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

Invoker = Callable[[Any], Any]

_OPTIONAL_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def is_public(name: str) -> bool:
    """Names starting with an underscore are never reachable from a rule."""
    return bool(name) and not name.startswith('_')


def takes_no_arguments(func: Callable, bound: bool = False) -> bool:
    """
    Check whether a callable can be invoked without arguments.

    Args:
        func: Function to inspect
        bound: True when the first positional parameter receives the instance or class

    Returns:
        True if every remaining parameter is optional
    """
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return False

    if bound:
        if not params:
            return False
        if params[0].kind in _POSITIONAL_KINDS:
            params = params[1:]
        elif params[0].kind != inspect.Parameter.VAR_POSITIONAL:
            return False

    return all(p.default is not inspect.Parameter.empty or p.kind in _OPTIONAL_KINDS for p in params)


def _make_invoker(member: Any) -> Optional[Invoker]:
    if isinstance(member, staticmethod):
        func = member.__func__
        if not takes_no_arguments(func):
            return None
        return lambda target: func()

    if isinstance(member, classmethod):
        func = member.__func__
        if not takes_no_arguments(func, bound=True):
            return None
        return lambda target: func(type(target))

    if inspect.isfunction(member):
        if not takes_no_arguments(member, bound=True):
            return None
        return lambda target: member(target)

    return None


@lru_cache(maxsize=None)
def capabilities_for(cls: type) -> Mapping[str, Invoker]:
    """
    Build the capability registry for a type.

    Every public zero-argument instance, class or static method along the MRO
    is registered. A subclass attribute that is not a capability hides the
    inherited one of the same name.

    Args:
        cls: Subject type

    Returns:
        Read-only mapping of capability name to invoker
    """
    registry: Dict[str, Invoker] = {}

    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if not is_public(name):
                continue
            invoker = _make_invoker(member)
            if invoker is None:
                registry.pop(name, None)
            else:
                registry[name] = invoker

    return MappingProxyType(registry)


def _instance_capability(target: Any, name: str) -> Optional[Invoker]:
    if isinstance(target, Mapping):
        member = target.get(name)
    else:
        member = getattr(target, '__dict__', {}).get(name)

    if member is None or inspect.isclass(member) or not callable(member):
        return None
    if not takes_no_arguments(member):
        return None
    return lambda _target: member()


def find_capability(target: Any, name: str) -> Optional[Invoker]:
    """
    Look up a capability on a value.

    Callables stored on the instance (or under a mapping key) take precedence
    over methods defined on the type, as with normal attribute lookup.

    Args:
        target: Value to look the capability up on
        name: Capability name without the marker

    Returns:
        Invoker taking the target, or None when no public zero-argument
        capability of that name exists
    """
    if not is_public(name):
        return None

    invoker = _instance_capability(target, name)
    if invoker is not None:
        return invoker

    return capabilities_for(type(target)).get(name)
