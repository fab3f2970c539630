"""
Small helpers shared by commandeer.options, commandeer.commands and commandeer.faults.

- Unset: the "argument omitted" marker. Unlike None it never doubles as a value,
  so a command can tell "no description given" apart from "description is None".
- coalesce(value, default): swap Unset for a default.
- rename("name"): decorator giving generated functions a readable name in tracebacks.
- mirror("attr"): read-only property over self._attr, handing out frozen copies of
  the tree state (aliases, options, children) built at startup.
"""
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; there is exactly one instance per process.

    Unset is falsy and combines with classes through `|`, so signatures can
    validate with isinstance(value, str | Unset).
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    `default` if `object` is Unset, else `object` (None and other falsy values pass through).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated function to `name`.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _freeze(object):
    # lists become tuples, dicts read-only proxies, sets frozensets
    if isinstance(object, Sequence) and not isinstance(object, str | bytes | bytearray):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Property exposing self._<name> read-only; containers come back frozen.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, f"_{name}"))

    return property(getter)


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
