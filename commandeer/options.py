r"""
Commandeer option specifications.

Overview
- Option[_T]: named, value-bearing flag with one or more spellings (e.g. -f/--file).
  The first spelling is canonical: its dashes are stripped and it is lower-cased to
  build the key under which the resolved value reaches the handler.

- Converters
  The value type is chosen from a closed set at registration time:
    str   → the raw string, untouched
    bool  → "true"/"false" (case-insensitive)
    int   → base-10 integer
    float → decimal number
  Any other type is rejected when the Option is built, never at parse time.

- Resolution
  Option.getvalue(parser) scans the spellings in declaration order, picks the first
  one present in the raw option map and converts its raw string. A value that cannot
  be converted raises ConversionError naming the offending spelling and raw value.

Validation highlights
- Names must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique within one Option.
- descr strings are trimmed; empty strings are rejected.

Quick example:
    >>> from commandeer.options import Option
    >>> target = Option("--to", "-t", descr="target language", required=True)
    >>> target.key
    'to'
"""
import functools
import operator
import re
from types import MappingProxyType
from typing import Generic, TypeVar

from rich.text import Text

from .faults import ConversionError, FaultCode
from .utils import *


def _boolean(raw, /):
    match raw.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("boolean value must be 'true' or 'false'")


_converters = MappingProxyType({
    str: str,
    bool: _boolean,
    int: int,
    float: float,
})


class OptionType(type):
    """
    Metaclass that turns option declarations into introspectable, read-only descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate descriptive metadata.

    - descr: optional short description. If omitted (Unset), it becomes None.
      If provided, it must be a non-empty string (or rich Text) after trimming.
    - required: coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and normalize option spellings.

    - names: required. Each name must be a non-empty string matching a shell-style
      option pattern ("-x", "-long", "--long", "--long-name"). Duplicates are
      rejected. Declaration order is preserved: the first name is canonical.

    Name format regex: r"--?[^\W\d_](-?[^\W_]+)*"
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_typed_metadata(cls, metadata, /):
    """
    Internal: resolve the declared value type to one of the closed-set converters.
    """
    try:
        metadata["converter"] = _converters[metadata["type"]]
    except (KeyError, TypeError):
        raise TypeError(f"{cls.__typename__} 'type' must be one of str, bool, int or float") from None


_T = TypeVar("_T")


class Option(Generic[_T], metaclass=OptionType):
    """
    Named, value-bearing option specification.

    Highlights
    - Generic over the payload type _T (one of str, bool, int, float).
    - Supports aliases via 'names'; the first one is the canonical spelling.
    - required options must be supplied for the owning command's handler to run.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "names",
        "type",
        "descr",
        "required",
    )

    def __new__(
            cls,
            *names,
            type=str,
            descr=Unset,
            required=False
    ):
        """
        Construct an Option with the provided metadata.

        Parameters
        - names: one or more str
          Spellings for the option, canonical first (e.g. "--file", "-f").
        - type: str | bool | int | float
          Value type; selects the converter applied to the raw string.
        - descr: Unset | str
          Short description for help. If Unset, becomes None.
        - required: bool
          When True, the owning command refuses to run its handler unless one of
          the spellings was supplied.
        """
        metadata = {
            "names": names,
            "type": type,
            "descr": descr,
            "required": required,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_typed_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def key(self):
        """
        Canonical argument-map key: first spelling, dashes stripped, lower-cased.
        """
        return self._names[0].strip("-").lower()

    def getvalue(self, parser, /):
        """
        Resolve this option against a raw option map.

        Returns
        - None when none of the spellings was supplied.
        - The converted value of the first supplied spelling (declaration order).

        Raises
        - ConversionError when the raw string does not convert to the declared type.
        """
        for name in self._names:
            if (raw := parser.getargument(name)) is not None:
                break
        else:
            return None

        try:
            return self._converter(raw)
        except (TypeError, ValueError):
            raise ConversionError(
                "'%s' is not a valid value for '%s'" % (raw, name),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                input=name,
                value=raw,
                argument=self,
            ) from None

    def __option__(self):
        """
        Introspection hook: identify this object as an Option.
        """
        return self


def option(*args, **kwargs):
    """
    Factory shortcut mirroring Option(...), handy in tuple literals:

        command.command("convert", options=(option("--from", required=True),))
    """
    return Option(*args, **kwargs)


# Shared flag attached to every command; its canonical key is "help".
HELP = Option("--help", "-h", type=bool, descr="Display this help text")


__all__ = (
    # Classes
    "Option",

    # Factories
    "option",

    # Constants
    "HELP",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del OptionType
