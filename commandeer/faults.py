"""
Commandeer faults (user errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error
  the dispatcher can report. Codes are grouped by domain so logs and searches
  stay predictable.
- CommandException: base type for locally-recovered faults. A fault carries a
  message plus a read-only options mapping and knows how to render its own
  error line (“<prog>: <message>”).
- HandlerError / ApplicationError / FrameworkError: the two failure kinds a
  handler may signal. Application errors are shown to the user and map to exit
  code 1; framework errors are fatal and always propagate.
- trigger(): central entry point to surface a fault; it prints the fault on top
  of the owning command's help and returns the exit code.

Integration
- Dispatch collects at most one fault per invocation and calls
  trigger(fault, tool=command, ...). Nothing is raised across the dispatcher:
  the caller receives an exit code.
- Host applications may expose __codes__, __styles__ and __prog__ in __main__
  to remap codes, restyle output and rename the program in error lines.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset

console = Console()


class FaultCode(IntEnum):
    """
    canonical fault codes used across the dispatcher (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, INCORRECT_USAGE
    - options (1111x/1112x)
      • UNKNOWN_OPTION, MISSING_OPTIONS, INVALID_VALUE
    - delegated (1113x)
      • DELEGATED_ERROR (an ApplicationError raised by a handler)
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101
    INCORRECT_USAGE             = 11103

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    MISSING_OPTIONS             = 11117
    INVALID_VALUE               = 11126

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold red",
            "error-message": "red",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        tool = self.options.get("tool")
        prog = getattr(main, "__prog__", getattr(getattr(tool, "root", None), "name", "<commandeer>"))

        return Text.assemble(
            (str(prog), styler("prog-name")),
            (": ", styler("error-message")),
            (str(self.message), styler("error-message")),
        )

    def __trigger__(self):
        tool = self.options.get("tool")
        if tool is None:
            console.print(self)
        else:
            tool.help(self)
        return 1

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class UnknownOptionError(CommandException): ...
class IncorrectUsageError(CommandException): ...
class MissingOptionsError(CommandException): ...
class ConversionError(CommandException): ...
class DelegatedCommandError(CommandException): ...


class HandlerError(Exception):
    """
    Base for failures signaled by handlers (the collaborators of the dispatcher).
    """

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ApplicationError(HandlerError):
    """
    Recoverable failure: the message is shown above the command help and the
    invocation exits with code 1 (e.g. "file not found").
    """


class FrameworkError(HandlerError):
    """
    Unrecoverable misuse: never caught by the dispatcher, surfaces at the top level.
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options and return its exit code.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - tool, colorful, title, code, and any context the renderer may want to show
      (e.g., input/value).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "UnknownOptionError",
    "IncorrectUsageError",
    "MissingOptionsError",
    "ConversionError",
    "DelegatedCommandError",
    "HandlerError",
    "ApplicationError",
    "FrameworkError",
    "FaultCode",
    "trigger",
)
