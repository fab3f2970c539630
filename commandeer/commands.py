"""
Commandeer command layer: build, compose, and run command trees.

What this module provides
- Command: one node of a command tree with:
  • Identity (name + aliases) used to route the leading argv token.
  • Typed options (see commandeer.options) and an implicit -h/--help flag.
  • Hierarchies (parent/child) to model subcommands; routing always prefers a
    matching child over option parsing.
  • A single handler, plain or coroutine function, called with the argument map.
  • Plain, sectioned help (Command / Description / Usage / Commands / Options)
    rendered with Rich, with an optional error line on top.

- RootCommand: the tree root; named after the running executable by default.

- invoke(obj, prompt): convenience runner returning the process exit code.

Quick start
    from commandeer import RootCommand, Option, invoke

    app = RootCommand(descr="A CLI tool for language conversion", required=True)
    script = app.command("script", aliases=("s",), descr="Script operations", required=True)
    convert = script.command(
        "convert",
        descr="Convert a script",
        required=True,
        options=(
            Option("--from", descr="source language", required=True),
            Option("--to", descr="target language", required=True),
            Option("--file", "-f", descr="script to convert", required=True),
        ),
    )

    @convert.bind
    async def on_convert(arguments):
        print(arguments["from"], arguments["to"], arguments["file"])

    if __name__ == "__main__":
        raise SystemExit(invoke(app))

Exit codes
- 0: the handler ran (or there was none), or help was requested.
- 1: incorrect usage, unknown option/command, missing required options, invalid
  values, or an ApplicationError raised by the handler.
- Any other exception raised by a handler (FrameworkError included) propagates.
"""
import asyncio
import functools
import inspect
import operator
import os.path
import re
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .options import HELP, Option
from .parser import Parser
from .utils import *


class CommandType(type):
    """
    Metaclass that turns Command classes into introspectable node types.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics and rich UI.
    - Expose selected fields as read-only properties using mirror() for all names
      listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in error messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_identity(cls, metadata):
    """
    Validate the command name and its aliases.

    - name: non-empty string without whitespace.
    - aliases: iterable of non-empty strings without whitespace, no duplicates and
      never equal to the name. Declaration order is preserved.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()) or re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a non-empty word")
    metadata["name"] = name

    if isinstance(metadata["aliases"], str) or not isinstance(metadata["aliases"], Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")

    aliases = []
    for alias in metadata["aliases"]:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        elif not (alias := alias.strip()) or re.search(r"\s", alias):
            raise ValueError(f"{cls.__typename__} 'aliases' must be non-empty words")
        elif alias == name or alias in aliases:
            raise ValueError(f"{cls.__typename__} 'aliases' cannot contain duplicates")
        aliases.append(alias)
    metadata["aliases"] = aliases

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _process_options(cls, metadata):
    """
    Materialize declared options and reject clashing spellings or keys.

    The implicit help option is appended last so it always closes the help listing.
    """
    if isinstance(metadata["options"], str) or not isinstance(metadata["options"], Iterable):
        raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")

    options = []
    spellings = set()
    keys = set()
    for option in (*metadata["options"], HELP):
        if not hasattr(option, "__option__") or not callable(option.__option__):
            raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")
        if not isinstance(option := option.__option__(), Option):
            raise TypeError("__option__() non-option returned")
        for name in option.names:
            if name in spellings:
                raise ValueError(f"{cls.__typename__} option name {name!r} is already in use")
            spellings.add(name)
        if option.key in keys:
            raise ValueError(f"{cls.__typename__} option key {option.key!r} is already in use")
        keys.add(option.key)
        options.append(option)

    metadata["options"] = options
    metadata["spellings"] = spellings


def _process_handler(cls, handler):
    if handler is not None and not callable(handler):
        raise TypeError(f"{cls.__typename__} 'handler' must be callable")
    return handler


def _attach_to_parent(self, parent):
    """
    Register this command under its parent, enforcing sibling uniqueness.

    Behavior
    - A command is attached at most once; its parent never changes afterwards.
    - Neither the name nor any alias may equal a sibling's name or alias.
    """
    if parent is Unset or parent is None:
        return
    if not isinstance(parent, Command):
        raise TypeError(f"{type(self).__typename__} 'parent' must be a command")
    if self._parent is not None:
        raise ValueError(f"{type(self).__typename__} {self.name!r} is already attached to {self._parent.name!r}")

    ancestor = parent
    while ancestor is not None:
        if ancestor is self:
            raise ValueError(f"{type(self).__typename__} {self.name!r} cannot be attached below itself")
        ancestor = ancestor._parent

    taken = {spelling for sibling in parent._children for spelling in (sibling.name, *sibling.aliases)}
    if clashes := taken & {self.name, *self.aliases}:
        typeof = "subcommand" if parent._parent is not None else "command"
        raise ValueError(f"{type(self).__typename__} {typeof} name {sorted(clashes)[0]!r} is already in use")

    parent._children.append(self)
    self._parent = parent


class Command(metaclass=CommandType):
    """
    One node of a command tree.

    Responsibilities
    - Routing: the first token selects a child by name or alias (exact match,
      declaration order); dispatch is then fully delegated to that child.
    - Resolution: remaining tokens are scanned into raw options and converted by
      each Option; the result is the argument map handed to the handler.
    - Policy: help short-circuits, then the head token must be a declared option,
      then every required option must be present.
    - Rendering: help and error lines via Rich (see help()).

    Lifecycle
    - Built and wired once during startup (constructor `parent=`, command() or add()).
    - children/options/aliases are exposed as read-only snapshots afterwards.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "required",
        "options",
        "children",
        "parent",
        "handler",
    )

    # Parent and children are left out to keep representations acyclic.
    __displayable__ = (
        "name",
        "aliases",
        "descr",
        "required",
        "options",
    )

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self._parent
        while parent:
            child, parent = parent, parent._parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command._parent:
            path.append(command := command._parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Space-joined names from the root down to this command, e.g. "app script convert".
        """
        return " ".join(step.name for step in self.path)

    @property
    def colorful(self):
        return bool(coalesce(self._colorful, self._parent.colorful if self._parent else True))

    @property
    def fancy(self):
        return bool(coalesce(self._fancy, self._parent.fancy if self._parent else False))

    def __new__(
            cls,
            name,
            /,
            parent=Unset,
            aliases=(),
            descr=Unset,
            options=(),
            required=False,
            handler=Unset,
            *,
            colorful=Unset,
            fancy=Unset
    ):
        """
        Construct a command node and optionally attach it to `parent`.

        Parameters
        - name: str
          Routing name, unique among siblings.
        - parent: Command | Unset
          Parent under which to attach this command. If Unset, remains top-level.
        - aliases: Iterable[str]
          Alternate routing spellings, disjoint from every sibling name/alias.
        - descr: str | Text | Unset
          Description for the help block.
        - options: Iterable[Option]
          Declared options; -h/--help is always appended.
        - required: bool
          Bare invocation (no tokens) is an error instead of running the handler.
        - handler: Callable[[dict | None], Any] | Unset
          Plain or coroutine function; see bind().
        - colorful, fancy: bool | Unset
          Rendering flags; inherited from the parent when Unset.
        """
        metadata = {
            "name": name,
            "aliases": aliases,
            "descr": descr,
            "options": options,
            "required": bool(required),
        }
        _process_identity(cls, metadata)
        _process_options(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._handler = _process_handler(cls, coalesce(handler))
        self._children = []
        self._parent = None
        self._colorful = colorful
        self._fancy = fancy

        _attach_to_parent(self, parent)
        return self

    def command(self, name, /, *args, **kwargs):
        """
        Create a child command with parent=self injected.
        """
        return Command(name, self, *args, **kwargs)

    def add(self, *children):
        """
        Attach already-built commands as children, in order.
        """
        for child in children:
            if not isinstance(child, Command):
                raise TypeError("add() arguments must be commands")
            _attach_to_parent(child, self)
        return self

    def bind(self, handler, /):
        """
        Bind the handler; usable as a decorator. A command holds at most one handler.
        """
        if self._handler is not None:
            raise TypeError("bind() must be applied only once")
        self._handler = _process_handler(type(self), handler)
        return handler

    def trigger(self, fault, /, **options):
        """
        Surface a fault on top of this command's help and return its exit code.
        """
        return trigger(fault, **{"tool": self, "colorful": self.colorful} | options)

    def help(self, fault=None, /):
        """
        Render this command's help to standard output.

        Layout
        - optional error line: "<prog>: <message>" followed by a blank line
        - Command: <route> [| alias ...]
        - Description: <descr>
        - Usage: <route> <command> | <option>
          (<...> when mandatory, [...] otherwise)
        - Commands: one row per child, declaration order
        - Options: one row per option, [REQUIRED] marker, help option last

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        console = Console()
        styles = defaultdict(str, {
            "label": "bold",
            "route": "bold cyan",
            "alias": "cyan",
            "description": "",
            "usage": "bold cyan",
            "child": "bold cyan",
            "option": "bold green",
            "required": "bold yellow",
            "argument-description": "",
            "panel-title": "bold magenta",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def aliases(command):
            return "".join(" | " + alias for alias in command.aliases)

        def column(label):
            return f"{label:<19} "

        renders = []

        if fault is not None:
            renders.append(fault.__replace__(tool=self, colorful=self.colorful).__rich__())
            renders.append(Text())

        renders.append(Text.assemble(
            ("Command:", styler("label")), " ",
            (self.route, styler("route")),
            (aliases(self), styler("alias")),
        ))
        renders.append(Text.assemble(
            ("Description:", styler("label")), " ",
            text if isinstance(text := self.descr or "", Text) else (text, styler("description")),
        ))
        renders.append(Text())

        def bracket(tag, mandatory):
            return f"<{tag}>" if mandatory else f"[{tag}]"

        usage = []
        if self._children:
            usage.append(bracket("command", self._required))
        if self._options:
            usage.append(bracket("option", self._required or any(option.required for option in self._options)))
        renders.append(Text.assemble(
            ("Usage:", styler("label")), " ",
            (self.route, styler("route")), " ",
            (" | ".join(usage), styler("usage")),
        ))
        renders.append(Text())

        if self._children:
            renders.append(Text("Commands:", styler("label")))
            for child in self._children:
                renders.append(Text.assemble(
                    (column(child.name + aliases(child)), styler("child")),
                    child.descr if isinstance(child.descr, Text) else (child.descr or "", styler("argument-description")),
                ))
            renders.append(Text())

        renders.append(Text("Options:", styler("label")))
        for option in self._options:
            renders.append(Text.assemble(
                (column(" | ".join(option.names)), styler("option")),
                ("[REQUIRED] " if option.required else "", styler("required")),
                option.descr if isinstance(option.descr, Text) else (option.descr or "", styler("argument-description")),
            ))

        renderable = Group(*renders)

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self.name} HELP".upper(), " ]", style=styler("panel-title")),
                title_align="left",
            )

        console.print(renderable)

    def _resolve(self, parser):
        """
        Resolve every option against the raw option map.

        Returns
        - (arguments, None) on success, arguments keyed by Option.key.
        - (None, fault) with the first ConversionError encountered.
        """
        arguments = {}
        for option in self._options:
            try:
                arguments[option.key] = option.getvalue(parser)
            except ConversionError as fault:
                return None, fault
        return arguments, None

    async def _call(self, arguments):
        """
        Run the handler (awaiting it when it is a coroutine) and map the outcome.

        - ApplicationError → delegated fault rendered on top of the help, exit 1.
        - Anything else raised by the handler propagates untouched.
        """
        if self._handler is None:
            return 0

        try:
            result = self._handler(arguments)
            if inspect.isawaitable(result):
                await result
        except ApplicationError as exception:
            return self.trigger(DelegatedCommandError(
                exception.message,
                title="application error",
                code=FaultCode.DELEGATED_ERROR,
                exception=exception,
            ))
        return 0

    async def execute(self, tokens, /):
        """
        Dispatch `tokens` (argv without the program name) and return the exit code.

        phases
        - bare invocation: refuse when required, otherwise run the handler with None.
        - routing: a head token naming a child (or one of its aliases) hands the
          rest of the tokens to that child.
        - resolution: all remaining tokens, head included, are scanned into raw
          options and converted; an invalid value stops here.
        - policy: help wins, then the head must be a declared option, then every
          required option must be present.
        - handler: called with the argument map.
        """
        tokens = list(tokens)

        if not tokens:
            if self._required:
                return self.trigger(IncorrectUsageError(
                    "Incorrect usage",
                    title="incorrect usage",
                    code=FaultCode.INCORRECT_USAGE,
                ))
            return await self._call(None)

        head, *tail = tokens
        for child in self._children:
            if head == child.name or head in child.aliases:
                return await child.execute(tail)

        arguments, fault = self._resolve(Parser(tokens))
        if fault is not None:
            return self.trigger(fault)

        if arguments[HELP.key]:
            self.help()
            return 0

        satisfied = all(arguments[option.key] is not None for option in self._options if option.required)

        if head not in self._spellings:
            if "-" in head:
                exception, code, typeof = UnknownOptionError, FaultCode.UNKNOWN_OPTION, "option"
            else:
                exception, code, typeof = UnknownCommandError, FaultCode.UNKNOWN_COMMAND, "command"
            return self.trigger(exception(
                "Unknown %s %s" % (typeof, head),
                title="unknown %s" % typeof,
                code=code,
                input=head,
            ))

        if not satisfied:
            return self.trigger(MissingOptionsError(
                "Specify all the required options",
                title="missing options",
                code=FaultCode.MISSING_OPTIONS,
                missing=tuple(option.names[0] for option in self._options
                              if option.required and arguments[option.key] is None),
            ))

        return await self._call(arguments)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a token stream and return the exit code.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str], or when an
          iterable contains a non-string element.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return asyncio.run(self.execute(tokens))


class RootCommand(Command):
    """
    Root of a command tree: named after the running executable unless told otherwise.
    """

    def __new__(
            cls,
            name=Unset,
            /,
            aliases=(),
            descr=Unset,
            options=(),
            required=False,
            handler=Unset,
            *,
            colorful=Unset,
            fancy=Unset
    ):
        name = coalesce(name, os.path.splitext(os.path.basename(sys.argv[0]))[0] or "<exec_name>")
        return super().__new__(
            cls,
            name,
            Unset,
            aliases,
            descr,
            options,
            required,
            handler,
            colorful=colorful,
            fancy=fancy
        )


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for command trees; returns the exit code.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt:
      • Unset: read sys.argv[1:].
      • str: split with shlex.split.
      • Iterable[str]: use items as tokens (each must be str).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    # Public API surface for consumers of commandeer.commands.
    # These names are re-exported from the package __init__.
    "Command",
    "RootCommand",
    "invoke",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
