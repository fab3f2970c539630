"""
The codeconv command tree.

    codeconv                      --version/-v
    ├── login
    ├── logout
    ├── profile | p
    │   └── show
    └── script | s
        └── convert | c           --from --to --file/-f --output/-o --dir/-d
"""
from commandeer import RootCommand, Option

from .client import ConversionClient
from .handlers import Handlers


def build(settings, handlers=None):
    """
    Wire the command tree; `handlers` defaults to ones talking to the configured service.
    """
    handlers = handlers or Handlers(settings, ConversionClient(settings))

    app = RootCommand(
        "codeconv",
        descr="A CLI tool for language conversion",
        required=True,
        options=(
            Option("--version", "-v", type=bool, descr="Show version information"),
        ),
        handler=handlers.version,
    )

    app.command("login", descr="Log in to the conversion service", handler=handlers.login)
    app.command("logout", descr="Forget the stored profile", handler=handlers.logout)

    profile = app.command("profile", aliases=("p",), descr="Profile operations", required=True)
    profile.command("show", descr="Show the logged in profile", handler=handlers.show)

    script = app.command("script", aliases=("s",), descr="Script operations", required=True)
    script.command(
        "convert",
        aliases=("c",),
        descr="Convert a script to another language",
        required=True,
        options=(
            Option("--from", descr="Source language", required=True),
            Option("--to", descr="Target language", required=True),
            Option("--file", "-f", descr="Path of the script to convert", required=True),
            Option("--output", "-o", descr="Write the result to this file instead of printing it"),
            Option("--dir", "-d", descr="Directory for --output (defaults to the working directory)"),
        ),
        handler=handlers.convert,
    )

    return app


__all__ = (
    "build",
)
