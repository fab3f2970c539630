"""
Console and logging wiring for codeconv.

Regular output (converted scripts, profile JSON, login instructions) goes to a
stdout console; log records go to stderr through rich's RichHandler so they never
mix with output that users pipe into files.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("codeconv")


def setup(level="WARNING", console=None):
    """
    Route the "codeconv" logger to a RichHandler at `level`.

    Calling it again replaces the previous handler instead of stacking another one.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    for previous in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(previous)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = (
    "logger",
    "setup",
)
