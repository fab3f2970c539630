import sys

from commandeer import invoke

from .cli import build
from .config import Settings
from .console import setup


def main(prompt=None):
    settings = Settings.fromenv()
    setup(settings.log_level)
    return invoke(build(settings)) if prompt is None else invoke(build(settings), prompt)


if __name__ == "__main__":
    sys.exit(main())
