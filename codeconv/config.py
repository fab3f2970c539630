"""
codeconv runtime settings.

Settings are read once at startup from the environment:

    CODECONV_API_URL         base URL of the conversion service
    CODECONV_HOME            directory holding the stored profile (user.json)
    CODECONV_TIMEOUT         HTTP timeout, in seconds
    CODECONV_LOG_LEVEL       logging level name (DEBUG, INFO, WARNING, ...)
    CODECONV_POLL_ATTEMPTS   how many times login polls for an access token
"""
import dataclasses
import logging
import os
from pathlib import Path

# Longest script (in characters) the service accepts for one conversion.
MAX_CONTENT_LENGTH = 8192

PROFILE_FILENAME = "user.json"


def _number(environ, name, default, cast):
    if (raw := environ.get(name)) is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclasses.dataclass(frozen=True)
class Settings:
    api_url: str = "http://localhost:5000/"
    home: Path = Path("~/.codeconv").expanduser()
    timeout: float = 30.0
    log_level: str = "WARNING"
    poll_attempts: int = 60

    @property
    def profile_path(self):
        return self.home / PROFILE_FILENAME

    @classmethod
    def fromenv(cls, environ=None):
        """
        Build settings from `environ` (os.environ by default); unset keys keep their defaults.

        Raises ValueError for malformed numbers or unknown logging levels.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()

        level = environ.get("CODECONV_LOG_LEVEL", defaults.log_level).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"CODECONV_LOG_LEVEL must be a logging level name, got {level!r}")

        home = environ.get("CODECONV_HOME")
        return cls(
            api_url=environ.get("CODECONV_API_URL", defaults.api_url),
            home=Path(home).expanduser() if home else defaults.home,
            timeout=_number(environ, "CODECONV_TIMEOUT", defaults.timeout, float),
            log_level=level,
            poll_attempts=_number(environ, "CODECONV_POLL_ATTEMPTS", defaults.poll_attempts, int),
        )


__all__ = (
    "MAX_CONTENT_LENGTH",
    "PROFILE_FILENAME",
    "Settings",
)
