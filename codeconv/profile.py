"""
Stored login profile.

The profile is a small JSON document kept under the codeconv home directory:

    {"accessToken": "...", "id": "...", "userName": "...", "email": "..."}

load() returns None when nothing is stored; a file that exists but cannot be
read back as a profile is reported as an ApplicationError.
"""
import dataclasses
import json
from pathlib import Path

from commandeer import ApplicationError

from .console import logger

_fields = (
    ("access_token", "accessToken"),
    ("id", "id"),
    ("username", "userName"),
    ("email", "email"),
)


@dataclasses.dataclass(frozen=True)
class Profile:
    access_token: str | None = None
    id: str | None = None
    username: str | None = None
    email: str | None = None

    @property
    def authenticated(self):
        return bool(self.access_token and self.id and self.username)

    def todict(self):
        return {key: getattr(self, name) for name, key in _fields}

    @classmethod
    def fromdict(cls, data):
        if not isinstance(data, dict):
            raise ApplicationError("Stored profile is not a JSON object")
        return cls(**{name: data.get(key) for name, key in _fields})

    @classmethod
    def load(cls, path):
        path = Path(path)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exception:
            raise ApplicationError(f"Could not read profile {path}: {exception}") from exception
        return cls.fromdict(data)

    def save(self, path):
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.todict(), indent=2), encoding="utf-8")
        except OSError as exception:
            raise ApplicationError(f"Could not save profile {path}: {exception}") from exception
        logger.debug("profile saved to %s", path)


def delete(path):
    """
    Remove the stored profile; returns False when there was none.
    """
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    except OSError as exception:
        raise ApplicationError(f"Could not delete profile {path}: {exception}") from exception
    logger.debug("profile %s deleted", path)
    return True


__all__ = (
    "Profile",
    "delete",
)
