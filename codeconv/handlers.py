"""
Command handlers for the codeconv command line.

Every handler receives the argument map built by commandeer (or None on a bare
invocation) and reports user-facing failures by raising ApplicationError.
"""
import asyncio
import json
import os
from pathlib import Path

from rich.console import Console

from commandeer import ApplicationError

from . import __version__
from . import profile as profiles
from .config import MAX_CONTENT_LENGTH
from .console import logger


class Handlers:
    def __init__(self, settings, client, console=None, sleep=asyncio.sleep):
        self._settings = settings
        self._client = client
        self._console = console or Console()
        self._sleep = sleep

    def _echo(self, text):
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)

    def _profile(self):
        profile = profiles.Profile.load(self._settings.profile_path)
        if profile is None or not profile.authenticated:
            raise ApplicationError("You have to be logged in to run this command")
        return profile

    def version(self, arguments):
        if arguments and arguments["version"]:
            self._echo(__version__)

    async def convert(self, arguments):
        profile = self._profile()

        path, source, target = arguments["file"], arguments["from"], arguments["to"]
        output, directory = arguments["output"], arguments["dir"]

        if directory is not None and not os.path.isdir(directory):
            raise ApplicationError("Directory specified does not exist")

        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exception:
            raise ApplicationError(str(exception)) from exception

        if len(content) > MAX_CONTENT_LENGTH:
            raise ApplicationError("Maximum content length exceeded")

        logger.info("converting %s from %s to %s", path, source, target)
        result = await self._client.convert(content, source, target, profile.access_token)
        if not result:
            raise ApplicationError("Error converting script")

        if output is None:
            self._echo(result.strip())
            return

        destination = Path(directory if directory is not None else os.getcwd()) / output
        try:
            destination.write_text(result.strip(), encoding="utf-8")
        except OSError as exception:
            raise ApplicationError(str(exception)) from exception
        self._echo(f"Converted {target} script written to {destination}")

    def show(self, arguments):
        profile = self._profile()
        self._echo(json.dumps(profile.todict(), indent=2))

    async def login(self, arguments):
        grant = await self._client.login()
        self._echo(f"Open {grant.verification_uri} in your browser to complete the login")

        interval = grant.interval
        for attempt in range(self._settings.poll_attempts):
            await self._sleep(interval)
            reply = await self._client.token(grant.device_code)
            if token := reply.get("accessCode"):
                break
            match reply.get("error"):
                case "authorization_pending":
                    logger.debug("authorization pending (attempt %d)", attempt + 1)
                case "slow_down":
                    interval += 5
                    logger.debug("slowing down polling to every %s seconds", interval)
                case error:
                    raise ApplicationError(f"Login failed: {error or 'no access code received'}")
        else:
            raise ApplicationError("Login timed out")

        info = await self._client.userinfo(token)
        if not (username := info.get("nickname")):
            raise ApplicationError("Malformed user info response")

        profile = profiles.Profile(
            access_token=token,
            id=str(info.get("id") or info.get("email") or username),
            username=username,
            email=info.get("email"),
        )
        profile.save(self._settings.profile_path)
        self._echo(f"Logged in as {username}")

    def logout(self, arguments):
        if profiles.delete(self._settings.profile_path):
            self._echo("Logged out")
        else:
            self._echo("Not logged in")


__all__ = (
    "Handlers",
)
