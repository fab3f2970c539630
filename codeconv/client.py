"""
HTTP client for the conversion service.

Endpoints (all POST, JSON bodies, relative to the configured base URL)
- api/ScriptConvertGemini  {source, target, content}   → {response}     (bearer auth)
- api/Login                {}                          → {verificationUriComplete, interval, deviceCode}
- api/AccessToken          {deviceCode}                → {accessCode} | {error}
- api/UserInfo             {Token}                     → {nickname, email}

Transport failures and unreadable payloads surface as ApplicationError so the
command line reports them above the help of the running command.
"""
import dataclasses

import httpx

from commandeer import ApplicationError

from .console import logger


@dataclasses.dataclass(frozen=True)
class LoginGrant:
    verification_uri: str
    interval: float
    device_code: str


class ConversionClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    A fresh AsyncClient is opened per request; the command line issues a handful
    of calls per process, all from the same coroutine chain.
    """

    def __init__(self, settings, transport=None):
        self._settings = settings
        self._transport = transport

    def _session(self):
        return httpx.AsyncClient(
            base_url=self._settings.api_url,
            timeout=self._settings.timeout,
            transport=self._transport,
        )

    async def _post(self, path, payload, token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        logger.debug("POST %s", path)
        try:
            async with self._session() as session:
                response = await session.post(path, json=payload, headers=headers)
        except httpx.HTTPError as exception:
            raise ApplicationError(f"Could not reach the conversion service: {exception}") from exception
        logger.debug("POST %s -> %d", path, response.status_code)
        return response

    @staticmethod
    def _json(response):
        try:
            data = response.json()
        except ValueError as exception:
            raise ApplicationError(f"Unreadable response from {response.url}") from exception
        if not isinstance(data, dict):
            raise ApplicationError(f"Unexpected response from {response.url}")
        return data

    async def convert(self, content, source, target, token):
        """
        Convert `content` from `source` to `target`; None when the service refuses.
        """
        response = await self._post(
            "api/ScriptConvertGemini",
            {"source": source, "target": target, "content": content},
            token,
        )
        if not response.is_success:
            logger.warning("conversion failed with status %d", response.status_code)
            return None
        return self._json(response).get("response")

    async def login(self):
        """
        Start a device-flow login and return the grant to confirm in a browser.
        """
        response = await self._post("api/Login", {})
        if not response.is_success:
            raise ApplicationError(f"Login request failed with status {response.status_code}")
        data = self._json(response)
        try:
            return LoginGrant(
                verification_uri=str(data["verificationUriComplete"]),
                interval=float(data["interval"]),
                device_code=str(data["deviceCode"]),
            )
        except (KeyError, TypeError, ValueError) as exception:
            raise ApplicationError("Malformed login response") from exception

    async def token(self, device_code):
        """
        Poll once for the access token; returns the raw reply ({accessCode} or {error}).

        Pending authorizations are usually answered with a 4xx status, so the status
        code is not checked here.
        """
        response = await self._post("api/AccessToken", {"deviceCode": device_code})
        return self._json(response)

    async def userinfo(self, token):
        response = await self._post("api/UserInfo", {"Token": token})
        if not response.is_success:
            raise ApplicationError(f"User info request failed with status {response.status_code}")
        return self._json(response)


__all__ = (
    "LoginGrant",
    "ConversionClient",
)
