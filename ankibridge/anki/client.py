"""
AnkiConnect HTTP client.

Each invoke() opens its own httpx.AsyncClient, sends one POST and closes
the connection again. There is no pooling, caching, retrying or client-side
timeout: a tool call maps to exactly one request, and a failure is reported
once to the caller, who may decide to issue a new call.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from ankibridge.anki.models import AnkiConnectError, AnkiConnectReply, AnkiConnectRequest
from ankibridge.config.logging import get_logger
from ankibridge.config.settings import DEFAULT_ANKI_CONNECT_URL, AnkiConnectSettings

logger = get_logger(__name__)


class AnkiConnectClient:
    """
    Stateless adapter for the AnkiConnect remote procedure protocol.

    Args:
        url: AnkiConnect endpoint (default: http://localhost:8765)
        transport: Optional httpx transport, used by tests to stub the network
    """

    def __init__(
        self,
        url: str = DEFAULT_ANKI_CONNECT_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: AnkiConnectSettings) -> AnkiConnectClient:
        """Build a client for the endpoint named in settings."""
        return cls(url=settings.url)

    @property
    def url(self) -> str:
        return self._url

    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """
        Call an AnkiConnect action and return its result.

        Args:
            action: AnkiConnect action name (e.g. "addNote", "version")
            params: Action parameters; defaults to an empty object

        Returns:
            The reply's "result" value

        Raises:
            AnkiConnectError: If Anki is unreachable, the reply is malformed,
                or AnkiConnect reports an error
        """
        try:
            request = AnkiConnectRequest(action=action, params=params or {})
        except ValidationError as e:
            raise AnkiConnectError(f"Invalid AnkiConnect request for action {action!r}", cause=e) from e
        logger.debug(f"AnkiConnect request: {request.action}")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(self._url, json=request.model_dump())
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AnkiConnectError(
                f"AnkiConnect returned HTTP {e.response.status_code}", cause=e
            ) from e
        except httpx.HTTPError as e:
            raise AnkiConnectError(
                f"Could not reach AnkiConnect at {self._url}: {e}", cause=e
            ) from e

        reply = self._parse_reply(response)
        if reply.failed:
            logger.debug(f"AnkiConnect {request.action} failed: {reply.error}")
            raise AnkiConnectError(reply.error)

        return reply.result

    @staticmethod
    def _parse_reply(response: httpx.Response) -> AnkiConnectReply:
        """
        Interpret the response body as a reply envelope.

        The body must be a JSON object carrying at least one of "result" or
        "error"; anything else means we are not talking to AnkiConnect.
        """
        try:
            body = response.json()
        except ValueError as e:
            raise AnkiConnectError(
                f"AnkiConnect returned a non-JSON response: {response.text[:200]!r}", cause=e
            ) from e

        if not isinstance(body, dict):
            raise AnkiConnectError(
                f"AnkiConnect returned an unexpected response: {body!r}"
            )
        if "result" not in body and "error" not in body:
            raise AnkiConnectError(
                "AnkiConnect response is missing both 'result' and 'error' fields"
            )

        try:
            return AnkiConnectReply.model_validate(body)
        except ValidationError as e:
            raise AnkiConnectError(
                f"AnkiConnect returned a malformed response: {body!r}", cause=e
            ) from e
