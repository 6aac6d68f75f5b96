"""
Wire models for the AnkiConnect remote procedure protocol.

- AnkiConnectRequest: the envelope POSTed to AnkiConnect
- AnkiConnectReply: the envelope AnkiConnect answers with
- AnkiConnectError: the single failure type raised by the client
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# AnkiConnect rejects requests whose version it does not speak; version 6
# is the one that always returns both "result" and "error" keys.
ANKI_CONNECT_VERSION = 6


class AnkiConnectError(Exception):
    """
    Raised when an AnkiConnect call fails for any reason.

    Args:
        message: Human-readable failure description. For errors reported by
                 Anki itself this is the reply's error string, verbatim.
        cause: Underlying exception, if the failure originated in the
               transport or in reply parsing.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class AnkiConnectRequest(BaseModel):
    """Request envelope, built fresh for every call."""

    action: str = Field(min_length=1, description="AnkiConnect action name, e.g. 'addNote'")
    version: int = Field(default=ANKI_CONNECT_VERSION, description="Protocol version")
    params: dict[str, Any] = Field(default_factory=dict, description="Action parameters")

    model_config = ConfigDict(frozen=True)


class AnkiConnectReply(BaseModel):
    """
    Reply envelope.

    Exactly one of result/error is meaningful; a non-empty error wins even
    when a result is also present.
    """

    result: Any = Field(default=None, description="Action result on success")
    error: str | None = Field(default=None, description="Error message on failure")

    @property
    def failed(self) -> bool:
        """True when AnkiConnect reported an error."""
        return bool(self.error)
