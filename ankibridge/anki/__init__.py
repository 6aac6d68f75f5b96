"""
AnkiConnect Client Layer.

Performs single-shot remote procedure calls against the AnkiConnect add-on:

    AnkiConnectClient.invoke("addNote", {"note": {...}})
                                  ↓
    POST {"action": "addNote", "version": 6, "params": {...}}
                                  ↓
    {"result": 1496198395707, "error": null}  →  1496198395707

Every failure (transport, malformed reply, error reported by Anki) surfaces
as AnkiConnectError so callers handle a single exception type.
"""

from ankibridge.anki.client import AnkiConnectClient
from ankibridge.anki.models import (
    ANKI_CONNECT_VERSION,
    AnkiConnectError,
    AnkiConnectReply,
    AnkiConnectRequest,
)

__all__ = [
    "ANKI_CONNECT_VERSION",
    "AnkiConnectClient",
    "AnkiConnectError",
    "AnkiConnectReply",
    "AnkiConnectRequest",
]
