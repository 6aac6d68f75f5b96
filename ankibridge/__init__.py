"""
ankibridge - MCP server that lets AI agents create Anki notes.

Exposes tools over the Model Context Protocol and translates each tool call
into a request against the AnkiConnect add-on's local HTTP API.
"""

__version__ = "0.1.0"
