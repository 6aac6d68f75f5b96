"""
MCP Server Layer.

Binds the tool registry to the MCP low-level server and runs it over stdio.
"""

from ankibridge.server.bridge import BridgeServer, UnknownToolError

__all__ = ["BridgeServer", "UnknownToolError"]
