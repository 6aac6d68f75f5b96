"""
BridgeServer - MCP server exposing Anki tools.

Owns the full server lifecycle:
- start() builds the AnkiConnect client, the tool registry and the MCP
  low-level Server, and registers the tools/list and tools/call handlers
- serve_stdio() runs the protocol loop on stdin/stdout
- stop() releases everything start() created

Failures inside a known tool come back as normal tool results with failure
text. Only a call to an unknown tool is a protocol fault: it is rejected
before the SDK's tools/call handler runs and answered with a JSON-RPC
error (INVALID_PARAMS) instead of a tool result.
"""

from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from ankibridge.anki.client import AnkiConnectClient
from ankibridge.config.logging import get_logger
from ankibridge.config.settings import Settings
from ankibridge.tools.models import (
    DispatchResult,
    ProtocolFault,
    ToolCallRequest,
    ToolDescriptor,
)
from ankibridge.tools.registry import ToolRegistry, create_registry

logger = get_logger(__name__)


class UnknownToolError(McpError):
    """Raised to the MCP layer when a client calls a tool that does not exist."""

    def __init__(self, message: str):
        super().__init__(types.ErrorData(code=types.INVALID_PARAMS, message=message))


class BridgeServer:
    """
    MCP server context object.

    Args:
        settings: Full application settings (AnkiConnect URL, server identity)
        client: Optional pre-built AnkiConnect client; built from settings if None
    """

    def __init__(self, settings: Settings, client: AnkiConnectClient | None = None):
        self.settings = settings
        self._client = client
        self._registry: ToolRegistry | None = None
        self._server: Server | None = None
        self._sdk_call_tool = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def registry(self) -> ToolRegistry:
        if self._registry is None:
            raise RuntimeError("Bridge server not started")
        return self._registry

    @property
    def mcp_server(self) -> Server:
        if self._server is None:
            raise RuntimeError("Bridge server not started")
        return self._server

    async def start(self) -> None:
        """Build the client, the registry and the MCP server."""
        if self._started:
            return

        if self._client is None:
            self._client = AnkiConnectClient.from_settings(self.settings.anki)
        self._registry = create_registry(self._client)

        server = Server(self.settings.server.name, version=self.settings.server.version)
        server.list_tools()(self.handle_list_tools)
        # Arguments are validated by each tool's input model so that bad input
        # is reported as failure text rather than as an SDK validation error
        server.call_tool(validate_input=False)(self.handle_call_tool)
        # The SDK handler turns anything it raises into an isError result, so
        # unknown names are rejected in front of it
        self._sdk_call_tool = server.request_handlers[types.CallToolRequest]
        server.request_handlers[types.CallToolRequest] = self._route_call_tool
        self._server = server

        self._started = True
        logger.info(
            f"Bridge server ready: {len(self._registry)} tool(s), AnkiConnect at {self._client.url}"
        )

    async def stop(self) -> None:
        """Release everything start() created."""
        if not self._started:
            return

        self._server = None
        self._sdk_call_tool = None
        self._registry = None
        self._started = False
        logger.info("Bridge server stopped")

    async def __aenter__(self) -> BridgeServer:
        await self.start()
        return self

    async def __aexit__(self, *_args) -> None:
        await self.stop()
        return None  # Don't suppress exceptions

    def list_tools(self) -> list[ToolDescriptor]:
        """Descriptors of every tool this server exposes."""
        return self.registry.list()

    async def dispatch(self, request: ToolCallRequest) -> DispatchResult:
        """Route a call through the registry."""
        return await self.registry.dispatch(request)

    # --- MCP handlers ---

    async def handle_list_tools(self) -> list[types.Tool]:
        """tools/list: convert descriptors to MCP Tool objects."""
        return [
            types.Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=descriptor.input_schema,
            )
            for descriptor in self.list_tools()
        ]

    async def handle_call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        """
        tools/call: dispatch and translate the result for the SDK.

        Raises:
            UnknownToolError: If no tool is registered under `name`
        """
        result = await self.dispatch(ToolCallRequest(name=name, arguments=arguments or {}))
        if isinstance(result, ProtocolFault):
            raise UnknownToolError(result.message)

        return [
            types.TextContent(type="text", text=block.text)
            for block in result.response.content
        ]

    async def _route_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        """Raw tools/call handler: fault on unknown names, else defer to the SDK."""
        fault = self.registry.fault_for(request.params.name)
        if fault is not None:
            raise UnknownToolError(fault.message)
        return await self._sdk_call_tool(request)

    # --- Transport ---

    async def serve(self, read_stream, write_stream) -> None:
        """Run the MCP protocol loop on the given streams until they close."""
        server = self.mcp_server
        await server.run(read_stream, write_stream, server.create_initialization_options())

    async def serve_stdio(self) -> None:
        """Run the MCP protocol loop on stdin/stdout."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Anki MCP Server running on stdio")
            await self.serve(read_stream, write_stream)
