"""
Unit tests for BridgeServer.

These tests focus on lifecycle and on the translation between dispatch
results and the MCP SDK's handler contract. AnkiConnect is stubbed with a
mock client throughout.
"""

from unittest.mock import AsyncMock

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session

from ankibridge.anki.client import AnkiConnectClient
from ankibridge.anki.models import AnkiConnectError
from ankibridge.config.settings import Settings
from ankibridge.server.bridge import BridgeServer, UnknownToolError
from ankibridge.tools.models import DispatchOk, ProtocolFault, ToolCallRequest

SPANISH_NOTE = {
    "deckName": "Spanish",
    "modelName": "Basic",
    "fields": {"Front": "hola", "Back": "hello"},
}


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=AnkiConnectClient)
    client.url = "http://localhost:8765"
    client.invoke.return_value = 12345
    return client


class TestLifecycle:
    """start/stop and context manager behavior."""

    @pytest.mark.asyncio
    async def test_start_builds_registry_and_server(self, settings, mock_client):
        bridge = BridgeServer(settings, client=mock_client)

        await bridge.start()

        assert bridge.started is True
        assert [d.name for d in bridge.list_tools()] == ["add-note"]
        assert bridge.mcp_server.name == "anki-connect"

    @pytest.mark.asyncio
    async def test_handlers_registered(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            handlers = bridge.mcp_server.request_handlers

            assert types.ListToolsRequest in handlers
            assert types.CallToolRequest in handlers

    @pytest.mark.asyncio
    async def test_stop(self, settings, mock_client):
        bridge = BridgeServer(settings, client=mock_client)
        await bridge.start()

        await bridge.stop()

        assert bridge.started is False
        with pytest.raises(RuntimeError, match="not started"):
            bridge.list_tools()

    @pytest.mark.asyncio
    async def test_stop_when_not_started(self, settings):
        """Should handle stop gracefully when never started."""
        bridge = BridgeServer(settings)

        await bridge.stop()

        assert bridge.started is False

    @pytest.mark.asyncio
    async def test_context_manager(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            assert bridge.started is True

        assert bridge.started is False

    @pytest.mark.asyncio
    async def test_dispatch_before_start(self, settings, mock_client):
        bridge = BridgeServer(settings, client=mock_client)

        with pytest.raises(RuntimeError, match="not started"):
            await bridge.dispatch(ToolCallRequest(name="add-note", arguments=SPANISH_NOTE))

    @pytest.mark.asyncio
    async def test_client_built_from_settings(self):
        settings = Settings(_env_file=None, anki={"url": "http://anki.lan:8765"})

        async with BridgeServer(settings) as bridge:
            assert bridge._client.url == "http://anki.lan:8765"


class TestDispatch:
    """dispatch(): the tagged result."""

    @pytest.mark.asyncio
    async def test_known_tool(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            result = await bridge.dispatch(ToolCallRequest(name="add-note", arguments=SPANISH_NOTE))

        assert isinstance(result, DispatchOk)
        assert result.response.text == "Successfully created note with ID: 12345"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            result = await bridge.dispatch(ToolCallRequest(name="delete-note"))

        assert isinstance(result, ProtocolFault)


class TestHandlers:
    """MCP handler functions."""

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            tools = await bridge.handle_list_tools()

        assert len(tools) == 1
        tool = tools[0]
        assert isinstance(tool, types.Tool)
        assert tool.name == "add-note"
        assert tool.description == "Add a new note to Anki"
        assert tool.inputSchema["required"] == ["deckName", "modelName", "fields"]

    @pytest.mark.asyncio
    async def test_call_tool_success(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            content = await bridge.handle_call_tool("add-note", SPANISH_NOTE)

        assert content == [
            types.TextContent(type="text", text="Successfully created note with ID: 12345")
        ]

    @pytest.mark.asyncio
    async def test_call_tool_remote_failure_returns_text(self, settings, mock_client):
        mock_client.invoke.side_effect = AnkiConnectError("deck not found")

        async with BridgeServer(settings, client=mock_client) as bridge:
            content = await bridge.handle_call_tool("add-note", SPANISH_NOTE)

        assert len(content) == 1
        assert content[0].text == "Failed to create note: deck not found"

    @pytest.mark.asyncio
    async def test_call_tool_none_arguments(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            content = await bridge.handle_call_tool("add-note", None)

        assert content[0].text.startswith("Failed to create note: Invalid arguments:")
        mock_client.invoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_call_tool_unknown_raises(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            with pytest.raises(UnknownToolError, match="Unknown tool: delete-note"):
                await bridge.handle_call_tool("delete-note", {})

    @pytest.mark.asyncio
    async def test_raw_call_tool_handler_rejects_unknown_name(self, settings, mock_client):
        """The registered tools/call handler raises before the SDK wraps anything."""
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="delete-note", arguments={}),
        )

        async with BridgeServer(settings, client=mock_client) as bridge:
            handler = bridge.mcp_server.request_handlers[types.CallToolRequest]
            with pytest.raises(UnknownToolError) as exc_info:
                await handler(request)

        assert isinstance(exc_info.value, McpError)
        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert exc_info.value.error.message == "Unknown tool: delete-note"


class TestOverProtocol:
    """Round trips through an in-memory MCP client session."""

    @pytest.mark.asyncio
    async def test_list_and_call(self, settings, mock_client):
        async with BridgeServer(settings, client=mock_client) as bridge:
            async with create_connected_server_and_client_session(bridge.mcp_server) as session:
                listed = await session.list_tools()
                result = await session.call_tool("add-note", SPANISH_NOTE)

        assert [tool.name for tool in listed.tools] == ["add-note"]
        assert result.isError is False
        assert result.content[0].text == "Successfully created note with ID: 12345"

    @pytest.mark.asyncio
    async def test_remote_failure_is_not_an_error_result(self, settings, mock_client):
        mock_client.invoke.side_effect = AnkiConnectError("deck not found")

        async with BridgeServer(settings, client=mock_client) as bridge:
            async with create_connected_server_and_client_session(bridge.mcp_server) as session:
                result = await session.call_tool("add-note", SPANISH_NOTE)

        assert result.isError is False
        assert result.content[0].text == "Failed to create note: deck not found"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_a_protocol_error(self, settings, mock_client):
        """An unknown name comes back as a JSON-RPC error, not as a tool result."""
        async with BridgeServer(settings, client=mock_client) as bridge:
            async with create_connected_server_and_client_session(bridge.mcp_server) as session:
                with pytest.raises(McpError, match="Unknown tool: delete-note") as exc_info:
                    await session.call_tool("delete-note", {})

        assert exc_info.value.error.code == types.INVALID_PARAMS
        mock_client.invoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_known_tool_still_served_after_unknown(self, settings, mock_client):
        """A rejected name does not disturb later calls on the same session."""
        async with BridgeServer(settings, client=mock_client) as bridge:
            async with create_connected_server_and_client_session(bridge.mcp_server) as session:
                with pytest.raises(McpError):
                    await session.call_tool("delete-note", {})
                result = await session.call_tool("add-note", SPANISH_NOTE)

        assert result.isError is False
        assert result.content[0].text == "Successfully created note with ID: 12345"
