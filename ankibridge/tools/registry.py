"""
Tool registry and dispatcher.

The registry is fixed at construction: list() always returns the same
descriptors in the same order. dispatch() routes a request by name and
returns a DispatchResult:

    known tool   → DispatchOk(ToolResponse)   (success or failure text)
    unknown tool → ProtocolFault("Unknown tool: <name>")
"""

from __future__ import annotations

from collections.abc import Iterable

from ankibridge.anki.client import AnkiConnectClient
from ankibridge.config.logging import get_logger
from ankibridge.tools.add_note import AddNoteTool
from ankibridge.tools.base import Tool
from ankibridge.tools.models import (
    DispatchOk,
    DispatchResult,
    ProtocolFault,
    ToolCallRequest,
    ToolDescriptor,
)

logger = get_logger(__name__)


class ToolRegistry:
    """
    Holds the tools available to agents and routes calls to them.

    Args:
        tools: Tools to expose, in advertised order

    Raises:
        ValueError: If two tools share a name
    """

    def __init__(self, tools: Iterable[Tool]):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Tool already registered: {tool.name}")
            self._tools[tool.name] = tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list(self) -> list[ToolDescriptor]:
        """Return the descriptors of all registered tools."""
        return [tool.descriptor for tool in self._tools.values()]

    def fault_for(self, name: str) -> ProtocolFault | None:
        """Return the fault for a name no tool answers to, or None if the tool exists."""
        if name in self._tools:
            return None
        logger.warning(f"Rejected call to unknown tool '{name}'")
        return ProtocolFault(message=f"Unknown tool: {name}")

    async def dispatch(self, request: ToolCallRequest) -> DispatchResult:
        """Route a call to its tool and wrap the outcome."""
        fault = self.fault_for(request.name)
        if fault is not None:
            return fault

        tool = self._tools[request.name]
        logger.debug(f"Dispatching '{request.name}'")
        response = await tool.execute(request.arguments)
        return DispatchOk(response=response)


def create_registry(client: AnkiConnectClient) -> ToolRegistry:
    """Build the registry of every tool this server exposes."""
    return ToolRegistry([AddNoteTool(client)])
