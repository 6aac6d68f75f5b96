"""
Tool Layer.

Declares the tools advertised to MCP clients and dispatches calls to them.
"""

from ankibridge.tools.add_note import AddNoteInput, AddNoteTool
from ankibridge.tools.base import Tool
from ankibridge.tools.models import (
    DispatchOk,
    DispatchResult,
    ProtocolFault,
    TextContent,
    ToolCallRequest,
    ToolDescriptor,
    ToolInputError,
    ToolResponse,
)
from ankibridge.tools.registry import ToolRegistry, create_registry

__all__ = [
    "AddNoteInput",
    "AddNoteTool",
    "DispatchOk",
    "DispatchResult",
    "ProtocolFault",
    "TextContent",
    "Tool",
    "ToolCallRequest",
    "ToolDescriptor",
    "ToolInputError",
    "ToolRegistry",
    "ToolResponse",
    "create_registry",
]
