"""
Data models for the tool layer.

- ToolDescriptor: name, description and input schema advertised to agents
- ToolCallRequest: one inbound call-by-name request
- TextContent / ToolResponse: the outbound envelope (one text block)
- DispatchOk / ProtocolFault: the two outcomes of dispatching a request
- ToolInputError: raised when arguments do not match a tool's input model
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolInputError(ValueError):
    """Raised when tool arguments fail validation against the tool's input model."""


class ToolDescriptor(BaseModel):
    """Immutable description of a callable tool."""

    name: str = Field(min_length=1, description="Unique tool name, e.g. 'add-note'")
    description: str = Field(description="Human-readable summary shown to the agent")
    input_schema: dict[str, Any] = Field(
        alias="inputSchema",
        description="JSON Schema of the tool's arguments",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def required(self) -> list[str]:
        """Names of the arguments the schema marks as required."""
        return list(self.input_schema.get("required", []))


class ToolCallRequest(BaseModel):
    """A request to run the tool called `name` with `arguments`."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class TextContent(BaseModel):
    """A single text content block."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """
    Outbound tool result.

    Always carries exactly one text block, whether the call succeeded or
    failed; failures are described in that text rather than raised.
    """

    content: list[TextContent] = Field(min_length=1, max_length=1)

    @classmethod
    def from_text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return self.content[0].text


class DispatchOk(BaseModel):
    """The tool ran; its outcome (success or failure) is in `response`."""

    response: ToolResponse

    model_config = ConfigDict(frozen=True)


class ProtocolFault(BaseModel):
    """The request could not be routed to any tool."""

    message: str

    model_config = ConfigDict(frozen=True)


DispatchResult = DispatchOk | ProtocolFault
