"""
Base class for tools.

A tool pairs a ToolDescriptor with a typed input model and an async run()
method. execute() is the boundary the dispatcher calls: it validates the
loosely typed argument mapping, runs the tool, and always produces a
ToolResponse. Failures are rendered as text so the calling agent can read
them and decide whether to retry.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from ankibridge.config.logging import get_logger
from ankibridge.tools.models import ToolDescriptor, ToolInputError, ToolResponse

logger = get_logger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)


def format_validation_error(error: ValidationError) -> str:
    """Collapse a pydantic ValidationError into a single line, e.g. 'deckName: Field required'."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(problems)


class Tool(ABC, Generic[InputT]):
    """
    Abstract base class for tools.

    Subclasses set `descriptor`, `input_model` and `failure_prefix`, and
    implement run() to return the success message.
    """

    descriptor: ToolDescriptor
    input_model: type[InputT]
    failure_prefix: str

    @property
    def name(self) -> str:
        return self.descriptor.name

    def parse_arguments(self, arguments: dict[str, Any]) -> InputT:
        """
        Validate raw arguments into the tool's input model.

        Raises:
            ToolInputError: If required fields are missing or have the wrong type
        """
        try:
            return self.input_model.model_validate(arguments)
        except ValidationError as e:
            raise ToolInputError(f"Invalid arguments: {format_validation_error(e)}") from e

    @abstractmethod
    async def run(self, params: InputT) -> str:
        """
        Perform the tool's work.

        Args:
            params: Validated input

        Returns:
            Success message for the agent

        Raises:
            Exception: Any failure; execute() turns it into failure text
        """
        pass

    async def execute(self, arguments: dict[str, Any]) -> ToolResponse:
        """Validate, run, and wrap the outcome in a single-block ToolResponse."""
        try:
            params = self.parse_arguments(arguments)
            message = await self.run(params)
        except Exception as e:
            # Reported to the agent as text, never raised to the protocol layer
            logger.warning(f"Tool '{self.name}' failed: {e}")
            return ToolResponse.from_text(f"{self.failure_prefix}: {e}")

        return ToolResponse.from_text(message)
