"""
add-note tool: create a single Anki note through AnkiConnect's addNote action.
"""

from pydantic import BaseModel, ConfigDict, Field

from ankibridge.anki.client import AnkiConnectClient
from ankibridge.config.logging import get_logger
from ankibridge.tools.base import Tool
from ankibridge.tools.models import ToolDescriptor

logger = get_logger(__name__)

ADD_NOTE_DESCRIPTOR = ToolDescriptor(
    name="add-note",
    description="Add a new note to Anki",
    input_schema={
        "type": "object",
        "properties": {
            "deckName": {
                "type": "string",
                "description": "Name of the deck to add note to",
            },
            "modelName": {
                "type": "string",
                "description": "Name of the note model/type to use",
            },
            "fields": {
                "type": "object",
                "description": "Fields for the note as key-value pairs",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Optional tags to add to the note",
            },
        },
        "required": ["deckName", "modelName", "fields"],
    },
)


class AddNoteInput(BaseModel):
    """Arguments of add-note. Field names match AnkiConnect's note object."""

    deckName: str = Field(description="Target deck")
    modelName: str = Field(description="Note type, e.g. 'Basic'")
    fields: dict[str, str] = Field(description="Field name to field content")
    tags: list[str] | None = Field(default=None, description="Optional tags")

    model_config = ConfigDict(extra="ignore")


class AddNoteTool(Tool[AddNoteInput]):
    """
    Creates one note per call. Identical calls are not deduplicated here;
    whether a duplicate note is accepted is up to Anki.

    Args:
        client: AnkiConnect adapter used for the addNote action
    """

    descriptor = ADD_NOTE_DESCRIPTOR
    input_model = AddNoteInput
    failure_prefix = "Failed to create note"

    def __init__(self, client: AnkiConnectClient):
        self._client = client

    async def run(self, params: AddNoteInput) -> str:
        # An absent tags list is left out of the payload rather than sent as null
        note = params.model_dump(exclude_none=True)
        note_id = await self._client.invoke("addNote", {"note": note})
        logger.info(f"Created note {note_id} in deck '{params.deckName}'")
        return f"Successfully created note with ID: {note_id}"
