from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

TAG_VOCABULARY = ("work", "personal", "urgent", "shopping", "study")


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Task as it travels over the wire.

    Field names follow the JSON contract (``dueDate``); Python code may use
    ``due_date`` as well.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    text: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[str] = Field(default="", alias="dueDate")
    tags: List[str] = Field(default_factory=list)

    def to_wire(self) -> dict:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class ReorderRequest(BaseModel):
    """Drag-and-drop move: put ``draggedId`` where ``targetId`` sits."""
    model_config = ConfigDict(populate_by_name=True)

    dragged_id: int = Field(alias="draggedId")
    target_id: int = Field(alias="targetId")


class DeleteResponse(BaseModel):
    success: bool = True
