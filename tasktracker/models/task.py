from sqlmodel import SQLModel, Field
from sqlalchemy import BigInteger, Column, JSON
from typing import List, Optional


class Task(SQLModel, table=True):
    """Stored task row.

    ``id`` is the client-generated identifier. It is indexed but not unique,
    so the surrogate ``pk`` is the real primary key. ``position`` orders the
    collection and never leaves the server.
    """
    __tablename__ = "tasks"

    pk: Optional[int] = Field(default=None, primary_key=True)
    id: int = Field(sa_column=Column(BigInteger, index=True, nullable=False))
    text: str
    completed: bool = Field(default=False)
    priority: str = Field(default="medium")
    due_date: str = Field(default="")
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    position: int = Field(default=0, index=True)
