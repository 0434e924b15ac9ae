from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..schemas.task import Task


@dataclass
class AppState:
    """Everything the front end shows, owned and written by one TaskStore."""

    tasks: List[Task] = field(default_factory=list)
    dark_mode: bool = False
    editing: Optional[Task] = None
    loading: bool = False
    search_term: str = ""

    @contextmanager
    def busy(self) -> Iterator["AppState"]:
        """Mark the state as loading for the duration of one call."""
        self.loading = True
        try:
            yield self
        finally:
            self.loading = False
