from enum import Enum

from pydantic import BaseModel

from taskboard.schemas.task import Task


class ImportOutcome(str, Enum):
    NOTHING_FOUND = "nothing_found"
    UP_TO_DATE = "up_to_date"
    MERGED = "merged"


class MergeResult(BaseModel):
    """New authoritative collection plus what the merge did to get there."""
    tasks: list[Task]
    added: int = 0
    updated: int = 0

    @property
    def changed(self) -> bool:
        return self.added > 0 or self.updated > 0


class ImportSummary(BaseModel):
    """Caller-facing report of an import."""
    outcome: ImportOutcome
    found: int
    added: int = 0
    updated: int = 0
    message: str
