"""Session models for recorded stopwatch intervals."""

from datetime import datetime
from typing import Iterable, Tuple

from pydantic import BaseModel, Field


class Session(BaseModel):
    """Represents one completed start-to-stop timing interval."""

    id: int
    duration: int = Field(ge=0)  # milliseconds
    timestamp: datetime  # wall-clock instant of the stop

    model_config = {"frozen": True}


class SavedSessionSet(BaseModel):
    """A named, persisted snapshot of a batch of sessions.

    ``total_time`` is computed once when the set is built and stored as is;
    it is never recomputed from ``sessions`` afterwards.
    """

    id: int
    name: str
    sessions: Tuple[Session, ...] = ()
    total_time: int = Field(default=0, ge=0, alias="totalTime")
    created_at: datetime = Field(alias="createdAt")

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_batch(
        cls,
        set_id: int,
        name: str,
        batch: Iterable[Session],
        created_at: datetime,
    ) -> "SavedSessionSet":
        """Snapshot a batch into a new set, copying the sessions."""
        sessions = tuple(batch)
        return cls(
            id=set_id,
            name=name,
            sessions=sessions,
            total_time=sum(session.duration for session in sessions),
            created_at=created_at,
        )

    @property
    def session_count(self) -> int:
        """Number of individual sessions in the set."""
        return len(self.sessions)
