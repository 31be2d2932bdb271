"""Persistence of saved session sets through a key-value provider."""

import asyncio
import inspect
import json
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from session_timer.core.errors import StorageReadError, StorageWriteError
from session_timer.core.ids import TimeBasedIdGenerator, next_id
from session_timer.core.storage import KeyValueStore
from session_timer.models.session import SavedSessionSet, Session

logger = logging.getLogger(__name__)

SAVED_SESSION_SETS_KEY = "savedSessionSets"
DEFAULT_NAME_FORMAT = "Session {date} {time}"

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


def _always_confirm(message: str) -> bool:
    return True


class SessionSetStore:
    """Owns the canonical collection of saved session sets.

    Every save or delete rewrites the whole list under a single key. A write
    that fails leaves both the persisted value and the in-memory collection
    as they were.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = SAVED_SESSION_SETS_KEY,
        confirm: Optional[ConfirmCallback] = None,
        now: Callable[[], datetime] = datetime.now,
        id_generator: Optional[TimeBasedIdGenerator] = None,
        name_format: str = DEFAULT_NAME_FORMAT,
    ):
        self._storage = storage
        self.key = key
        self._confirm = confirm or _always_confirm
        self._now = now
        self._ids = id_generator or next_id
        self._name_format = name_format
        self._sets: List[SavedSessionSet] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def sets(self) -> Tuple[SavedSessionSet, ...]:
        """The in-memory collection, oldest first."""
        return tuple(self._sets)

    def get(self, set_id: int) -> Optional[SavedSessionSet]:
        """Get a saved set by ID."""
        return next((s for s in self._sets if s.id == set_id), None)

    async def load(self) -> List[SavedSessionSet]:
        """Load the persisted collection, replacing the in-memory copy."""
        async with self._lock:
            return await self._load_unlocked()

    async def load_or_empty(self) -> List[SavedSessionSet]:
        """Load the collection, falling back to an empty one if unreadable."""
        async with self._lock:
            try:
                return await self._load_unlocked()
            except StorageReadError as e:
                logger.warning("Starting with no saved sessions: %s", e)
                self._sets = []
                self._loaded = True
                return []

    async def _load_unlocked(self) -> List[SavedSessionSet]:
        # Caller holds self._lock
        try:
            raw = await self._storage.get(self.key)
        except (OSError, ValueError) as e:
            # UnicodeDecodeError is a ValueError
            raise StorageReadError(f"Could not read {self.key!r}: {e}") from e

        sets = self._deserialize(raw) if raw is not None else []
        for saved in sets:
            self._ids.observe(saved.id)
            for session in saved.sessions:
                self._ids.observe(session.id)

        self._sets = sets
        self._loaded = True
        return list(sets)

    async def save(self, batch: Sequence[Session]) -> Optional[SavedSessionSet]:
        """Save a batch as a new set.

        Returns None without touching storage when the batch is empty or the
        user declines. Raises StorageWriteError if the write fails.
        """
        sessions = list(batch)
        if not sessions:
            logger.debug("Ignoring save of an empty batch")
            return None

        if not await self._ask(f"Save {len(sessions)} session(s) as a new set?"):
            logger.debug("Save declined")
            return None

        async with self._lock:
            if not self._loaded:
                await self._load_unlocked()

            created_at = self._now()
            saved = SavedSessionSet.from_batch(
                set_id=self._ids(created_at),
                name=self._format_name(created_at),
                batch=sessions,
                created_at=created_at,
            )
            updated = self._sets + [saved]
            await self._persist(updated)
            self._sets = updated

        logger.info("Saved %r with %d session(s)", saved.name, saved.session_count)
        return saved

    async def delete(self, set_id: int) -> bool:
        """Delete a saved set by ID.

        Returns False when the ID is unknown or the user declines. Raises
        StorageWriteError if the write fails.
        """
        async with self._lock:
            if not self._loaded:
                await self._load_unlocked()
            target = self.get(set_id)
        if target is None:
            logger.debug("No saved set with id %s", set_id)
            return False

        if not await self._ask(f"Delete {target.name!r}?"):
            logger.debug("Delete declined")
            return False

        async with self._lock:
            updated = [s for s in self._sets if s.id != set_id]
            if len(updated) == len(self._sets):
                return False
            await self._persist(updated)
            self._sets = updated

        logger.info("Deleted %r", target.name)
        return True

    async def _ask(self, message: str) -> bool:
        answer = self._confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def _persist(self, sets: List[SavedSessionSet]) -> None:
        payload = json.dumps(
            [saved.model_dump(mode="json", by_alias=True) for saved in sets]
        )
        try:
            await self._storage.set(self.key, payload)
        except (OSError, ValueError) as e:
            logger.error("Failed to write %r: %s", self.key, e)
            raise StorageWriteError(f"Could not write {self.key!r}: {e}") from e

    def _deserialize(self, raw: str) -> List[SavedSessionSet]:
        try:
            sets_data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Malformed JSON under {self.key!r}: {e}") from e

        if not isinstance(sets_data, list):
            raise StorageReadError(f"Expected a list under {self.key!r}")

        try:
            return [SavedSessionSet.model_validate(data) for data in sets_data]
        except ValidationError as e:
            raise StorageReadError(f"Invalid saved set under {self.key!r}: {e}") from e

    def _format_name(self, created_at: datetime) -> str:
        return self._name_format.format(
            date=created_at.strftime("%x"), time=created_at.strftime("%X")
        )
