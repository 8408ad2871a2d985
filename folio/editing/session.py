"""
Edit session: a working copy of the portfolio with commit/autosave.
"""
import asyncio
import base64
import logging
import mimetypes
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..personal.defaults import NEW_SKILL, is_known_icon, new_record
from ..personal.models import RECORD_TYPES, PortfolioModel, Skill, Socials, resolve_field
from ..storage.backends import StorageError
from ..storage.json_store import PortfolioStore
from . import editor
from .editor import IdGenerator

logger = logging.getLogger(__name__)

Mutator = Callable[[PortfolioModel], PortfolioModel]


class CommitPolicy(str, Enum):
    """When the session writes the working copy back to the store."""
    EXPLICIT = "explicit"
    AUTOSAVE = "autosave"


class SessionEventKind(str, Enum):
    CHANGED = "changed"
    COMMITTED = "committed"
    SAVE_FAILED = "save_failed"


class SessionEvent(BaseModel):
    """Notification sent to session listeners."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: SessionEventKind
    model: PortfolioModel
    error: Optional[Exception] = None


class EditSession:
    """Holds a working copy of the committed model and commits it back.

    All mutations go through `apply`, which is serialized, so every commit
    reflects the latest applied state.
    """

    def __init__(
        self,
        store: PortfolioStore,
        policy: CommitPolicy = CommitPolicy.AUTOSAVE,
        id_generator: Optional[IdGenerator] = None
    ):
        """Open a session on the store's committed model.

        Args:
            store: Store to read from and commit to
            policy: EXPLICIT commits only on `commit()`; AUTOSAVE commits after every change
            id_generator: Source of ids for new records
        """
        self.store = store
        self.policy = CommitPolicy(policy)
        self.ids = id_generator or IdGenerator()
        self._committed = store.current.model_copy(deep=True)
        self._working = store.current.model_copy(deep=True)
        self._lock = threading.RLock()
        self._listeners: List[Callable[[SessionEvent], None]] = []
        self.last_error: Optional[StorageError] = None

    @property
    def working(self) -> PortfolioModel:
        return self._working

    @property
    def committed(self) -> PortfolioModel:
        return self._committed

    @property
    def is_dirty(self) -> bool:
        """True when the working copy differs from the last commit."""
        return self._working != self._committed

    def differs(self, field: str) -> bool:
        """True when one top-level field differs from the last commit."""
        name = resolve_field(PortfolioModel, field)
        return getattr(self._working, name) != getattr(self._committed, name)

    def subscribe(self, listener: Callable[[SessionEvent], None]) -> Callable[[], None]:
        """Register a listener for change, commit and save-failure events.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _emit(self, kind: SessionEventKind, error: Optional[Exception] = None):
        event = SessionEvent(kind=kind, model=self._working, error=error)
        for listener in list(self._listeners):
            listener(event)

    def apply(self, mutator: Mutator) -> PortfolioModel:
        """Run `mutator` on the working copy and keep its result.

        The result is re-validated, so a mutation breaking an invariant
        (duplicate ids, duplicate skill titles, wrong types) raises
        ValueError and leaves the working copy untouched.
        """
        with self._lock:
            result = mutator(self._working.model_copy(deep=True))
            try:
                result = PortfolioModel.model_validate(result.model_dump())
            except ValidationError as e:
                raise ValueError(f"Rejected edit: {e}") from e
            self._working = result
            if result != self._committed:
                self._emit(SessionEventKind.CHANGED)
                if self.policy == CommitPolicy.AUTOSAVE:
                    self.commit()
            return self._working

    def commit(self) -> bool:
        """Save the working copy through the store.

        Save failures are not raised: they are recorded in `last_error`,
        sent to listeners as SAVE_FAILED, and the working copy is kept so a
        later commit can retry.

        Returns:
            True if the store holds the working copy afterwards
        """
        with self._lock:
            snapshot = self._working
            try:
                self.store.save(snapshot)
            except StorageError as e:
                logger.error("Changes could not be saved: %s", e)
                self.last_error = e
                self._emit(SessionEventKind.SAVE_FAILED, error=e)
                return False
            self.last_error = None
            self._committed = snapshot.model_copy(deep=True)
            self._emit(SessionEventKind.COMMITTED)
            return True

    def discard(self) -> PortfolioModel:
        """Drop uncommitted edits."""
        with self._lock:
            self._working = self._committed.model_copy(deep=True)
            return self._working

    # Field and collection helpers

    def set_field(self, field: str, value: Any) -> PortfolioModel:
        name = resolve_field(PortfolioModel, field)
        return self.apply(lambda m: m.model_copy(update={name: value}))

    def set_social(self, network: str, value: str) -> PortfolioModel:
        name = resolve_field(Socials, network)
        return self.apply(lambda m: m.model_copy(update={
            "socials": m.socials.model_copy(update={name: value})
        }))

    def add_record(self, collection: str) -> int:
        """Prepend a template record to `collection` and return its id."""
        if collection not in RECORD_TYPES:
            raise KeyError(f"Unknown collection {collection!r}")
        issued = []

        def prepend(model: PortfolioModel) -> PortfolioModel:
            records = getattr(model, collection)
            record_id = self.ids.next_id(item.id for item in records)
            issued.append(record_id)
            return model.model_copy(update={
                collection: editor.add(records, lambda: new_record(collection, record_id))
            })

        self.apply(prepend)
        return issued[-1]

    def remove_record(self, collection: str, record_id: int) -> PortfolioModel:
        if collection not in RECORD_TYPES:
            raise KeyError(f"Unknown collection {collection!r}")
        return self.apply(lambda m: m.model_copy(update={
            collection: editor.remove(getattr(m, collection), record_id)
        }))

    def update_record(self, collection: str, record_id: int, field: str, value: Any) -> PortfolioModel:
        if collection not in RECORD_TYPES:
            raise KeyError(f"Unknown collection {collection!r}")
        return self.apply(lambda m: m.model_copy(update={
            collection: editor.update(getattr(m, collection), record_id, field, value)
        }))

    def update_skill(self, category_index: int, skill_index: int, field: str, value: Any) -> PortfolioModel:
        if field == "icon" and not is_known_icon(value):
            raise ValueError(f"Unknown icon {value!r}")
        return self.apply(lambda m: m.model_copy(update={
            "skills": editor.update_skill(m.skills, category_index, skill_index, field, value)
        }))

    def delete_skill(self, category_index: int, skill_index: int) -> PortfolioModel:
        return self.apply(lambda m: m.model_copy(update={
            "skills": editor.delete_skill(m.skills, category_index, skill_index)
        }))

    def add_skill(self, category_index: int, skill: Optional[Skill] = None) -> PortfolioModel:
        skill = skill or Skill(**NEW_SKILL)
        return self.apply(lambda m: m.model_copy(update={
            "skills": editor.add_skill(m.skills, category_index, skill)
        }))

    # Asynchronous ingestion

    async def ingest(
        self,
        payload: Union[Awaitable[str], str],
        field: str,
        collection: Optional[str] = None,
        record_id: Optional[int] = None
    ) -> PortfolioModel:
        """Store the string produced by `payload` into one field.

        With `collection` and `record_id` the value goes to that record, so
        concurrent ingestions for different records cannot overwrite each
        other. If `payload` raises, nothing is applied.
        """
        value = await payload if not isinstance(payload, str) else payload
        if collection is None:
            return self.set_field(field, value)
        if record_id is None:
            raise ValueError("record_id is required when ingesting into a collection")
        return self.update_record(collection, record_id, field, value)

    async def ingest_file(
        self,
        path: Union[str, Path],
        field: str,
        collection: Optional[str] = None,
        record_id: Optional[int] = None
    ) -> PortfolioModel:
        """Read a file into a data URI and store it like `ingest`.

        Raises:
            OSError: if the file cannot be read; the working copy is unchanged
        """
        return await self.ingest(asyncio.to_thread(read_data_uri, path), field, collection, record_id)


def read_data_uri(path: Union[str, Path]) -> str:
    """Encode a file as a base64 data URI."""
    path = Path(path)
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    with open(path, 'rb') as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
