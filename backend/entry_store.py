from typing import Any, FrozenSet, List, Optional, Tuple

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from badge_service import badge_states, evaluate
from models import Badge, InvalidEntryError, JournalEntry
from storage import ENTRIES_KEY, PersistentStore

ENTRY_LIST = TypeAdapter(List[JournalEntry])
# Parsed as plain JSON first so one bad record does not sink the rest.
RAW_LIST = TypeAdapter(List[Any])


class EntryStore:
    """Append-only journal history, most recent first.

    Every append rewrites the whole history to the persistent store and
    recomputes the unlocked badges.
    """

    def __init__(self, store: Optional[PersistentStore] = None):
        self._store = store
        self._entries: List[JournalEntry] = []
        self._unlocked: FrozenSet[str] = evaluate(())

    @classmethod
    def load(cls, store: PersistentStore) -> "EntryStore":
        entry_store = cls(store)
        entry_store.hydrate(store.read(ENTRIES_KEY))
        return entry_store

    def hydrate(self, raw: Optional[bytes]) -> None:
        """Replace the in-memory history with `raw`; bad data means an empty history."""
        self._entries = _decode_entries(raw)
        self._recompute()

    def append(self, entry: JournalEntry) -> JournalEntry:
        if not isinstance(entry, JournalEntry):
            raise InvalidEntryError(f"expected JournalEntry, got {type(entry).__name__}")
        self._entries.insert(0, entry)
        self._persist()
        self._recompute()
        logger.debug(f"appended entry {entry.id} ({len(self._entries)} total)")
        return entry

    def all(self) -> Tuple[JournalEntry, ...]:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    @property
    def unlocked_badges(self) -> FrozenSet[str]:
        return self._unlocked

    def badges(self) -> List[Badge]:
        return badge_states(self.all())

    def serialize(self) -> bytes:
        return ENTRY_LIST.dump_json(self._entries, by_alias=True, exclude_none=True)

    def _persist(self) -> None:
        if self._store is None:
            return
        # In-memory history stays authoritative for this session if the write fails.
        if not self._store.write(ENTRIES_KEY, self.serialize()):
            logger.warning(f"could not persist {len(self._entries)} entries; kept in memory")

    def _recompute(self) -> None:
        self._unlocked = evaluate(self.all())


def _decode_entries(raw: Optional[bytes]) -> List[JournalEntry]:
    if not raw:
        return []
    try:
        items = RAW_LIST.validate_json(raw)
    except ValidationError as e:
        logger.warning(f"entry history is malformed, starting empty: {e.errors()[0]['type']}")
        return []

    entries = []
    for i, item in enumerate(items):
        try:
            entries.append(JournalEntry.model_validate(item))
        except ValidationError as e:
            logger.warning(f"skipping unreadable entry #{i}: {e.error_count()} error(s)")
    return entries
