from typing import List, Optional, Tuple

from loguru import logger

from cbt_service import TextGenerator
from composition import EntryComposition
from entry_store import EntryStore
from exercises import daily_exercise, get_exercise
from logging_setup import setup_logger
from models import Badge, JournalEntry, UserSettings
from settings_service import SettingsStore
from storage import PersistentStore


class MindfulJournal:
    """Everything a front end needs: history, badges, settings and new compositions."""

    def __init__(
        self,
        store: PersistentStore,
        entries: EntryStore,
        settings: SettingsStore,
        generator: Optional[TextGenerator] = None,
    ):
        self.store = store
        self.entry_store = entries
        self.settings_store = settings
        self.settings = settings.load()
        self._generator = generator

    @classmethod
    def open(
        cls,
        database_url: Optional[str] = None,
        generator: Optional[TextGenerator] = None,
    ) -> "MindfulJournal":
        """Load history and settings from the local store. Never fails on bad saved data."""
        store = PersistentStore(database_url)
        journal = cls(store, EntryStore.load(store), SettingsStore(store), generator)
        logger.info(
            f"journal opened: {len(journal.entry_store)} entries, "
            f"{journal.unlocked_count} badge(s) unlocked"
        )
        return journal

    # ---------- Entries ----------

    @property
    def entries(self) -> Tuple[JournalEntry, ...]:
        return self.entry_store.all()

    def recent(self, n: int = 3) -> Tuple[JournalEntry, ...]:
        return self.entries[:n]

    def compose(self, prompt: Optional[str] = None) -> EntryComposition:
        return EntryComposition(seed_prompt=prompt, generator=self._generator)

    def compose_exercise(self, exercise_id: str) -> EntryComposition:
        exercise = get_exercise(exercise_id)
        if exercise is None:
            raise KeyError(f"unknown exercise {exercise_id!r}")
        return self.compose(exercise.prompt)

    def daily_prompt(self) -> str:
        return daily_exercise().prompt

    def save(self, composition: EntryComposition) -> Optional[JournalEntry]:
        return composition.save(self.entry_store)

    # ---------- Badges ----------

    def badges(self) -> List[Badge]:
        return self.entry_store.badges()

    @property
    def unlocked_count(self) -> int:
        return len(self.entry_store.unlocked_badges)

    # ---------- Settings ----------

    def update_settings(self, **changes) -> UserSettings:
        updated = UserSettings.model_validate({**self.settings.model_dump(), **changes})
        self.settings = self.settings_store.save(updated)
        return self.settings

    def close(self) -> None:
        self.store.close()


if __name__ == "__main__":
    setup_logger()
    journal = MindfulJournal.open()
    for badge in journal.badges():
        logger.info(f"{badge.name}: {'unlocked' if badge.unlocked else 'locked'}")
    journal.close()
