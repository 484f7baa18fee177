from loguru import logger
from pydantic import ValidationError

from models import UserSettings
from storage import SETTINGS_KEY, PersistentStore


class SettingsStore:
    """Reminder settings, read and written as one JSON record."""

    def __init__(self, store: PersistentStore):
        self._store = store

    def load(self) -> UserSettings:
        raw = self._store.read(SETTINGS_KEY)
        if not raw:
            return UserSettings()
        try:
            return UserSettings.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"settings are malformed, using defaults: {e.error_count()} error(s)")
            return UserSettings()

    def save(self, settings: UserSettings) -> UserSettings:
        if not self._store.write(SETTINGS_KEY, settings.model_dump_json(by_alias=True).encode("utf-8")):
            logger.warning("could not persist settings; kept in memory")
        return settings
