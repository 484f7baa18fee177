from typing import Optional

from cbt_service import TextGenerator
from entry_store import EntryStore
from exercises import DEFAULT_PROMPT
from models import InvalidEntryError, JournalEntry, Mood, new_entry
from reframing import ReframeState, ReframingPipeline
from sentiment_service import suggest_mood


class EntryComposition:
    """One new entry being written, from blank page to `save()`."""

    def __init__(self, seed_prompt: Optional[str] = None, generator: Optional[TextGenerator] = None):
        self.seed_prompt = seed_prompt
        self.content = ""
        self.mood = Mood.NEUTRAL
        self.reframing_open = False
        self.pipeline = ReframingPipeline(generator)
        self.saved: Optional[JournalEntry] = None

    @property
    def prompt_text(self) -> str:
        return self.seed_prompt or DEFAULT_PROMPT

    @property
    def can_save(self) -> bool:
        return bool(self.content.strip()) and self.saved is None

    def set_mood(self, mood) -> None:
        self.mood = Mood(mood)

    def mood_hint(self) -> Mood:
        return suggest_mood(self.content)

    def toggle_reframing(self) -> bool:
        self.reframing_open = not self.reframing_open
        return self.reframing_open

    def set_negative_thought(self, text: str) -> None:
        self.pipeline.set_thought(text)

    async def request_suggestion(self):
        return await self.pipeline.request(self.mood)

    def regenerate(self) -> None:
        self.pipeline.regenerate()

    def abandon(self) -> None:
        self.pipeline.abandon()

    def build_entry(self) -> JournalEntry:
        thought = None
        suggestion = None
        if self.reframing_open and self.pipeline.negative_thought.strip():
            thought = self.pipeline.negative_thought
            if self.pipeline.state is ReframeState.RESOLVED:
                suggestion = self.pipeline.suggestion
        return new_entry(
            content=self.content,
            mood=self.mood,
            negative_thought=thought,
            cbt_suggestion=suggestion,
            source_prompt=self.seed_prompt,
        )

    def save(self, store: EntryStore) -> Optional[JournalEntry]:
        """Append the entry once; None while there is nothing valid to save."""
        if not self.can_save:
            return None
        try:
            entry = self.build_entry()
        except InvalidEntryError:
            return None
        self.saved = store.append(entry)
        # A reply still in flight has nowhere to go now.
        self.pipeline.abandon()
        return self.saved
