import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class InvalidEntryError(ValueError):
    """Raised when an entry can't be built or stored (blank content, unknown mood)."""


class Mood(str, Enum):
    # Ordered from lowest to highest.
    VERY_SAD = "very_sad"
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    VERY_HAPPY = "very_happy"

    @property
    def label(self) -> str:
        return MOOD_LABELS[self]


MOOD_LABELS = {
    Mood.VERY_SAD: "难过",
    Mood.SAD: "低落",
    Mood.NEUTRAL: "平静",
    Mood.HAPPY: "开心",
    Mood.VERY_HAPPY: "极好",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JournalEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = Field(
        default_factory=_now_iso,
        validation_alias=AliasChoices("createdAt", "created_at", "date"),
        serialization_alias="createdAt",
    )
    content: str
    mood: Mood
    negative_thought: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("negativeThought", "negative_thought"),
        serialization_alias="negativeThought",
    )
    cbt_suggestion: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("cbtSuggestion", "cbt_suggestion"),
        serialization_alias="cbtSuggestion",
    )
    # Guided-exercise prompt this entry answers, if any.
    source_prompt: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourcePrompt", "source_prompt", "prompt"),
        serialization_alias="sourcePrompt",
    )

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be empty")
        return v

    @field_validator("negative_thought", "cbt_suggestion", "source_prompt", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("created_at")
    @classmethod
    def _iso_timestamp(cls, v: str) -> str:
        datetime.fromisoformat(v.replace("Z", "+00:00"))
        return v

    @model_validator(mode="after")
    def _suggestion_needs_thought(self) -> "JournalEntry":
        if self.cbt_suggestion is not None and self.negative_thought is None:
            raise ValueError("cbt_suggestion requires negative_thought")
        return self

    @property
    def created(self) -> datetime:
        return datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))

    @property
    def has_suggestion(self) -> bool:
        return bool(self.cbt_suggestion)

    def __repr__(self):
        return f"<JournalEntry id={self.id} mood={self.mood.value}>"


def new_entry(
    content: str,
    mood,
    negative_thought: Optional[str] = None,
    cbt_suggestion: Optional[str] = None,
    source_prompt: Optional[str] = None,
) -> JournalEntry:
    """Build a fresh entry (new id, current timestamp) or raise InvalidEntryError."""
    try:
        return JournalEntry(
            content=content,
            mood=mood,
            negative_thought=negative_thought,
            cbt_suggestion=cbt_suggestion,
            source_prompt=source_prompt,
        )
    except ValidationError as e:
        raise InvalidEntryError(str(e)) from e


class UserSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reminder_time: str = Field(
        default="20:00",
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        validation_alias=AliasChoices("reminderTime", "reminder_time"),
        serialization_alias="reminderTime",
    )
    reminder_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("reminderEnabled", "reminder_enabled"),
        serialization_alias="reminderEnabled",
    )


class Badge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    unlocked: bool = False
