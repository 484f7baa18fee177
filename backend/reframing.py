import asyncio
from enum import Enum
from typing import Optional

from loguru import logger

from cbt_service import ReframeResult, TextGenerator, request_reframe
from models import Mood


class ReframeState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    REQUESTING = "requesting"
    RESOLVED = "resolved"


class ReframingPipeline:
    """
    Reframing flow for one entry being composed.

    IDLE -> READY once a thought is typed, READY -> REQUESTING on `request()`,
    REQUESTING -> RESOLVED when the reply (or the fallback) arrives, and
    RESOLVED -> READY on `regenerate()`. At most one request is in flight.
    """

    def __init__(self, generator: Optional[TextGenerator] = None):
        self._generator = generator
        self.state = ReframeState.IDLE
        self.negative_thought = ""
        self.result: Optional[ReframeResult] = None
        self.abandoned = False

    @property
    def suggestion(self) -> Optional[str]:
        return self.result.text if self.result is not None else None

    def set_thought(self, text: str) -> None:
        self.negative_thought = text or ""
        if self.state in (ReframeState.IDLE, ReframeState.READY):
            self.state = ReframeState.READY if self.negative_thought.strip() else ReframeState.IDLE

    async def request(self, mood: Mood) -> Optional[ReframeResult]:
        """Run one reframe attempt. No-op (returns None) unless READY."""
        if self.state is not ReframeState.READY or self.abandoned:
            return None

        self.state = ReframeState.REQUESTING
        try:
            result = await request_reframe(self.negative_thought, mood, self._generator)
        except asyncio.CancelledError:
            self.state = ReframeState.READY if self.negative_thought.strip() else ReframeState.IDLE
            raise

        if self.abandoned:
            logger.debug("reframe arrived after composition was abandoned; discarded")
            return None
        if result.fell_back:
            logger.info("reframe fell back to the built-in suggestion")
        self.result = result
        self.state = ReframeState.RESOLVED
        return result

    def regenerate(self) -> None:
        if self.state is not ReframeState.RESOLVED:
            return
        self.result = None
        self.state = ReframeState.READY if self.negative_thought.strip() else ReframeState.IDLE

    def abandon(self) -> None:
        self.abandoned = True
