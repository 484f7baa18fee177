# cbt_service.py
import os
from enum import Enum
from typing import NamedTuple, Optional, Protocol

import httpx
from dotenv import load_dotenv
from loguru import logger

from models import Mood

# Load local .env (deployed environments inject vars directly)
load_dotenv()

# --- OpenRouter config ---
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_MODEL = os.getenv(
    "OPENROUTER_MODEL",
    "meta-llama/llama-3.1-8b-instruct:free",
)
API_URL = "https://openrouter.ai/api/v1/chat/completions"
PUBLIC_APP_URL = os.getenv("PUBLIC_APP_URL", "")
CBT_TIMEOUT_SECONDS = float(os.getenv("CBT_TIMEOUT_SECONDS", "30"))

SYSTEM_INSTRUCTION = (
    "You are an empathetic, warm, and professional CBT (Cognitive Behavioral Therapy) "
    "assistant embedded in a gratitude journal.\n"
    "Your goal is to help the user challenge negative thoughts using CBT techniques "
    "(like identifying cognitive distortions, reframing, or reality testing) while "
    "validating their feelings.\n"
    "Keep your response concise (under 150 words), structured, and gentle.\n"
    "Structure your response in Markdown:\n"
    "**1. 识别与共情 (Validation):** Briefly validate their emotion.\n"
    "**2. 思维误区 (Distortion):** Identify potential cognitive distortions "
    "(e.g., All-or-nothing thinking, Catastrophizing).\n"
    "**3. 新的视角 (Reframe):** Offer a healthier, more balanced perspective or a "
    "question to ask themselves."
)

FALLBACK_SUGGESTION = "抱歉，AI 暂时无法连接。请试着问自己：这个想法是100%真实的吗？"


class GenerationError(Exception):
    """The text-generation service gave no usable text."""


class TextGenerator(Protocol):
    async def generate(self, system_instruction: str, user_instruction: str) -> str:
        ...


class OpenRouterGenerator:
    """Chat-completions client for OpenRouter."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = CBT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or OPENROUTER_API_KEY
        self.model = model or OPENROUTER_MODEL
        self.timeout = timeout
        self._transport = transport

    async def generate(self, system_instruction: str, user_instruction: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": PUBLIC_APP_URL,
            "X-Title": "Mindful Moments",
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_instruction},
            ],
            "max_tokens": 400,
            "temperature": 0.7,
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(API_URL, headers=headers, json=body)
            logger.debug(f"LLM status: {resp.status_code}")
            resp.raise_for_status()
            data = resp.json()

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"unexpected response shape: {str(data)[:200]}") from e
        if not isinstance(content, str):
            raise GenerationError("response content is not text")
        return content


def build_user_instruction(negative_thought: str, mood: Mood) -> str:
    mood = Mood(mood)
    return (
        f'User\'s Negative Thought: "{negative_thought}"\n'
        f"User's Current Mood: {mood.value} ({mood.label})\n\n"
        "Please analyze this thought using CBT principles."
    )


class ReframeOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FELL_BACK = "fell_back"


class ReframeResult(NamedTuple):
    outcome: ReframeOutcome
    text: str

    @property
    def fell_back(self) -> bool:
        return self.outcome is ReframeOutcome.FELL_BACK


def succeeded(text: str) -> ReframeResult:
    return ReframeResult(ReframeOutcome.SUCCEEDED, text)


def fell_back() -> ReframeResult:
    return ReframeResult(ReframeOutcome.FELL_BACK, FALLBACK_SUGGESTION)


async def request_reframe(
    negative_thought: str,
    mood: Mood,
    generator: Optional[TextGenerator] = None,
) -> ReframeResult:
    """
    One attempt at a CBT reframe for `negative_thought`.
    Never raises: any failure comes back as the fixed fallback suggestion.
    """
    generator = generator or OpenRouterGenerator()
    try:
        text = await generator.generate(
            SYSTEM_INSTRUCTION, build_user_instruction(negative_thought, mood)
        )
        text = (text or "").strip()
        if not text:
            raise GenerationError("empty suggestion")
        return succeeded(text)

    except httpx.HTTPStatusError as e:
        logger.error(f"HTTP error from text generation: {e.response.status_code} {e.response.text[:300]}")
    except Exception as e:
        logger.error(f"General LLM error: {e!r}")

    # Fallback if anything goes wrong
    return fell_back()
