from typing import List, NamedTuple, Optional


class Exercise(NamedTuple):
    id: str
    title: str
    description: str
    prompt: str
    frequency: str  # "Daily" | "Weekly" | "Anytime"


GUIDED_EXERCISES: List[Exercise] = [
    Exercise(
        id="daily_small_joy",
        title="每日微小快乐",
        description="发现生活中容易被忽视的美好。",
        prompt="今天有一件什么小事（哪怕很微不足道）让你感到了一丝快乐或平静？",
        frequency="Daily",
    ),
    Exercise(
        id="weekly_relationship",
        title="人际关系反思",
        description="回顾本周的连接。",
        prompt="回顾本周，谁对你提供了支持或善意？你想对他说些什么？",
        frequency="Weekly",
    ),
    Exercise(
        id="strength_focus",
        title="自我力量确认",
        description="CBT积极聚焦练习。",
        prompt="写下你今天克服的一个小困难，这体现了你的什么优点？",
        frequency="Anytime",
    ),
]

DEFAULT_PROMPT = "今天发生了什么让你心存感激的事？"


def get_exercise(exercise_id: str) -> Optional[Exercise]:
    return next((ex for ex in GUIDED_EXERCISES if ex.id == exercise_id), None)


def daily_exercise() -> Exercise:
    return GUIDED_EXERCISES[0]
