from typing import Callable, FrozenSet, List, NamedTuple, Sequence

from models import Badge, JournalEntry

Predicate = Callable[[Sequence[JournalEntry]], bool]


class BadgeRule(NamedTuple):
    id: str
    name: str
    description: str
    condition: Predicate


def has_any_entry(entries: Sequence[JournalEntry]) -> bool:
    return len(entries) >= 1


def streak_length_proxy(entries: Sequence[JournalEntry]) -> bool:
    # Counts entries, not distinct consecutive days.
    return len(entries) >= 3


def has_reframed_thought(entries: Sequence[JournalEntry]) -> bool:
    return any(e.has_suggestion for e in entries)


def has_ten_entries(entries: Sequence[JournalEntry]) -> bool:
    return len(entries) >= 10


BADGE_RULES: List[BadgeRule] = [
    BadgeRule("first_step", "起步者", "完成你的第一篇感恩日记。", has_any_entry),
    BadgeRule("streak_3", "三日连胜", "连续记录3天。", streak_length_proxy),
    BadgeRule("cbt_explorer", "思维探索者", "完成一次负面思维重构练习。", has_reframed_thought),
    BadgeRule("master_10", "感恩大师", "累计记录10件感恩之事。", has_ten_entries),
]


def evaluate(entries: Sequence[JournalEntry]) -> FrozenSet[str]:
    """Ids of every badge whose condition holds for the full entry history."""
    return frozenset(rule.id for rule in BADGE_RULES if rule.condition(entries))


def badge_states(entries: Sequence[JournalEntry]) -> List[Badge]:
    """All badges in catalog order with `unlocked` projected from `entries`."""
    unlocked = evaluate(entries)
    return [
        Badge(id=r.id, name=r.name, description=r.description, unlocked=r.id in unlocked)
        for r in BADGE_RULES
    ]
