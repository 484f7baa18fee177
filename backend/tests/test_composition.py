import asyncio

from cbt_service import FALLBACK_SUGGESTION
from composition import EntryComposition
from conftest import GatedGenerator, StubGenerator
from entry_store import EntryStore
from exercises import DEFAULT_PROMPT
from models import Mood

THOUGHT = "我总是做不好"


def test_cannot_save_blank_content(store):
    entries = EntryStore(store)
    comp = EntryComposition()
    comp.content = "   "
    assert not comp.can_save
    assert comp.save(entries) is None
    assert entries.all() == ()


def test_plain_entry_saved_once(store):
    entries = EntryStore(store)
    comp = EntryComposition()
    comp.content = "Sunshine on the balcony"
    comp.set_mood("very_happy")

    entry = comp.save(entries)

    assert entry.mood is Mood.VERY_HAPPY
    assert entry.negative_thought is None and entry.cbt_suggestion is None
    assert comp.save(entries) is None
    assert len(entries) == 1


def test_default_mood_is_neutral_and_default_prompt():
    comp = EntryComposition()
    assert comp.mood is Mood.NEUTRAL
    assert comp.prompt_text == DEFAULT_PROMPT


def test_seed_prompt_recorded_on_entry(store):
    comp = EntryComposition(seed_prompt="谁对你提供了支持？")
    comp.content = "My sister called"
    entry = comp.save(EntryStore(store))
    assert entry.source_prompt == "谁对你提供了支持？"
    assert comp.prompt_text == "谁对你提供了支持？"


def test_resolved_suggestion_attached(store):
    comp = EntryComposition(generator=StubGenerator(error=TimeoutError()))
    comp.content = "Rough day at work"
    comp.toggle_reframing()
    comp.set_negative_thought(THOUGHT)
    asyncio.run(comp.request_suggestion())

    entries = EntryStore(store)
    entry = comp.save(entries)

    assert entry.negative_thought == THOUGHT
    assert entry.cbt_suggestion == FALLBACK_SUGGESTION
    assert "cbt_explorer" in entries.unlocked_badges


def test_thought_without_request_saves_no_suggestion(store):
    comp = EntryComposition(generator=StubGenerator())
    comp.content = "Rough day"
    comp.toggle_reframing()
    comp.set_negative_thought(THOUGHT)

    entry = comp.save(EntryStore(store))

    assert entry.negative_thought == THOUGHT
    assert entry.cbt_suggestion is None


def test_closed_reframing_section_drops_thought_and_suggestion(store):
    comp = EntryComposition(generator=StubGenerator(reply="T"))
    comp.content = "Rough day"
    comp.toggle_reframing()
    comp.set_negative_thought(THOUGHT)
    asyncio.run(comp.request_suggestion())
    comp.toggle_reframing()

    entry = comp.save(EntryStore(store))

    assert entry.negative_thought is None
    assert entry.cbt_suggestion is None


def test_regenerated_but_not_rerequested_has_no_suggestion(store):
    comp = EntryComposition(generator=StubGenerator(reply="T"))
    comp.content = "Rough day"
    comp.toggle_reframing()
    comp.set_negative_thought(THOUGHT)
    asyncio.run(comp.request_suggestion())
    comp.regenerate()

    entry = comp.save(EntryStore(store))
    assert entry.cbt_suggestion is None


def test_save_while_requesting_discards_late_reply(store):
    gen = GatedGenerator(reply="late")
    comp = EntryComposition(generator=gen)
    comp.content = "Rough day"
    comp.toggle_reframing()
    comp.set_negative_thought(THOUGHT)
    entries = EntryStore(store)

    async def scenario():
        task = asyncio.create_task(comp.request_suggestion())
        await asyncio.sleep(0)
        saved = comp.save(entries)
        gen.release()
        return saved, await task

    saved, late = asyncio.run(scenario())
    assert saved.cbt_suggestion is None
    assert late is None
    assert entries.all()[0].cbt_suggestion is None


def test_mood_hint_does_not_change_mood():
    comp = EntryComposition()
    comp.content = "This is a wonderful, amazing, beautiful day. I love it!"
    assert comp.mood_hint() is Mood.VERY_HAPPY
    assert comp.mood is Mood.NEUTRAL
