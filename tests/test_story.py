import pytest

from src.story import STORY_STEPS, Narration


def test_narration_starts_on_first_step():
    narration = Narration()
    step = narration.start()
    assert step is STORY_STEPS[0]
    assert narration.active
    assert narration.indicator == "1 / 5"
    assert narration.next_label == "→"
    assert not narration.can_go_back


def test_last_step_completes_and_next_closes():
    narration = Narration()
    narration.start()
    for _ in range(len(STORY_STEPS) - 1):
        narration.next()

    assert narration.is_last
    assert narration.completed
    assert narration.next_label == "End"
    assert narration.indicator == "5 / 5"

    assert narration.next() is None
    assert not narration.visible


def test_back_stops_at_first_step():
    narration = Narration()
    narration.start()
    narration.next()
    assert narration.previous() is STORY_STEPS[0]
    assert narration.previous() is STORY_STEPS[0]


def test_narration_needs_steps():
    with pytest.raises(ValueError):
        Narration([])
