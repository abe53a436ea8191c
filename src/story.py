"""Guided narration shown before free exploration of the map."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class StoryStep:
    title: str
    subtitle: str
    text: str


STORY_STEPS: Tuple[StoryStep, ...] = (
    StoryStep(
        "The Scale of Wildfire",
        "Understanding the magnitude across America",
        "Wildfires have become increasingly prevalent across the United States. "
        "This map shows NASA satellite fire hotspots, revealing a decade of fire "
        "activity across the nation.",
    ),
    StoryStep(
        "Regional Patterns",
        "Where fires cluster and concentrate",
        "Certain regions see far more fire activity than others. The western "
        "states, particularly California, Oregon and Washington, show concentrated "
        "patterns of hotspots throughout the decade.",
    ),
    StoryStep(
        "Seasonal Dynamics",
        "How fire activity changes with seasons",
        "Fire intensity varies by season. Summer and fall months typically see the "
        "highest activity, driven by dry conditions and heat waves.",
    ),
    StoryStep(
        "Brightness as Intensity",
        "Satellite detection of fire heat",
        "Brightness is the heat intensity detected by the satellite. Higher values "
        "mean hotter fires; use the brightness filter to explore intensity levels.",
    ),
    StoryStep(
        "Explore Further",
        "Now it's your turn",
        "Use the filters to explore specific seasons, adjust the brightness "
        "threshold and click states to discover patterns in fire activity.",
    ),
)


class Narration:
    """Step-through narration; reaching the last step completes the presentation."""

    def __init__(self, steps: Sequence[StoryStep] = STORY_STEPS):
        if not steps:
            raise ValueError("Narration needs at least one step")
        self.steps = tuple(steps)
        self.index = 0
        self.visible = False
        self.completed = False

    @property
    def active(self) -> bool:
        return self.visible and not self.completed

    @property
    def current(self) -> StoryStep:
        return self.steps[self.index]

    @property
    def is_last(self) -> bool:
        return self.index == len(self.steps) - 1

    @property
    def indicator(self) -> str:
        return f"{self.index + 1} / {len(self.steps)}"

    @property
    def next_label(self) -> str:
        return "End" if self.is_last else "→"

    @property
    def can_go_back(self) -> bool:
        return self.index > 0

    def start(self) -> StoryStep:
        self.visible = True
        self.completed = False
        return self.show(0)

    def show(self, index: int) -> Optional[StoryStep]:
        if not 0 <= index < len(self.steps):
            return None
        self.index = index
        if self.is_last:
            self.completed = True
        return self.current

    def next(self) -> Optional[StoryStep]:
        """Advance; on the last step this closes the narration and returns None."""
        if not self.is_last:
            return self.show(self.index + 1)
        self.visible = False
        return None

    def previous(self) -> StoryStep:
        if self.can_go_back:
            self.show(self.index - 1)
        return self.current
