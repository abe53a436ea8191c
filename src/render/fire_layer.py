"""
Fire point layer.

Keeps one mark per visible fire, keyed by record id. Each render diffs the new
visible sequence against the current marks: vanished fires exit, new fires
enter at radius 0 and grow to their encoded radius, kept fires are restyled.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.analysis.records import FireRecord
from src.analysis.scales import color_scale, opacity_scale, radius_scale
from src.render.reconcile import KeyedDiff, reconcile

Projector = Callable[[float, float], Optional[Tuple[float, float]]]

# Milliseconds for the enter/update transitions
TRANSITION_MS = 150


@dataclass
class PointMark:
    """Drawable state of one fire point."""

    record: FireRecord
    x: float
    y: float
    radius: float
    target_radius: float
    color: str
    opacity: float

    @property
    def animating(self) -> bool:
        return self.radius != self.target_radius

    def settle(self):
        self.radius = self.target_radius


def encode(record: FireRecord) -> Tuple[float, str, float]:
    """(radius, color, opacity) for a record's brightness."""
    b = record.brightness
    return radius_scale(b), color_scale(b), opacity_scale(b)


class FireLayerRenderer:
    """
    Reconciles the visible fire sequence against drawn point marks.

    Args:
        projection: Callable mapping (lon, lat) to pixel (x, y) or None
        on_enter / on_update / on_exit: Optional presentation hooks called
            with the affected mark
    """

    def __init__(
        self,
        projection: Projector,
        on_enter: Optional[Callable[[PointMark], None]] = None,
        on_update: Optional[Callable[[PointMark], None]] = None,
        on_exit: Optional[Callable[[PointMark], None]] = None,
    ):
        self.projection = projection
        self.marks: Dict[str, PointMark] = {}
        self._on_enter = on_enter
        self._on_update = on_update
        self._on_exit = on_exit

    def _position(self, record: FireRecord) -> Optional[Tuple[float, float]]:
        if record.coordinates is None or record.brightness is None:
            return None
        lon, lat = record.coordinates
        return self.projection(lon, lat)

    def _enter(self, item: Tuple[FireRecord, Tuple[float, float]]) -> PointMark:
        record, (x, y) = item
        radius, color, opacity = encode(record)
        mark = PointMark(
            record=record,
            x=x,
            y=y,
            radius=0.0,
            target_radius=radius,
            color=color,
            opacity=opacity,
        )
        if self._on_enter:
            self._on_enter(mark)
        return mark

    def _update(
        self, mark: PointMark, item: Tuple[FireRecord, Tuple[float, float]]
    ) -> PointMark:
        record, (x, y) = item
        radius, color, opacity = encode(record)
        mark.record = record
        mark.x, mark.y = x, y
        mark.target_radius = radius
        mark.color = color
        mark.opacity = opacity
        if self._on_update:
            self._on_update(mark)
        return mark

    def _exit(self, mark: PointMark):
        if self._on_exit:
            self._on_exit(mark)

    def render(self, visible: Sequence[FireRecord]) -> KeyedDiff[str]:
        """
        Reconcile marks with ``visible``.

        Records that cannot be placed (no coordinates, unprojectable, no
        brightness) get no mark.
        """
        placeable = []
        for record in visible:
            position = self._position(record)
            if position is not None:
                placeable.append((record, position))

        return reconcile(
            self.marks,
            placeable,
            key=lambda item: item[0].id,
            on_enter=self._enter,
            on_update=self._update,
            on_exit=self._exit,
        )

    def finish_transitions(self):
        """Jump every animating mark to its target radius."""
        for mark in self.marks.values():
            mark.settle()

    def visible_marks(self) -> List[PointMark]:
        return list(self.marks.values())

    def find(self, record_id: str) -> Optional[PointMark]:
        return self.marks.get(record_id)
