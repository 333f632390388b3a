from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence, Tuple
import logging
import uuid

from pulsecore.primitives import Canvas
from pulsecore.settings import PatternConfig
from pulsescenes.modes import PatternMode

logger = logging.getLogger("pulsegrid.moodboard")

MAX_PANELS = 4


class InvalidPanelCount(ValueError):
    """A moodboard needs between 1 and 4 panels"""

    def __init__(self, count):
        super().__init__(f"Moodboard layouts support 1 to {MAX_PANELS} panels, got {count}")
        self.count = count


@dataclass(frozen=True)
class Rect:
    """Normalised rectangle inside the unit square"""
    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def to_pixels(self, width, height) -> Tuple[float, float, float, float]:
        return (self.x * width, self.y * height, self.width * width, self.height * height)

    @property
    def area(self):
        return self.width * self.height


def panel_rects(count: int) -> List[Rect]:
    """
    Fixed layout table:
        1 panel   full board
        2 panels  left / right halves
        3 panels  top half full width, bottom half split left / right
        4 panels  2 x 2 grid, row-major
    """
    if count == 1:
        return [Rect(0.0, 0.0, 1.0, 1.0)]
    if count == 2:
        return [Rect(0.0, 0.0, 0.5, 1.0), Rect(0.5, 0.0, 0.5, 1.0)]
    if count == 3:
        return [
            Rect(0.0, 0.0, 1.0, 0.5),
            Rect(0.0, 0.5, 0.5, 0.5),
            Rect(0.5, 0.5, 0.5, 0.5),
        ]
    if count == 4:
        return [Rect(0.5 * (i % 2), 0.0 if i < 2 else 0.5, 0.5, 0.5) for i in range(4)]
    raise InvalidPanelCount(count)


@dataclass(frozen=True)
class MoodboardLayout:
    mode: PatternMode
    settings: PatternConfig
    label: str
    position: Rect
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def compose_layouts(panels: Sequence[Tuple]) -> List[MoodboardLayout]:
    """Turn ordered (mode, config, label) tuples into positioned layouts"""
    rects = panel_rects(len(panels))
    layouts = []
    for (mode, config, label), rect in zip(panels, rects):
        mode = PatternMode.from_name(mode)
        config = config.snapshot() if config is not None else PatternConfig()
        layouts.append(MoodboardLayout(
            mode=mode,
            settings=config,
            label=label or mode.value,
            position=rect,
        ))
    return layouts


@dataclass
class Moodboard:
    name: str
    layouts: List[MoodboardLayout]
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def create(cls, name, panels):
        board = cls(name=name, layouts=compose_layouts(panels))
        logger.info(f"Created moodboard '{name}' with {len(board.layouts)} panels")
        return board

    def activate_on(self, engine, board_width, board_height, now=None):
        """One generator per panel, each sized to its pixel rect and driven by its snapshot config"""
        timers = []
        for index, layout in enumerate(self.layouts):
            _, _, width, height = layout.position.to_pixels(board_width, board_height)
            timers.append(engine.activate(
                layout.mode,
                canvas=Canvas(width, height),
                config=layout.settings,
                name=f"{self.name}/{index}:{layout.label}",
                now=now,
            ))
        return timers

    def deactivate_on(self, engine, now=None):
        prefix = f"{self.name}/"
        for name in [n for n in engine.timers if n.startswith(prefix)]:
            engine.deactivate(name, now=now)
