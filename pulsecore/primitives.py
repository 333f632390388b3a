from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple
import numpy as np

Point = Tuple[float, float]
RGBA = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Canvas:
    """Pixel size of the surface a generator draws into"""
    width: float = 800.0
    height: float = 600.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Canvas dimensions must be positive")

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)


@dataclass(frozen=True)
class Line:
    """Straight stroke in a single colour"""
    start: Point
    end: Point
    color: RGBA
    opacity: float
    width: float = 1.0

    def __post_init__(self):
        if self.width < 0:
            raise ValueError("Line width must be non-negative")


@dataclass(frozen=True)
class GradientLine:
    """Stroke whose colour runs linearly from start_color to end_color"""
    start: Point
    end: Point
    start_color: RGBA
    end_color: RGBA
    opacity: float
    width: float = 1.0

    def __post_init__(self):
        if self.width < 0:
            raise ValueError("Line width must be non-negative")


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    color: RGBA
    opacity: float
    scale: float = 1.0

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError("Radius must be non-negative")


@dataclass(frozen=True)
class RadialGradient:
    """Disc filled with colour stops running from the centre (stops[0]) to the rim"""
    center: Point
    radius: float
    stops: Tuple[RGBA, ...]
    opacity: float
    scale: float = 1.0

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError("Radius must be non-negative")
        if len(self.stops) < 2:
            raise ValueError("A gradient needs at least two colour stops")


@dataclass(frozen=True, eq=False)
class Polyline:
    """Open path through points, an (n, 2) float array"""
    points: np.ndarray
    color: RGBA
    opacity: float
    width: float = 1.0

    def __post_init__(self):
        if self.width < 0:
            raise ValueError("Line width must be non-negative")
        if self.points.ndim != 2 or self.points.shape[1] != 2:
            raise ValueError("Polyline points must have shape (n, 2)")

    def __eq__(self, other):
        if not isinstance(other, Polyline):
            return NotImplemented
        return (
            self.color == other.color
            and self.opacity == other.opacity
            and self.width == other.width
            and np.array_equal(self.points, other.points)
        )


@dataclass
class Frame:
    """Drawable state of one generator after a tick"""
    name: str
    mode: str
    phase: float
    count: int
    canvas: Canvas
    primitives: List[object] = field(default_factory=list)

    def of_type(self, kind):
        return [p for p in self.primitives if isinstance(p, kind)]


class ExportFormat(Enum):
    INSTAGRAM = "Instagram (9:16)"
    SQUARE = "Square (1:1)"
    LANDSCAPE = "Landscape (16:9)"
    CUSTOM = "Custom Size"

    @property
    def aspect_ratio(self) -> float:
        return {
            ExportFormat.INSTAGRAM: 9.0 / 16.0,
            ExportFormat.SQUARE: 1.0,
            ExportFormat.LANDSCAPE: 16.0 / 9.0,
            ExportFormat.CUSTOM: 1.0,
        }[self]

    def canvas_for(self, height: float) -> Canvas:
        return Canvas(width=round(height * self.aspect_ratio), height=height)
