"""Pixel-space drawing surface.

Renderers never talk to altair directly. They draw primitive shapes into a
``Region`` (a rectangular window onto a ``Canvas`` with its own local origin)
and ``chartsmith.viz.backend`` turns the recorded primitives into a layered
Vega-Lite chart. Coordinates are pixels with the origin at the top-left.
"""
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

from chartsmith.viz.theme import RGB, to_css

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float
    color: str


@dataclass(frozen=True)
class Band:
    """Trapezoid between a two-point top edge and a horizontal base line."""

    x_left: float
    x_right: float
    top_left: float
    top_right: float
    base: float
    color: str


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    color: str
    width: float


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float
    color: str


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    size: int
    color: str
    align: str = "left"
    baseline: str = "alphabetic"
    angle: float = 0.0


Primitive = Union[Rect, Band, Polyline, Circle, Text]


@dataclass
class Canvas:
    width: int
    height: int
    background: str = "#ffffff"
    font_family: str = "sans-serif"
    primitives: List[Primitive] = field(default_factory=list)

    def root(self) -> "Region":
        return Region(self, 0, 0, self.width, self.height)

    def add(self, primitive: Primitive) -> None:
        self.primitives.append(primitive)


@dataclass(frozen=True)
class Region:
    canvas: Canvas
    x: int
    y: int
    width: int
    height: int

    def sub(self, x: int, y: int, width: int, height: int) -> "Region":
        return Region(self.canvas, self.x + x, self.y + y, max(0, width), max(0, height))

    def fill(self, color: RGB) -> None:
        self.rect(0, 0, self.width, self.height, color)

    def rect(self, x0: float, y0: float, x1: float, y1: float, color: RGB, alpha: float = 1.0) -> None:
        self.canvas.add(
            Rect(
                self.x + min(x0, x1),
                self.y + min(y0, y1),
                self.x + max(x0, x1),
                self.y + max(y0, y1),
                to_css(color, alpha),
            )
        )

    def band(
        self, x_left: float, x_right: float, top_left: float, top_right: float, base: float, color: RGB, alpha: float
    ) -> None:
        self.canvas.add(
            Band(
                self.x + x_left,
                self.x + x_right,
                self.y + top_left,
                self.y + top_right,
                self.y + base,
                to_css(color, alpha),
            )
        )

    def polyline(self, points: Sequence[Point], color: RGB, width: float = 1.0) -> None:
        if len(points) < 2:
            return
        shifted = tuple((self.x + px, self.y + py) for px, py in points)
        self.canvas.add(Polyline(shifted, to_css(color), width))

    def circle(self, x: float, y: float, radius: float, color: RGB) -> None:
        self.canvas.add(Circle(self.x + x, self.y + y, radius, to_css(color)))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: int,
        color: RGB,
        align: str = "left",
        baseline: str = "alphabetic",
        angle: float = 0.0,
    ) -> None:
        self.canvas.add(Text(self.x + x, self.y + y, text, size, to_css(color), align, baseline, angle))
