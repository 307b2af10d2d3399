"""Plane geometry primitives and the geometry of a connection curve."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .style import connection_style

_DEFAULT_CONTROL_OFFSET = 50.0


class PortType(enum.Enum):
    """Which side of a node a port sits on."""

    NONE = "none"
    IN = "in"
    OUT = "out"


class PortLayout(enum.Enum):
    """Whether ports are laid out along the sides or along top and bottom."""

    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"


def opposite_port(port_type: PortType) -> PortType:
    """Return the port type at the other end of a connection."""
    if port_type is PortType.IN:
        return PortType.OUT
    if port_type is PortType.OUT:
        return PortType.IN
    return PortType.NONE


@dataclass(frozen=True)
class Point:
    """A point or offset in the plane."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def dot(self, other: Point) -> float:
        """Dot product of two points taken as vectors."""
        return self.x * other.x + self.y * other.y

    def manhattan_length(self) -> float:
        return abs(self.x) + abs(self.y)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle; width and height may be negative."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_points(cls, top_left: Point, bottom_right: Point) -> Rect:
        return cls(top_left.x, top_left.y,
                   bottom_right.x - top_left.x, bottom_right.y - top_left.y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def top_left(self) -> Point:
        return Point(self.left, self.top)

    @property
    def bottom_right(self) -> Point:
        return Point(self.right, self.bottom)

    @property
    def is_null(self) -> bool:
        return self.width == 0 and self.height == 0

    def normalized(self) -> Rect:
        """Return the same area with non-negative width and height."""
        left, right = sorted((self.left, self.right))
        top, bottom = sorted((self.top, self.bottom))
        return Rect(left, top, right - left, bottom - top)

    def united(self, other: Rect) -> Rect:
        """Return the smallest rectangle covering both rectangles."""
        if self.is_null:
            return other
        if other.is_null:
            return self
        a, b = self.normalized(), other.normalized()
        left, top = min(a.left, b.left), min(a.top, b.top)
        right, bottom = max(a.right, b.right), max(a.bottom, b.bottom)
        return Rect(left, top, right - left, bottom - top)

    def contains(self, point: Point) -> bool:
        """Tell whether the point lies inside or on the border."""
        n = self.normalized()
        if n.width == 0 or n.height == 0:
            return False
        return n.left <= point.x <= n.right and n.top <= point.y <= n.bottom


@dataclass
class ConnectionGeometry:
    """End points and drawing attributes of a connection curve."""

    in_point: Point = Point()
    out_point: Point = Point()
    line_width: float = 3.0
    hovered: bool = False
    port_layout: PortLayout = PortLayout.HORIZONTAL

    @property
    def source(self) -> Point:
        return self.out_point

    @property
    def sink(self) -> Point:
        return self.in_point

    def get_end_point(self, port_type: PortType) -> Point:
        if port_type is PortType.NONE:
            raise ValueError("a connection has no end point for PortType.NONE")
        return self.out_point if port_type is PortType.OUT else self.in_point

    def set_end_point(self, port_type: PortType, point: Point) -> None:
        if port_type is PortType.OUT:
            self.out_point = point
        elif port_type is PortType.IN:
            self.in_point = point

    def move_end_point(self, port_type: PortType, offset: Point) -> None:
        if port_type is PortType.OUT:
            self.out_point = self.out_point + offset
        elif port_type is PortType.IN:
            self.in_point = self.in_point + offset

    def bounding_rect(self) -> Rect:
        """Rectangle covering the curve, its control points and end markers."""
        c1, c2 = self.points_c1c2()
        basic = Rect.from_points(self.out_point, self.in_point).normalized()
        controls = Rect.from_points(c1, c2).normalized()
        common = basic.united(controls)
        diam = connection_style().point_diameter
        corner = Point(diam, diam)
        return Rect.from_points(common.top_left - corner,
                                common.bottom_right + 2 * corner)

    def points_c1c2(self) -> tuple[Point, Point]:
        """The two control points of the cubic curve."""
        horizontal = self.port_layout is PortLayout.HORIZONTAL
        if horizontal:
            distance = self.in_point.x - self.out_point.x
        else:
            distance = self.in_point.y - self.out_point.y

        minimum = min(_DEFAULT_CONTROL_OFFSET, abs(distance))
        offset = 0.0
        ratio = 0.5
        if distance <= 0:
            offset = -minimum
            ratio = 1.0

        if horizontal:
            c1 = Point(self.out_point.x + minimum * ratio, self.out_point.y + offset)
            c2 = Point(self.in_point.x - minimum * ratio, self.in_point.y + offset)
        else:
            c1 = Point(self.out_point.x + offset, self.out_point.y + minimum * ratio)
            c2 = Point(self.in_point.x + offset, self.in_point.y - minimum * ratio)
        return c1, c2