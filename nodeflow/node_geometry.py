"""Size of a node and the positions of its ports."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from .geometry import Point, PortLayout, PortType, Rect
from .registry import ValidationState
from .style import node_style

_RESIZE_RECT_SIZE = 4


@dataclass(frozen=True)
class FontMetrics:
    """Fixed-pitch text measurements."""

    char_width: int = 7
    height: int = 16

    def width(self, text: str) -> int:
        return self.char_width * len(text)

    def bounding_rect(self, text: str) -> Rect:
        return Rect(0, 0, self.width(text), self.height)


class NodeGeometry:
    """Layout of a node: its size, port positions and embedded widget place."""

    def __init__(self, model: Any, font_metrics: Optional[FontMetrics] = None,
                 bold_font_metrics: Optional[FontMetrics] = None) -> None:
        self.model = model
        self.font_metrics = font_metrics or FontMetrics()
        self.bold_font_metrics = bold_font_metrics or FontMetrics(char_width=8, height=18)
        self.width = 50
        self.height = 50
        self.entry_width = 0
        self.input_port_width = 4
        self.output_port_width = 4
        self.entry_height = 1
        self.spacing = 1
        self.hovered = False
        self.dragging_pos = Point(-1000, -1000)
        self.port_layout = PortLayout.VERTICAL

    @property
    def n_sources(self) -> int:
        return self.model.n_ports(PortType.OUT)

    @property
    def n_sinks(self) -> int:
        return self.model.n_ports(PortType.IN)

    def _is_valid(self) -> bool:
        return self.model.validation_state is ValidationState.VALID

    def recalculate_size(self) -> None:
        """Recompute width and height from ports, widget and validation message."""
        self.entry_height = self.font_metrics.height
        step = self.entry_height + self.spacing
        self.height = step * max(self.n_sinks, self.n_sources)

        widget = self.model.widget_size
        if widget is not None:
            self.height = max(self.height, widget[1])

        self.input_port_width = self.port_width(PortType.IN)
        self.output_port_width = self.port_width(PortType.OUT)
        self.width = self.input_port_width + self.output_port_width + 2 * self.spacing
        if widget is not None:
            self.width += widget[0]

        if not self._is_valid():
            self.width = max(self.width, self.validation_width())
            self.height += self.validation_height() + self.spacing

    def entry_bounding_rect(self) -> Rect:
        return Rect(0, 0, self.entry_width, self.entry_height)

    def bounding_rect(self) -> Rect:
        """The node area extended by room for the connection points."""
        addon = 2 * node_style().connection_point_diameter
        return Rect(-addon, -addon, self.width + 2 * addon, self.height + 2 * addon)

    def port_scene_position(self, index: int, port_type: PortType,
                            origin: Point = Point()) -> Point:
        """Position of a port, relative to the node and shifted by origin."""
        diameter = node_style().connection_point_diameter
        if self.port_layout is PortLayout.HORIZONTAL:
            step = self.entry_height + self.spacing
            y = step * index + step / 2.0
            x = self.width + diameter if port_type is PortType.OUT else -diameter
        else:
            n_ports = self.model.n_ports(port_type)
            step = self.width // (n_ports + 1)
            x = float(step * (index + 1))
            y = self.height + diameter if port_type is PortType.OUT else -diameter
        return Point(x, y) + origin

    def check_hit_scene_point(self, port_type: PortType, scene_point: Point,
                              origin: Point = Point()) -> Optional[int]:
        """Index of the first port close enough to the point, or None."""
        if port_type is PortType.NONE:
            return None
        tolerance = 2 * node_style().connection_point_diameter
        for index in range(self.model.n_ports(port_type)):
            diff = self.port_scene_position(index, port_type, origin) - scene_point
            if math.sqrt(diff.dot(diff)) < tolerance:
                return index
        return None

    def resize_rect(self) -> Rect:
        return Rect(self.width - _RESIZE_RECT_SIZE, self.height - _RESIZE_RECT_SIZE,
                    _RESIZE_RECT_SIZE, _RESIZE_RECT_SIZE)

    def widget_position(self) -> Point:
        """Top-left corner of the embedded widget; the origin if there is none."""
        widget = self.model.widget_size
        if widget is None:
            return Point()
        x = self.spacing + self.port_width(PortType.IN)
        if not self._is_valid():
            free = self.height - self.validation_height() - self.spacing - widget[1]
        else:
            free = self.height - widget[1]
        return Point(x, free / 2.0)

    def validation_height(self) -> int:
        return int(self.bold_font_metrics.bounding_rect(self.model.validation_message).height)

    def validation_width(self) -> int:
        return int(self.bold_font_metrics.bounding_rect(self.model.validation_message).width)

    def port_width(self, port_type: PortType) -> int:
        """Width of the widest port label on one side."""
        return max((self.font_metrics.width(self.model.data_type(port_type, i).name)
                    for i in range(self.model.n_ports(port_type))), default=0)