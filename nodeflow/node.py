"""A node in the flow graph: a data model with its state, geometry and position."""

from __future__ import annotations

import uuid
from typing import Any, Iterator

from .geometry import Point, PortType
from .node_geometry import NodeGeometry
from .node_state import NodeState, ReactionState
from .registry import NodeDataModel, NodeDataType


def _update_connection_geometry(connection: Any) -> None:
    """Put each attached end of the connection on its node's port."""
    for port_type in (PortType.IN, PortType.OUT):
        node = connection.get_node(port_type)
        if node is None:
            continue
        position = node.geometry.port_scene_position(
            connection.get_port_index(port_type), port_type, node.position)
        connection.geometry.set_end_point(port_type, position)


class Node:
    """Wraps a data model and keeps its connections, layout and scene position."""

    def __init__(self, model: NodeDataModel) -> None:
        self.id = uuid.uuid4()
        self.model = model
        self.state = NodeState.for_model(model)
        self.geometry = NodeGeometry(model)
        self.position = Point()
        self.geometry.recalculate_size()
        model.data_updated_listeners.append(self.on_data_updated)
        model.size_updated_listeners.append(self.on_node_size_updated)

    def _all_connections(self) -> Iterator[Any]:
        for port_type in (PortType.IN, PortType.OUT):
            for entry in self.state.entries(port_type):
                yield from list(entry.values())

    def save(self) -> dict[str, Any]:
        """The node's state; the stored x is the centre of the node."""
        width = self.geometry.bounding_rect().width
        return {
            "id": str(self.id),
            "model": self.model.save(),
            "position": {"x": self.position.x + width * 0.5, "y": self.position.y},
        }

    def restore(self, state: dict[str, Any]) -> None:
        """Restore id, model state and position from what save wrote."""
        self.id = uuid.UUID(state["id"])
        self.model.restore(state.get("model", {}))
        width = self.geometry.bounding_rect().width
        position = state.get("position", {})
        self.position = Point(float(position.get("x", 0.0)) - width * 0.5,
                              float(position.get("y", 0.0)))

    def react_to_possible_connection(self, port_type: PortType, data_type: NodeDataType,
                                     scene_point: Point) -> None:
        """Start reacting to a connection end dragged to scene_point."""
        self.geometry.dragging_pos = scene_point - self.position
        self.state.set_reaction(ReactionState.REACTING, port_type, data_type)

    def reset_reaction_to_connection(self) -> None:
        self.state.set_reaction(ReactionState.NOT_REACTING)

    def propagate_data(self, data: Any, port_index: int) -> None:
        """Hand data to an input port of the model and refresh the layout."""
        self.model.set_in_data(data, port_index)
        self.geometry.recalculate_size()
        self.move_connections()

    def on_data_updated(self, port_index: int) -> None:
        """Send the model's output on a port along every connection from it."""
        data = self.model.out_data(port_index)
        for connection in self.state.connections(PortType.OUT, port_index).values():
            connection.propagate_data(data)

    def on_node_size_updated(self) -> None:
        """Re-lay out after the embedded widget changed size, keeping the centre."""
        previous_width = self.geometry.width
        self.geometry.recalculate_size()
        new_width = self.geometry.width
        if new_width != previous_width:
            shift = (new_width - previous_width) * 0.5
            self.position = Point(self.position.x - shift, self.position.y)
        self.move_connections()

    def move_connections(self) -> None:
        """Move the ends of all attached connections onto their ports."""
        for connection in self._all_connections():
            _update_connection_geometry(connection)