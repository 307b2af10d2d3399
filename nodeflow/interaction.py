"""Operations on a node together with a connection being drawn or detached."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .geometry import Point, PortType, opposite_port
from .registry import ConnectionPolicy

TypeConverter = Callable[[Any], Any]


class NodeConnectionInteraction:
    """Connects or disconnects one connection end at one node.

    The scene only needs a ``registry`` attribute offering ``type_converter``.
    """

    def __init__(self, node: Any, connection: Any, scene: Any) -> None:
        self.node = node
        self.connection = connection
        self.scene = scene

    def can_connect(self) -> Optional[tuple[int, Optional[TypeConverter]]]:
        """The port index and converter to use, or None if no connection is possible.

        The connection must require a port, must not come from this node, its
        loose end must lie over a vacant port, and the data types must match
        or have a registered converter.
        """
        required = self.connection.required_port
        if required is PortType.NONE:
            return None

        if self.connection.get_node(opposite_port(required)) is self.node:
            return None

        end_point = self._connection_end_scene_position(required)
        port_index = self.node.geometry.check_hit_scene_point(
            required, end_point, self.node.position)
        if port_index is None:
            return None

        if not self._port_is_vacant(required, port_index):
            return None

        connection_type = self.connection.data_type(opposite_port(required))
        candidate_type = self.node.model.data_type(required, port_index)
        if connection_type.id == candidate_type.id:
            return port_index, None

        registry = self.scene.registry
        if required is PortType.IN:
            converter = registry.type_converter(connection_type, candidate_type)
        else:
            converter = registry.type_converter(candidate_type, connection_type)
        if converter is None:
            return None
        return port_index, converter

    def try_connect(self) -> bool:
        """Attach the loose end to the node if possible and push data through it."""
        target = self.can_connect()
        if target is None:
            return False
        port_index, converter = target

        if converter is not None:
            self.connection.set_type_converter(converter)

        required = self.connection.required_port
        self.node.state.set_connection(required, port_index, self.connection)
        self.connection.set_node_to_port(self.node, required, port_index)

        self.node.move_connections()

        out_node = self.connection.get_node(PortType.OUT)
        if out_node is not None:
            out_node.on_data_updated(self.connection.get_port_index(PortType.OUT))
        return True

    def disconnect(self, port_type: PortType) -> bool:
        """Detach the connection from this node's port so that it needs a port again."""
        port_index = self.connection.get_port_index(port_type)
        self.node.state.entries(port_type)[port_index].clear()
        self.connection.propagate_empty_data()
        self.connection.clear_node(port_type)
        self.connection.set_required_port(port_type)
        return True

    def _connection_end_scene_position(self, port_type: PortType) -> Point:
        return self.connection.geometry.get_end_point(port_type)

    def _port_is_vacant(self, port_type: PortType, port_index: int) -> bool:
        if not self.node.state.entries(port_type)[port_index]:
            return True
        policy = self.node.model.port_out_connection_policy(port_index)
        return port_type is PortType.OUT and policy is ConnectionPolicy.MANY