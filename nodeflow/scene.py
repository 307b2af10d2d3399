"""The scene: owns nodes and connections, persists them and orders them by dependency."""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, Optional

from .connection import Connection, start_connection
from .geometry import Point, PortLayout, PortType
from .node import Node
from .registry import DataModelRegistry, NodeDataModel, NodeDataType

logger = logging.getLogger(__name__)

TypeConverter = Callable[[Any], Any]

EVENTS = ("node_created", "node_deleted", "connection_created", "connection_deleted")


def _place_connection(connection: Connection) -> None:
    """Put the connection's ends on their ports; a loose end sits on the attached port."""
    attached: Optional[Point] = None
    for port_type in (PortType.IN, PortType.OUT):
        node = connection.get_node(port_type)
        if node is None:
            continue
        attached = node.geometry.port_scene_position(
            connection.get_port_index(port_type), port_type, node.position)
        connection.geometry.set_end_point(port_type, attached)
    if attached is not None and connection.required_port is not PortType.NONE:
        connection.geometry.set_end_point(connection.required_port, attached)


def _type_from_json(value: Any) -> NodeDataType:
    if not isinstance(value, dict):
        return NodeDataType()
    return NodeDataType(str(value.get("id", "")), str(value.get("name", "")))


def _parse_uuid(text: Any) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(text))
    except ValueError:
        return None


class FlowScene:
    """Holds the nodes and connections of one graph."""

    def __init__(self, registry: Optional[DataModelRegistry] = None) -> None:
        self.registry = registry if registry is not None else DataModelRegistry()
        self.nodes: dict[uuid.UUID, Node] = {}
        self.connections: dict[uuid.UUID, Connection] = {}
        self.layout = PortLayout.VERTICAL
        self._listeners: dict[str, list[Callable[[Any], None]]] = {e: [] for e in EVENTS}

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        """Call callback with the node or connection whenever event happens."""
        if event not in self._listeners:
            raise ValueError(f"unknown event {event!r}; expected one of {', '.join(EVENTS)}")
        self._listeners[event].append(callback)

    def _emit(self, event: str, subject: Any) -> None:
        for callback in list(self._listeners[event]):
            callback(subject)

    # connections -----------------------------------------------------------

    def create_connection(self, port_type: PortType, node: Node,
                          port_index: int) -> Connection:
        """Start a connection at one port of node; the other end is left loose."""
        connection = start_connection(port_type, node, port_index)
        connection.geometry.port_layout = self.layout
        _place_connection(connection)
        self.connections[connection.id] = connection
        return connection

    def connect(self, node_in: Node, port_index_in: int, node_out: Node,
                port_index_out: int, converter: Optional[TypeConverter] = None) -> Connection:
        """Join an output port to an input port and push the current data through.

        Raises IndexError if either node has no such port.
        """
        if not 0 <= port_index_in < node_in.model.n_ports(PortType.IN):
            raise IndexError("the node model doesn't provide this input port index")
        if not 0 <= port_index_out < node_out.model.n_ports(PortType.OUT):
            raise IndexError("the node model doesn't provide this output port index")

        connection = Connection(node_in, port_index_in, node_out, port_index_out, converter)
        node_in.state.set_connection(PortType.IN, port_index_in, connection)
        node_out.state.set_connection(PortType.OUT, port_index_out, connection)
        connection.geometry.port_layout = self.layout
        _place_connection(connection)

        node_out.on_data_updated(port_index_out)

        self.connections[connection.id] = connection
        self._emit("connection_created", connection)
        return connection

    def restore_connection(self, state: dict[str, Any]) -> Optional[Connection]:
        """Recreate a connection written by Connection.save.

        Returns None, after logging, if either node is not in the scene.
        """
        in_id = _parse_uuid(state.get("in_id"))
        out_id = _parse_uuid(state.get("out_id"))
        node_in = self.nodes.get(in_id) if in_id is not None else None
        node_out = self.nodes.get(out_id) if out_id is not None else None
        if node_in is None or node_out is None:
            logger.debug("invalid connection with ids %s and %s",
                         state.get("in_id"), state.get("out_id"))
            return None

        converter = None
        converter_state = state.get("converter")
        if isinstance(converter_state, dict):
            in_type = _type_from_json(converter_state.get("in"))
            out_type = _type_from_json(converter_state.get("out"))
            converter = self.registry.type_converter(out_type, in_type)

        connection = self.connect(node_in, int(state.get("in_index", 0)),
                                  node_out, int(state.get("out_index", 0)), converter)
        self._emit("connection_created", connection)
        connection.geometry.port_layout = self.layout
        return connection

    def delete_connection(self, connection: Connection) -> None:
        """Detach a connection from its nodes and drop it; its input receives None."""
        connection.remove_from_nodes()
        self.connections.pop(connection.id, None)
        self._emit("connection_deleted", connection)
        connection.propagate_empty_data()

    # nodes -------------------------------------------------------------------

    def _add_node(self, node: Node) -> Node:
        node.geometry.port_layout = self.layout
        self.nodes[node.id] = node
        self._emit("node_created", node)
        return node

    def create_node(self, model: NodeDataModel) -> Node:
        """Add a node wrapping model."""
        return self._add_node(Node(model))

    def restore_node(self, state: dict[str, Any]) -> Node:
        """Recreate a node written by Node.save.

        Raises KeyError if the model name is not registered.
        """
        model_state = state.get("model")
        name = model_state.get("name", "") if isinstance(model_state, dict) else ""
        model = self.registry.create(name)
        node = Node(model)
        node.restore(state)
        node.state.resize(PortType.IN, model.n_ports(PortType.IN))
        node.state.resize(PortType.OUT, model.n_ports(PortType.OUT))
        return self._add_node(node)

    def remove_node(self, node: Node) -> None:
        """Remove a node together with every connection attached to it."""
        self._emit("node_deleted", node)
        for port_type in (PortType.IN, PortType.OUT):
            for entry in node.state.entries(port_type):
                for connection in list(entry.values()):
                    self.delete_connection(connection)
        self.nodes.pop(node.id, None)

    def node_data_dependent_order(self) -> list[NodeDataModel]:
        """Models ordered so that each comes after every model feeding its inputs.

        Raises ValueError if the connections form a cycle.
        """
        visited: set[uuid.UUID] = set()
        order: list[NodeDataModel] = []

        def inputs(node: Node):
            for index in range(node.model.n_ports(PortType.IN)):
                yield from node.state.connections(PortType.IN, index).values()

        for node in self.nodes.values():
            if not any(True for _ in inputs(node)):
                order.append(node.model)
                visited.add(node.id)

        def inputs_visited(node: Node) -> bool:
            for connection in inputs(node):
                source = connection.get_node(PortType.OUT)
                if source is not None and source.id not in visited:
                    return False
            return True

        while len(visited) < len(self.nodes):
            progressed = False
            for node in self.nodes.values():
                if node.id in visited:
                    continue
                if inputs_visited(node):
                    order.append(node.model)
                    visited.add(node.id)
                    progressed = True
            if not progressed:
                raise ValueError("the connections between nodes form a cycle")
        return order

    def get_node_position(self, node: Node) -> Point:
        return node.position

    def set_node_position(self, node: Node, position: Point) -> None:
        """Move a node and the connection ends attached to it."""
        node.position = position
        node.move_connections()

    def get_node_size(self, node: Node) -> tuple[int, int]:
        """The node's width and height."""
        return node.geometry.width, node.geometry.height

    def clear_scene(self) -> None:
        """Delete every connection, then every node."""
        while self.connections:
            self.delete_connection(next(iter(self.connections.values())))
        while self.nodes:
            self.remove_node(next(iter(self.nodes.values())))

    # persistence -------------------------------------------------------------

    def save_to_memory(self) -> bytes:
        """The whole scene as JSON."""
        connections = [state for state in (c.save() for c in self.connections.values())
                       if state]
        document = {
            "layout": self.layout.value,
            "nodes": [node.save() for node in self.nodes.values()],
            "connections": connections,
        }
        return json.dumps(document, indent=4, sort_keys=True).encode("utf-8") + b"\n"

    def load_from_memory(self, data: bytes | str) -> None:
        """Add the nodes and connections stored by save_to_memory."""
        try:
            document = json.loads(data)
        except (ValueError, TypeError):
            document = {}
        if not isinstance(document, dict):
            document = {}

        horizontal = document.get("layout") == PortLayout.HORIZONTAL.value
        self.set_layout(PortLayout.HORIZONTAL if horizontal else PortLayout.VERTICAL)

        nodes = document.get("nodes")
        for state in nodes if isinstance(nodes, list) else []:
            self.restore_node(state if isinstance(state, dict) else {})

        connections = document.get("connections")
        for state in connections if isinstance(connections, list) else []:
            self.restore_connection(state if isinstance(state, dict) else {})

    def save(self, path: str | Path) -> Optional[Path]:
        """Write the scene to path, adding '.flow' unless it ends in 'flow'.

        Returns the path written, or None for an empty path or a failed write.
        """
        name = str(path)
        if not name:
            return None
        if not name.lower().endswith("flow"):
            name += ".flow"
        target = Path(name)
        try:
            target.write_bytes(self.save_to_memory())
        except OSError:
            logger.warning("Couldn't write file %s", target)
            return None
        return target

    def load(self, path: str | Path) -> bool:
        """Clear the scene and read it from path; False if the file can't be read."""
        self.clear_scene()
        target = Path(path)
        if not target.is_file():
            return False
        try:
            data = target.read_bytes()
        except OSError:
            return False
        self.load_from_memory(data)
        return True

    def set_layout(self, layout: PortLayout) -> None:
        """Use layout for the scene and everything in it."""
        self.layout = layout
        for node in self.nodes.values():
            node.geometry.port_layout = layout
        for connection in self.connections.values():
            connection.geometry.port_layout = layout

    def locate_node_at(self, scene_point: Point) -> Optional[Node]:
        """The topmost node whose area covers the point, or None."""
        for node in reversed(list(self.nodes.values())):
            rect = node.geometry.bounding_rect()
            if rect.contains(scene_point - node.position):
                return node
        return None