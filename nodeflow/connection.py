"""A connection between an output port and an input port."""

from __future__ import annotations

import uuid
from typing import Any, Callable, Optional

from .geometry import ConnectionGeometry, PortType, opposite_port
from .node_state import ConnectionState
from .registry import NodeDataType
from .style import connection_style


class Connection:
    """Links an output port of one node to an input port of another.

    Either end may be missing while the connection is being drawn; the
    state then records which port is still required.
    """

    def __init__(self, node_in: Any = None, port_index_in: Optional[int] = None,
                 node_out: Any = None, port_index_out: Optional[int] = None,
                 converter: Optional[Callable[[Any], Any]] = None) -> None:
        self.id = uuid.uuid4()
        self.in_node: Any = None
        self.out_node: Any = None
        self.in_port_index: Optional[int] = None
        self.out_port_index: Optional[int] = None
        self.state = ConnectionState()
        self.geometry = ConnectionGeometry()
        self.style = connection_style()
        self.converter = converter
        self.updated_listeners: list[Callable[[Connection], None]] = []
        if node_in is not None:
            self.set_node_to_port(node_in, PortType.IN, port_index_in)
        if node_out is not None:
            self.set_node_to_port(node_out, PortType.OUT, port_index_out)

    def save(self) -> dict[str, Any]:
        """The connection's state; empty unless both ends are attached."""
        if self.in_node is None or self.out_node is None:
            return {}
        state: dict[str, Any] = {
            "in_id": str(self.in_node.id),
            "in_index": self.in_port_index,
            "out_id": str(self.out_node.id),
            "out_index": self.out_port_index,
        }
        if self.converter is not None:
            def type_json(port_type: PortType) -> dict[str, str]:
                data_type = self.data_type(port_type)
                return {"id": data_type.id, "name": data_type.name}

            state["converter"] = {"in": type_json(PortType.IN),
                                  "out": type_json(PortType.OUT)}
        return state

    @property
    def required_port(self) -> PortType:
        return self.state.required_port

    def set_required_port(self, port_type: PortType) -> None:
        """Detach the given end so that it needs a port again."""
        self.state.set_required_port(port_type)
        if port_type is PortType.OUT:
            self.out_node = None
            self.out_port_index = None
        elif port_type is PortType.IN:
            self.in_node = None
            self.in_port_index = None

    def get_port_index(self, port_type: PortType) -> Optional[int]:
        if port_type is PortType.IN:
            return self.in_port_index
        if port_type is PortType.OUT:
            return self.out_port_index
        return None

    def set_node_to_port(self, node: Any, port_type: PortType, port_index: int) -> None:
        """Attach one end to a node's port; no port is required afterwards."""
        if port_type is PortType.OUT:
            self.out_node = node
            self.out_port_index = port_index
        elif port_type is PortType.IN:
            self.in_node = node
            self.in_port_index = port_index
        else:
            raise ValueError("a connection end must be PortType.IN or PortType.OUT")
        self.state.set_no_required_port()
        for listener in list(self.updated_listeners):
            listener(self)

    def remove_from_nodes(self) -> None:
        """Remove this connection from the states of the nodes it joins."""
        if self.in_node is not None:
            self.in_node.state.erase_connection(PortType.IN, self.in_port_index, self.id)
        if self.out_node is not None:
            self.out_node.state.erase_connection(PortType.OUT, self.out_port_index, self.id)

    def get_node(self, port_type: PortType) -> Any:
        if port_type is PortType.IN:
            return self.in_node
        if port_type is PortType.OUT:
            return self.out_node
        return None

    def clear_node(self, port_type: PortType) -> None:
        if port_type is PortType.IN:
            self.in_node = None
            self.in_port_index = None
        else:
            self.out_node = None
            self.out_port_index = None

    def data_type(self, port_type: PortType) -> NodeDataType:
        """The data type at one end; with one end attached, the type there.

        Raises RuntimeError if no end is attached.
        """
        if self.in_node is not None and self.out_node is not None:
            node = self.in_node if port_type is PortType.IN else self.out_node
            return node.model.data_type(port_type, self.get_port_index(port_type))
        if self.in_node is not None:
            return self.in_node.model.data_type(PortType.IN, self.in_port_index)
        if self.out_node is not None:
            return self.out_node.model.data_type(PortType.OUT, self.out_port_index)
        raise RuntimeError("connection is attached to no node")

    def set_type_converter(self, converter: Optional[Callable[[Any], Any]]) -> None:
        self.converter = converter

    def propagate_data(self, data: Any) -> None:
        """Pass data to the input end, through the converter if there is one."""
        if self.in_node is not None:
            if self.converter is not None:
                data = self.converter(data)
            self.in_node.propagate_data(data, self.in_port_index)

    def propagate_empty_data(self) -> None:
        self.propagate_data(None)


def start_connection(port_type: PortType, node: Any, port_index: int) -> Connection:
    """A connection attached at one end, requiring a port at the other."""
    connection = Connection()
    connection.set_node_to_port(node, port_type, port_index)
    connection.set_required_port(opposite_port(port_type))
    return connection