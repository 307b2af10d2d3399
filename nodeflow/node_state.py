"""Per-node connection bookkeeping and the state of a connection being drawn."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from .geometry import PortType
from .registry import NodeDataType


class ReactionState(enum.Enum):
    """Whether a node is reacting to a connection dragged over it."""

    REACTING = "reacting"
    NOT_REACTING = "not_reacting"


@dataclass
class NodeState:
    """The connections attached to each port of a node, and its reaction state."""

    in_connections: list[dict[UUID, Any]] = field(default_factory=list)
    out_connections: list[dict[UUID, Any]] = field(default_factory=list)
    reaction: ReactionState = ReactionState.NOT_REACTING
    reacting_port_type: PortType = PortType.NONE
    reacting_data_type: NodeDataType = NodeDataType()
    resizing: bool = False

    @classmethod
    def for_model(cls, model: Any) -> NodeState:
        """A state with one empty entry per port of the model."""
        return cls([{} for _ in range(model.n_ports(PortType.IN))],
                   [{} for _ in range(model.n_ports(PortType.OUT))])

    def entries(self, port_type: PortType) -> list[dict[UUID, Any]]:
        """The per-port connection maps of one side."""
        return self.in_connections if port_type is PortType.IN else self.out_connections

    def resize(self, port_type: PortType, count: int) -> None:
        """Grow or shrink the number of ports on one side."""
        entries = self.entries(port_type)
        del entries[count:]
        entries.extend({} for _ in range(count - len(entries)))

    def connections(self, port_type: PortType, port_index: int) -> dict[UUID, Any]:
        """A copy of the connections on one port; empty for an unknown port."""
        entries = self.entries(port_type)
        if port_index is None or not 0 <= port_index < len(entries):
            return {}
        return dict(entries[port_index])

    def set_connection(self, port_type: PortType, port_index: int, connection: Any) -> None:
        """Attach a connection; raises IndexError for an unknown port."""
        entries = self.entries(port_type)
        if not 0 <= port_index < len(entries):
            raise IndexError(f"no {port_type.value} port with index {port_index}")
        entries[port_index][connection.id] = connection

    def erase_connection(self, port_type: PortType, port_index: int,
                         connection_id: UUID) -> None:
        self.entries(port_type)[port_index].pop(connection_id, None)

    def set_reaction(self, reaction: ReactionState,
                     reacting_port_type: PortType = PortType.NONE,
                     reacting_data_type: NodeDataType = NodeDataType()) -> None:
        self.reaction = reaction
        self.reacting_port_type = reacting_port_type
        self.reacting_data_type = reacting_data_type

    def is_reacting(self) -> bool:
        return self.reaction is ReactionState.REACTING


@dataclass
class ConnectionState:
    """Which end of a connection still needs a port, and the node under it."""

    required_port: PortType = PortType.NONE
    last_hovered_node: Optional[Any] = None

    def set_required_port(self, port_type: PortType) -> None:
        self.required_port = port_type

    def set_no_required_port(self) -> None:
        self.required_port = PortType.NONE

    def requires_port(self) -> bool:
        return self.required_port is not PortType.NONE

    def interact_with_node(self, node: Optional[Any]) -> None:
        """Remember the node under the loose end, or reset when there is none."""
        if node is not None:
            self.last_hovered_node = node
        else:
            self.reset_last_hovered_node()

    def reset_last_hovered_node(self) -> None:
        """Tell the last hovered node to stop reacting and forget it."""
        if self.last_hovered_node is not None:
            self.last_hovered_node.reset_reaction_to_connection()
        self.last_hovered_node = None