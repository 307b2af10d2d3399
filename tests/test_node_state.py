import uuid

import pytest

from nodeflow.geometry import PortType
from nodeflow.node_state import ConnectionState, NodeState, ReactionState
from nodeflow.registry import NodeDataModel, NodeDataType

INT = NodeDataType("int", "Integer")


class _Conn:
    def __init__(self):
        self.id = uuid.uuid4()


class _HoverNode:
    def __init__(self):
        self.resets = 0

    def reset_reaction_to_connection(self):
        self.resets += 1


def _state():
    return NodeState.for_model(NodeDataModel("M", [INT, INT], [INT]))


def test_for_model_matches_port_counts():
    state = _state()
    assert len(state.entries(PortType.IN)) == 2
    assert len(state.entries(PortType.OUT)) == 1
    assert all(entry == {} for entry in state.entries(PortType.IN))


def test_set_and_read_connection():
    state = _state()
    conn = _Conn()
    state.set_connection(PortType.IN, 1, conn)
    assert state.connections(PortType.IN, 1) == {conn.id: conn}
    assert state.connections(PortType.IN, 0) == {}


def test_connections_for_unknown_port_is_empty():
    state = _state()
    assert state.connections(PortType.OUT, 5) == {}
    assert state.connections(PortType.OUT, -1) == {}


def test_connections_returns_copy():
    state = _state()
    conn = _Conn()
    state.set_connection(PortType.OUT, 0, conn)
    state.connections(PortType.OUT, 0).clear()
    assert conn.id in state.connections(PortType.OUT, 0)


def test_set_connection_out_of_range():
    with pytest.raises(IndexError):
        _state().set_connection(PortType.OUT, 3, _Conn())


def test_erase_connection():
    state = _state()
    conn = _Conn()
    state.set_connection(PortType.IN, 0, conn)
    state.erase_connection(PortType.IN, 0, conn.id)
    assert state.connections(PortType.IN, 0) == {}
    state.erase_connection(PortType.IN, 0, conn.id)
    assert state.connections(PortType.IN, 0) == {}


def test_resize():
    state = _state()
    state.resize(PortType.OUT, 3)
    assert len(state.entries(PortType.OUT)) == 3
    state.resize(PortType.IN, 1)
    assert len(state.entries(PortType.IN)) == 1


def test_reaction():
    state = _state()
    assert not state.is_reacting()
    state.set_reaction(ReactionState.REACTING, PortType.IN, INT)
    assert state.is_reacting()
    assert state.reacting_port_type is PortType.IN
    assert state.reacting_data_type == INT
    state.set_reaction(ReactionState.NOT_REACTING)
    assert not state.is_reacting()
    assert state.reacting_port_type is PortType.NONE
    assert state.reacting_data_type == NodeDataType()


def test_connection_state_required_port():
    cs = ConnectionState()
    assert not cs.requires_port()
    cs.set_required_port(PortType.IN)
    assert cs.requires_port()
    assert cs.required_port is PortType.IN
    cs.set_no_required_port()
    assert cs.required_port is PortType.NONE


def test_interact_with_node_and_reset():
    cs = ConnectionState()
    node = _HoverNode()
    cs.interact_with_node(node)
    assert cs.last_hovered_node is node
    cs.interact_with_node(None)
    assert cs.last_hovered_node is None
    assert node.resets == 1
    cs.reset_last_hovered_node()
    assert node.resets == 1