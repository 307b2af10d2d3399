from nodeflow.connection import start_connection
from nodeflow.geometry import Point, PortType
from nodeflow.interaction import NodeConnectionInteraction
from nodeflow.node import Node
from nodeflow.registry import ConnectionPolicy, DataModelRegistry, NodeDataModel, NodeDataType

INT = NodeDataType("int", "integer")
FLOAT = NodeDataType("float", "real")


class _Scene:
    def __init__(self):
        self.registry = DataModelRegistry()


def _dragging_from(out_node):
    conn = start_connection(PortType.OUT, out_node, 0)
    out_node.state.set_connection(PortType.OUT, 0, conn)
    return conn


def _aim_at(conn, node, port_type=PortType.IN, index=0):
    target = node.geometry.port_scene_position(index, port_type, node.position)
    conn.geometry.set_end_point(port_type, target)


def _nodes(in_type=INT):
    source = Node(NodeDataModel("Source", outputs=[INT]))
    sink = Node(NodeDataModel("Sink", inputs=[in_type]))
    sink.position = Point(200.0, 150.0)
    return source, sink


def test_try_connect_attaches_and_sends_data():
    source, sink = _nodes()
    source.model.set_out_data(0, 5)
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    interaction = NodeConnectionInteraction(sink, conn, _Scene())
    assert interaction.try_connect() is True
    assert conn.in_node is sink
    assert conn.get_port_index(PortType.IN) == 0
    assert not conn.state.requires_port()
    assert conn.id in sink.state.connections(PortType.IN, 0)
    assert sink.model.in_data[0] == 5


def test_can_connect_returns_port_without_converter():
    source, sink = _nodes()
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    assert NodeConnectionInteraction(sink, conn, _Scene()).can_connect() == (0, None)


def test_cannot_connect_node_to_itself():
    node = Node(NodeDataModel("Both", inputs=[INT], outputs=[INT]))
    conn = _dragging_from(node)
    _aim_at(conn, node)
    interaction = NodeConnectionInteraction(node, conn, _Scene())
    assert interaction.can_connect() is None
    assert interaction.try_connect() is False


def test_cannot_connect_when_end_is_far_from_ports():
    source, sink = _nodes()
    conn = _dragging_from(source)
    conn.geometry.set_end_point(PortType.IN, Point(-5000.0, -5000.0))
    assert NodeConnectionInteraction(sink, conn, _Scene()).try_connect() is False
    assert conn.in_node is None
    assert conn.state.requires_port()


def test_cannot_connect_without_required_port():
    source, sink = _nodes()
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    conn.state.set_no_required_port()
    assert NodeConnectionInteraction(sink, conn, _Scene()).can_connect() is None


def test_type_mismatch_without_converter_fails():
    source, sink = _nodes(in_type=FLOAT)
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    assert NodeConnectionInteraction(sink, conn, _Scene()).can_connect() is None


def test_type_mismatch_uses_registered_converter():
    source, sink = _nodes(in_type=FLOAT)
    scene = _Scene()
    scene.registry.register_type_converter(INT, FLOAT, float)
    source.model.set_out_data(0, 3)
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    interaction = NodeConnectionInteraction(sink, conn, scene)
    assert interaction.can_connect() == (0, float)
    assert interaction.try_connect() is True
    assert conn.converter is float
    value = sink.model.in_data[0]
    assert value == 3 and isinstance(value, float)


def test_occupied_input_rejects_second_connection():
    source, sink = _nodes()
    scene = _Scene()
    first = _dragging_from(source)
    _aim_at(first, sink)
    assert NodeConnectionInteraction(sink, first, scene).try_connect() is True

    other = Node(NodeDataModel("Other", outputs=[INT]))
    second = _dragging_from(other)
    _aim_at(second, sink)
    assert NodeConnectionInteraction(sink, second, scene).can_connect() is None


def _reverse_drag(source, sink):
    conn = start_connection(PortType.IN, sink, 0)
    sink.state.set_connection(PortType.IN, 0, conn)
    _aim_at(conn, source, PortType.OUT)
    return conn


def test_occupied_output_accepts_more_with_many_policy():
    source, sink = _nodes()
    scene = _Scene()
    first = _dragging_from(source)
    _aim_at(first, sink)
    NodeConnectionInteraction(sink, first, scene).try_connect()

    other_sink = Node(NodeDataModel("Sink2", inputs=[INT]))
    second = _reverse_drag(source, other_sink)
    assert NodeConnectionInteraction(source, second, scene).can_connect() == (0, None)


def test_occupied_output_rejects_with_one_policy():
    source = Node(NodeDataModel("Source", outputs=[INT], out_policy=ConnectionPolicy.ONE))
    sink = Node(NodeDataModel("Sink", inputs=[INT]))
    sink.position = Point(200.0, 150.0)
    scene = _Scene()
    first = _dragging_from(source)
    _aim_at(first, sink)
    NodeConnectionInteraction(sink, first, scene).try_connect()

    other_sink = Node(NodeDataModel("Sink2", inputs=[INT]))
    second = _reverse_drag(source, other_sink)
    assert NodeConnectionInteraction(source, second, scene).can_connect() is None


def test_disconnect_frees_port_and_clears_data():
    source, sink = _nodes()
    scene = _Scene()
    source.model.set_out_data(0, 9)
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    interaction = NodeConnectionInteraction(sink, conn, scene)
    interaction.try_connect()
    assert sink.model.in_data[0] == 9

    assert interaction.disconnect(PortType.IN) is True
    assert sink.state.connections(PortType.IN, 0) == {}
    assert sink.model.in_data[0] is None
    assert conn.in_node is None
    assert conn.required_port is PortType.IN
    assert conn.out_node is source


def test_reconnect_after_disconnect():
    source, sink = _nodes()
    scene = _Scene()
    conn = _dragging_from(source)
    _aim_at(conn, sink)
    interaction = NodeConnectionInteraction(sink, conn, scene)
    interaction.try_connect()
    interaction.disconnect(PortType.IN)
    _aim_at(conn, sink)
    assert interaction.try_connect() is True
    assert conn.in_node is sink