from nodeflow.geometry import Point, PortLayout, PortType
from nodeflow.node_geometry import FontMetrics, NodeGeometry
from nodeflow.registry import NodeDataModel, NodeDataType, ValidationState

METRICS = FontMetrics(char_width=10, height=20)
SHORT = NodeDataType("a", "in")
LONG = NodeDataType("b", "longname")
OUT = NodeDataType("c", "result")


def _geometry(widget_size=None, inputs=(SHORT, LONG, SHORT)):
    model = NodeDataModel("M", list(inputs), [OUT], widget_size=widget_size)
    return model, NodeGeometry(model, METRICS)


def test_font_metrics_width_scales_with_length():
    assert METRICS.width("") == 0
    assert METRICS.width("abcd") == 2 * METRICS.width("ab")
    assert METRICS.bounding_rect("xy").height == METRICS.height


def test_port_width_is_widest_label():
    _, geom = _geometry()
    assert geom.port_width(PortType.IN) == METRICS.width(LONG.name)
    assert geom.port_width(PortType.OUT) == METRICS.width(OUT.name)
    assert geom.port_width(PortType.NONE) == 0


def test_recalculate_size_from_ports():
    _, geom = _geometry()
    geom.recalculate_size()
    assert geom.entry_height == METRICS.height
    assert geom.height == (METRICS.height + geom.spacing) * 3
    assert geom.width == geom.port_width(PortType.IN) + geom.port_width(PortType.OUT) + 2 * geom.spacing


def test_widget_enlarges_node():
    _, plain = _geometry()
    plain.recalculate_size()
    _, with_widget = _geometry(widget_size=(30, 500))
    with_widget.recalculate_size()
    assert with_widget.height == 500
    assert with_widget.width == plain.width + 30


def test_validation_message_adds_room():
    model, geom = _geometry()
    geom.recalculate_size()
    base_height = geom.height
    model.validation_state = ValidationState.ERROR
    model.validation_message = "something went badly wrong here"
    geom.recalculate_size()
    assert geom.width >= geom.validation_width()
    assert geom.height == base_height + geom.validation_height() + geom.spacing


def test_bounding_rect_covers_node():
    _, geom = _geometry()
    geom.recalculate_size()
    rect = geom.bounding_rect()
    assert rect.contains(Point(0, 0))
    assert rect.contains(Point(geom.width, geom.height))
    assert rect.left < 0 and rect.top < 0


def test_entry_bounding_rect_height():
    _, geom = _geometry()
    geom.recalculate_size()
    assert geom.entry_bounding_rect().height == METRICS.height


def test_horizontal_port_sides():
    _, geom = _geometry()
    geom.port_layout = PortLayout.HORIZONTAL
    geom.recalculate_size()
    assert geom.port_scene_position(0, PortType.OUT).x > geom.width
    assert geom.port_scene_position(0, PortType.IN).x < 0
    ys = [geom.port_scene_position(i, PortType.IN).y for i in range(3)]
    assert ys == sorted(ys) and len(set(ys)) == 3


def test_vertical_ports_spread_across_width():
    _, geom = _geometry()
    geom.recalculate_size()
    xs = [geom.port_scene_position(i, PortType.IN).x for i in range(3)]
    assert xs == sorted(xs) and len(set(xs)) == 3
    assert all(0 < x < geom.width for x in xs)
    assert geom.port_scene_position(0, PortType.OUT).y > geom.height
    assert geom.port_scene_position(0, PortType.IN).y < 0


def test_origin_shifts_position():
    _, geom = _geometry()
    geom.recalculate_size()
    origin = Point(100, 200)
    base = geom.port_scene_position(1, PortType.IN)
    assert geom.port_scene_position(1, PortType.IN, origin) == base + origin


def test_check_hit_scene_point():
    _, geom = _geometry()
    geom.port_layout = PortLayout.HORIZONTAL
    geom.recalculate_size()
    origin = Point(10, 10)
    for index in range(3):
        point = geom.port_scene_position(index, PortType.IN, origin)
        assert geom.check_hit_scene_point(PortType.IN, point, origin) == index
    far = Point(-10000, -10000)
    assert geom.check_hit_scene_point(PortType.IN, far, origin) is None
    near = geom.port_scene_position(0, PortType.IN)
    assert geom.check_hit_scene_point(PortType.NONE, near) is None


def test_resize_rect_in_bottom_right_corner():
    _, geom = _geometry()
    geom.recalculate_size()
    rect = geom.resize_rect()
    assert rect.contains(Point(geom.width, geom.height))
    assert not rect.contains(Point(0, 0))


def test_widget_position():
    _, geom = _geometry()
    geom.recalculate_size()
    assert geom.widget_position() == Point()
    _, with_widget = _geometry(widget_size=(30, 10))
    with_widget.recalculate_size()
    pos = with_widget.widget_position()
    assert pos.x == with_widget.spacing + with_widget.port_width(PortType.IN)
    assert pos.y == (with_widget.height - 10) / 2.0