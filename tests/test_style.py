import colorsys

import pytest

from nodeflow.style import (
    Color,
    ConnectionStyle,
    FlowViewStyle,
    NodeStyle,
    color_from_hsl,
    connection_style,
    flow_view_style,
    node_style,
    parse_color,
    set_connection_style,
    set_flow_view_style,
    set_node_style,
)


@pytest.fixture
def restore_styles():
    saved = (node_style(), connection_style(), flow_view_style())
    yield
    set_node_style(saved[0])
    set_connection_style(saved[1])
    set_flow_view_style(saved[2])


def test_parse_hex_color():
    assert parse_color("#ff8000") == Color(255, 128, 0)
    assert parse_color("#abc") == parse_color("#aabbcc")


def test_parse_array_color():
    assert parse_color([1, 2, 3]) == Color(1, 2, 3)
    assert parse_color([300, 0, 0]) is None
    with pytest.raises(ValueError):
        parse_color([1, 2])


def test_parse_named_colors():
    assert parse_color("white") == Color(255, 255, 255)
    assert parse_color("White") == parse_color("white")
    assert parse_color("transparent").a == 0
    assert parse_color("nonsense") is None
    assert parse_color("") is None
    assert parse_color(None) is None


def test_color_name_round_trip():
    for color in (Color(1, 2, 3), Color(255, 0, 128), Color(0, 0, 0)):
        assert parse_color(color.name) == color


def test_hsl_without_saturation_is_gray():
    color = color_from_hsl(200, 0, 128)
    assert color.r == color.g == color.b


def test_hsl_hue_wraps_and_validates():
    assert color_from_hsl(360, 200, 100) == color_from_hsl(0, 200, 100)
    with pytest.raises(ValueError):
        color_from_hsl(-2, 10, 10)
    with pytest.raises(ValueError):
        color_from_hsl(10, 256, 10)


def test_connection_style_override_keeps_other_defaults():
    default = ConnectionStyle()
    style = ConnectionStyle('{"ConnectionStyle": {"LineWidth": 7, "NormalColor": [1, 2, 3]}}')
    assert style.line_width == 7.0
    assert style.normal_color == Color(1, 2, 3)
    assert style.point_diameter == default.point_diameter
    assert style.hovered_color == default.hovered_color


def test_connection_style_skips_null_and_bad_json():
    default = ConnectionStyle()
    assert ConnectionStyle('{"ConnectionStyle": {"LineWidth": null}}') == default
    assert ConnectionStyle("not json at all") == default


def test_connection_style_bool():
    style = ConnectionStyle('{"ConnectionStyle": {"UseDataDefinedColors": true}}')
    assert style.use_data_defined_colors is True
    style.load_json_text('{"ConnectionStyle": {"UseDataDefinedColors": "yes"}}')
    assert style.use_data_defined_colors is False


def test_node_style_from_text_resets_missing_keys():
    style = NodeStyle('{"NodeStyle": {"FontColor": [10, 20, 30], "Opacity": 0.5}}')
    assert style.font_color == Color(10, 20, 30)
    assert style.opacity == 0.5
    assert style.error_color is None
    assert style.pen_width == 0.0


def test_node_style_default_differs_from_empty():
    assert NodeStyle() != NodeStyle("{}")
    assert NodeStyle("{}").shadow_color is None


def test_flow_view_style_text():
    style = FlowViewStyle('{"FlowViewStyle": {"BackgroundColor": "#102030"}}')
    assert style.background_color == parse_color("#102030")
    assert style.fine_grid_color is None


def test_load_json_file(tmp_path):
    path = tmp_path / "style.json"
    path.write_text('{"ConnectionStyle": {"PointDiameter": 4.5}}', encoding="utf-8")
    style = ConnectionStyle()
    style.load_json_file(path)
    assert style.point_diameter == 4.5


def test_load_missing_file_leaves_style_unchanged(tmp_path):
    style = NodeStyle()
    style.load_json_file(tmp_path / "absent.json")
    assert style == NodeStyle()


def test_normal_color_for_is_stable_with_fixed_lightness():
    style = ConnectionStyle()
    first = style.normal_color_for("int")
    assert first == ConnectionStyle().normal_color_for("int")
    _, lightness, _ = colorsys.rgb_to_hls(first.r / 255, first.g / 255, first.b / 255)
    assert lightness * 255 == pytest.approx(160, abs=1.5)


def test_style_collection_setters(restore_styles):
    custom_node = NodeStyle('{"NodeStyle": {"Opacity": 0.25}}')
    custom_conn = ConnectionStyle('{"ConnectionStyle": {"LineWidth": 9}}')
    custom_view = FlowViewStyle("{}")
    set_node_style(custom_node)
    set_connection_style(custom_conn)
    set_flow_view_style(custom_view)
    assert node_style() is custom_node
    assert connection_style().line_width == 9.0
    assert flow_view_style() is custom_view