"""Colours and the style settings used to draw nodes, connections and views."""

import colorsys
import functools
import json
import logging
import random
import string
import zlib
from dataclasses import InitVar, dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit components."""

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def name(self) -> str:
        """The colour as '#rrggbb'."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


_NAMED_COLORS = dict(
    item.split(":")
    for item in """
    aliceblue:f0f8ff antiquewhite:faebd7 aqua:00ffff aquamarine:7fffd4 azure:f0ffff
    beige:f5f5dc bisque:ffe4c4 black:000000 blanchedalmond:ffebcd blue:0000ff
    blueviolet:8a2be2 brown:a52a2a burlywood:deb887 cadetblue:5f9ea0 chartreuse:7fff00
    chocolate:d2691e coral:ff7f50 cornflowerblue:6495ed cornsilk:fff8dc crimson:dc143c
    cyan:00ffff darkblue:00008b darkcyan:008b8b darkgoldenrod:b8860b darkgray:a9a9a9
    darkgreen:006400 darkgrey:a9a9a9 darkkhaki:bdb76b darkmagenta:8b008b
    darkolivegreen:556b2f darkorange:ff8c00 darkorchid:9932cc darkred:8b0000
    darksalmon:e9967a darkseagreen:8fbc8f darkslateblue:483d8b darkslategray:2f4f4f
    darkslategrey:2f4f4f darkturquoise:00ced1 darkviolet:9400d3 deeppink:ff1493
    deepskyblue:00bfff dimgray:696969 dimgrey:696969 dodgerblue:1e90ff firebrick:b22222
    floralwhite:fffaf0 forestgreen:228b22 fuchsia:ff00ff gainsboro:dcdcdc
    ghostwhite:f8f8ff gold:ffd700 goldenrod:daa520 gray:808080 grey:808080 green:008000
    greenyellow:adff2f honeydew:f0fff0 hotpink:ff69b4 indianred:cd5c5c indigo:4b0082
    ivory:fffff0 khaki:f0e68c lavender:e6e6fa lavenderblush:fff0f5 lawngreen:7cfc00
    lemonchiffon:fffacd lightblue:add8e6 lightcoral:f08080 lightcyan:e0ffff
    lightgoldenrodyellow:fafad2 lightgray:d3d3d3 lightgreen:90ee90 lightgrey:d3d3d3
    lightpink:ffb6c1 lightsalmon:ffa07a lightseagreen:20b2aa lightskyblue:87cefa
    lightslategray:778899 lightslategrey:778899 lightsteelblue:b0c4de
    lightyellow:ffffe0 lime:00ff00 limegreen:32cd32 linen:faf0e6 magenta:ff00ff
    maroon:800000 mediumaquamarine:66cdaa mediumblue:0000cd mediumorchid:ba55d3
    mediumpurple:9370db mediumseagreen:3cb371 mediumslateblue:7b68ee
    mediumspringgreen:00fa9a mediumturquoise:48d1cc mediumvioletred:c71585
    midnightblue:191970 mintcream:f5fffa mistyrose:ffe4e1 moccasin:ffe4b5
    navajowhite:ffdead navy:000080 oldlace:fdf5e6 olive:808000 olivedrab:6b8e23
    orange:ffa500 orangered:ff4500 orchid:da70d6 palegoldenrod:eee8aa palegreen:98fb98
    paleturquoise:afeeee palevioletred:db7093 papayawhip:ffefd5 peachpuff:ffdab9
    peru:cd853f pink:ffc0cb plum:dda0dd powderblue:b0e0e6 purple:800080 red:ff0000
    rosybrown:bc8f8f royalblue:4169e1 saddlebrown:8b4513 salmon:fa8072
    sandybrown:f4a460 seagreen:2e8b57 seashell:fff5ee sienna:a0522d silver:c0c0c0
    skyblue:87ceeb slateblue:6a5acd slategray:708090 slategrey:708090 snow:fffafa
    springgreen:00ff7f steelblue:4682b4 tan:d2b48c teal:008080 thistle:d8bfd8
    tomato:ff6347 turquoise:40e0d0 violet:ee82ee wheat:f5deb3 white:ffffff
    whitesmoke:f5f5f5 yellow:ffff00 yellowgreen:9acd32
    """.split()
)


def _parse_hex(digits: str) -> Optional[Color]:
    if not digits or any(ch not in string.hexdigits for ch in digits):
        return None
    if len(digits) == 3:
        r, g, b = (int(ch, 16) * 17 for ch in digits)
        return Color(r, g, b)
    if len(digits) == 6:
        return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    if len(digits) == 8:
        a, r, g, b = (int(digits[i:i + 2], 16) for i in range(0, 8, 2))
        return Color(r, g, b, a)
    if len(digits) == 9:
        r, g, b = (int(digits[i:i + 3], 16) >> 4 for i in range(0, 9, 3))
        return Color(r, g, b)
    if len(digits) == 12:
        r, g, b = (int(digits[i:i + 4], 16) >> 8 for i in range(0, 12, 4))
        return Color(r, g, b)
    return None


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _to_double(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def parse_color(value: Any) -> Optional[Color]:
    """Read a colour given as an [r, g, b] list, '#hex' text or a colour name.

    Returns None for text that names no colour or components out of range.
    """
    if isinstance(value, list):
        if len(value) < 3:
            raise ValueError("a colour array needs at least three components")
        r, g, b = (_to_int(v) for v in value[:3])
        if not all(0 <= c <= 255 for c in (r, g, b)):
            return None
        return Color(r, g, b)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.startswith("#"):
        return _parse_hex(text[1:])
    key = text.lower().replace(" ", "")
    if key == "transparent":
        return Color(0, 0, 0, 0)
    hex_value = _NAMED_COLORS.get(key)
    return None if hex_value is None else _parse_hex(hex_value)


def color_from_hsl(hue: int, saturation: int, lightness: int) -> Color:
    """Build a colour from hue (degrees, -1 for none) and 0-255 saturation and lightness."""
    if hue < -1 or not 0 <= saturation <= 255 or not 0 <= lightness <= 255:
        raise ValueError(f"HSL parameters out of range: {hue}, {saturation}, {lightness}")
    if hue == -1:
        hue, saturation = 0, 0
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 255, saturation / 255)
    return Color(*(round(c * 255) for c in (r, g, b)))


_DEFAULT_STYLE: dict[str, Any] = {
    "FlowViewStyle": {
        "BackgroundColor": [53, 53, 53],
        "FineGridColor": [60, 60, 60],
        "CoarseGridColor": [25, 25, 25],
    },
    "NodeStyle": {
        "NormalBoundaryColor": [255, 255, 255],
        "SelectedBoundaryColor": [255, 165, 0],
        "GradientColor0": "gray",
        "GradientColor1": [80, 80, 80],
        "GradientColor2": [64, 64, 64],
        "GradientColor3": [58, 58, 58],
        "ShadowColor": [20, 20, 20],
        "FontColor": "white",
        "FontColorFaded": "gray",
        "ConnectionPointColor": [169, 169, 169],
        "FilledConnectionPointColor": "cyan",
        "ErrorColor": "red",
        "WarningColor": [128, 128, 0],
        "PenWidth": 1.0,
        "HoveredPenWidth": 1.5,
        "ConnectionPointDiameter": 8.0,
        "Opacity": 0.8,
    },
    "ConnectionStyle": {
        "ConstructionColor": "gray",
        "NormalColor": "darkcyan",
        "SelectedColor": [100, 100, 100],
        "SelectedHaloColor": "orange",
        "HoveredColor": "lightcyan",
        "LineWidth": 3.0,
        "ConstructionLineWidth": 2.0,
        "PointDiameter": 10.0,
        "UseDataDefinedColors": False,
    },
}


def _parse_document(text: Any) -> Any:
    try:
        return json.loads(text)
    except (ValueError, TypeError):
        return {}


def _section(document: Any, name: str) -> dict:
    if not isinstance(document, dict):
        return {}
    section = document.get(name)
    return section if isinstance(section, dict) else {}


def _apply_section(target: Any, section: dict, *, colors: dict, floats: dict = None,
                   bools: dict = None, keep_missing: bool) -> None:
    """Copy values from a style section onto target's attributes.

    With keep_missing, absent or null keys leave the attribute untouched;
    otherwise they reset it (no colour, 0.0).
    """
    def readings(mapping):
        for key, attr in (mapping or {}).items():
            value = section.get(key)
            if keep_missing and value is None:
                continue
            yield attr, value

    for attr, value in readings(colors):
        setattr(target, attr, parse_color(value))
    for attr, value in readings(floats):
        setattr(target, attr, _to_double(value))
    for attr, value in readings(bools):
        setattr(target, attr, value if isinstance(value, bool) else False)


def _read_file(path: Any) -> Optional[bytes]:
    try:
        return Path(path).read_bytes()
    except OSError:
        logger.warning("Couldn't open file %s", path)
        return None


_CONNECTION_COLORS = {
    "ConstructionColor": "construction_color",
    "NormalColor": "normal_color",
    "SelectedColor": "selected_color",
    "SelectedHaloColor": "selected_halo_color",
    "HoveredColor": "hovered_color",
}
_CONNECTION_FLOATS = {
    "LineWidth": "line_width",
    "ConstructionLineWidth": "construction_line_width",
    "PointDiameter": "point_diameter",
}
_CONNECTION_BOOLS = {"UseDataDefinedColors": "use_data_defined_colors"}

_NODE_COLORS = {
    "NormalBoundaryColor": "normal_boundary_color",
    "SelectedBoundaryColor": "selected_boundary_color",
    "GradientColor0": "gradient_color0",
    "GradientColor1": "gradient_color1",
    "GradientColor2": "gradient_color2",
    "GradientColor3": "gradient_color3",
    "ShadowColor": "shadow_color",
    "FontColor": "font_color",
    "FontColorFaded": "font_color_faded",
    "ConnectionPointColor": "connection_point_color",
    "FilledConnectionPointColor": "filled_connection_point_color",
    "WarningColor": "warning_color",
    "ErrorColor": "error_color",
}
_NODE_FLOATS = {
    "PenWidth": "pen_width",
    "HoveredPenWidth": "hovered_pen_width",
    "ConnectionPointDiameter": "connection_point_diameter",
    "Opacity": "opacity",
}

_FLOW_VIEW_COLORS = {
    "BackgroundColor": "background_color",
    "FineGridColor": "fine_grid_color",
    "CoarseGridColor": "coarse_grid_color",
}

_HUE_RANGE = 0xFF


@dataclass
class ConnectionStyle:
    """How connections are drawn.

    Starts from the default style; json_text, if given, overrides the keys it sets.
    """

    json_text: InitVar[Optional[str]] = None
    construction_color: Optional[Color] = field(init=False, default=None)
    normal_color: Optional[Color] = field(init=False, default=None)
    selected_color: Optional[Color] = field(init=False, default=None)
    selected_halo_color: Optional[Color] = field(init=False, default=None)
    hovered_color: Optional[Color] = field(init=False, default=None)
    line_width: float = field(init=False, default=0.0)
    construction_line_width: float = field(init=False, default=0.0)
    point_diameter: float = field(init=False, default=0.0)
    use_data_defined_colors: bool = field(init=False, default=False)

    def __post_init__(self, json_text: Optional[str]) -> None:
        self._load_document(_DEFAULT_STYLE)
        if json_text is not None:
            self.load_json_text(json_text)

    def _load_document(self, document: Any) -> None:
        _apply_section(self, _section(document, "ConnectionStyle"),
                       colors=_CONNECTION_COLORS, floats=_CONNECTION_FLOATS,
                       bools=_CONNECTION_BOOLS, keep_missing=True)

    def load_json_text(self, json_text: str) -> None:
        self._load_document(_parse_document(json_text))

    def load_json_file(self, path: Any) -> None:
        data = _read_file(path)
        if data is not None:
            self._load_document(_parse_document(data))

    def normal_color_for(self, type_id: str) -> Color:
        """A colour derived from a data type id, stable for the same id."""
        seed = zlib.crc32(type_id.encode("utf-8"))
        hue = random.Random(seed).getrandbits(31) % _HUE_RANGE
        saturation = 120 + seed % 129
        return color_from_hsl(hue, saturation, 160)


@dataclass
class NodeStyle:
    """How nodes are drawn.

    Without json_text the default style is used; with it, only that text is
    read, so keys it lacks are left without a colour or at 0.0.
    """

    json_text: InitVar[Optional[str]] = None
    normal_boundary_color: Optional[Color] = field(init=False, default=None)
    selected_boundary_color: Optional[Color] = field(init=False, default=None)
    gradient_color0: Optional[Color] = field(init=False, default=None)
    gradient_color1: Optional[Color] = field(init=False, default=None)
    gradient_color2: Optional[Color] = field(init=False, default=None)
    gradient_color3: Optional[Color] = field(init=False, default=None)
    shadow_color: Optional[Color] = field(init=False, default=None)
    font_color: Optional[Color] = field(init=False, default=None)
    font_color_faded: Optional[Color] = field(init=False, default=None)
    connection_point_color: Optional[Color] = field(init=False, default=None)
    filled_connection_point_color: Optional[Color] = field(init=False, default=None)
    warning_color: Optional[Color] = field(init=False, default=None)
    error_color: Optional[Color] = field(init=False, default=None)
    pen_width: float = field(init=False, default=0.0)
    hovered_pen_width: float = field(init=False, default=0.0)
    connection_point_diameter: float = field(init=False, default=0.0)
    opacity: float = field(init=False, default=0.0)

    def __post_init__(self, json_text: Optional[str]) -> None:
        if json_text is None:
            self._load_document(_DEFAULT_STYLE)
        else:
            self.load_json_text(json_text)

    def _load_document(self, document: Any) -> None:
        _apply_section(self, _section(document, "NodeStyle"),
                       colors=_NODE_COLORS, floats=_NODE_FLOATS, keep_missing=False)

    def load_json_text(self, json_text: str) -> None:
        self._load_document(_parse_document(json_text))

    def load_json_file(self, path: Any) -> None:
        data = _read_file(path)
        if data is not None:
            self._load_document(_parse_document(data))


@dataclass
class FlowViewStyle:
    """Background and grid colours of the view.

    Without json_text the default style is used; with it, only that text is read.
    """

    json_text: InitVar[Optional[str]] = None
    background_color: Optional[Color] = field(init=False, default=None)
    fine_grid_color: Optional[Color] = field(init=False, default=None)
    coarse_grid_color: Optional[Color] = field(init=False, default=None)

    def __post_init__(self, json_text: Optional[str]) -> None:
        if json_text is None:
            self._load_document(_DEFAULT_STYLE)
        else:
            self.load_json_text(json_text)

    def _load_document(self, document: Any) -> None:
        _apply_section(self, _section(document, "FlowViewStyle"),
                       colors=_FLOW_VIEW_COLORS, keep_missing=False)

    def load_json_text(self, json_text: str) -> None:
        self._load_document(_parse_document(json_text))

    def load_json_file(self, path: Any) -> None:
        data = _read_file(path)
        if data is not None:
            self._load_document(_parse_document(data))


@dataclass
class _StyleCollection:
    node: NodeStyle = field(default_factory=NodeStyle)
    connection: ConnectionStyle = field(default_factory=ConnectionStyle)
    flow_view: FlowViewStyle = field(default_factory=FlowViewStyle)


@functools.cache
def _collection() -> _StyleCollection:
    return _StyleCollection()


def node_style() -> NodeStyle:
    """The node style currently in use."""
    return _collection().node


def connection_style() -> ConnectionStyle:
    """The connection style currently in use."""
    return _collection().connection


def flow_view_style() -> FlowViewStyle:
    """The view style currently in use."""
    return _collection().flow_view


def set_node_style(style: NodeStyle) -> None:
    _collection().node = style


def set_connection_style(style: ConnectionStyle) -> None:
    _collection().connection = style


def set_flow_view_style(style: FlowViewStyle) -> None:
    _collection().flow_view = style