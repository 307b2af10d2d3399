# nodeflow

This package models a node-based dataflow editor without a GUI. It provides the
data structures and the connection rules that such an editor is built on.

## Modules

- `nodeflow.geometry` holds `Point`, `Rect`, `PortType`, `PortLayout`,
  `opposite_port` and `ConnectionGeometry`.
  - `ConnectionGeometry` gives the two control points of a connection curve
    through `points_c1c2()`.
  - It gives the curve's bounding box through `bounding_rect()`.
- `nodeflow.style` holds `NodeStyle`, `ConnectionStyle`, `FlowViewStyle` and `Color`.
  - Each style can be built from JSON text, or loaded with `load_json_text` /
    `load_json_file`.
  - Colours can be `[r, g, b]` arrays, `#hex` strings or colour names. They are
    read by `parse_color`.
  - The styles in use for the whole process are read with `node_style()`,
    `connection_style()` and `flow_view_style()`.
  - They are replaced with `set_node_style`, `set_connection_style` and
    `set_flow_view_style`.
  - `ConnectionStyle.normal_color_for(type_id)` returns a colour derived from a
    data type id. The same id always gives the same colour.
- `nodeflow.properties` holds `Properties`, a store of named values.
  - `put(name, value)` stores a value.
  - `get(name, kind)` converts the value to `kind`. It raises `KeyError` if the
    name is missing and `TypeError` if the value cannot be converted.
- `nodeflow.registry` holds `NodeDataType`, `NodeDataModel`, `ConnectionPolicy`,
  `ValidationState` and `DataModelRegistry`.
  - The registry creates models by name.
  - It also holds converters between data types.
- `nodeflow.node_state` holds `NodeState`, which keeps the connections on each
  port. It also holds `ConnectionState`, which records the port a loose
  connection end still needs.
- `nodeflow.node_geometry` holds `NodeGeometry`, which gives node size, port
  positions and port hit testing. It also holds `FontMetrics`, a fixed-pitch
  text measurer.
- `nodeflow.connection` holds `Connection` and `start_connection`.
  - A connection carries data from an output port to an input port.
  - If it has a converter, the data passes through it on the way.
- `nodeflow.node` holds `Node`, which wraps a model together with its state,
  geometry and position.
- `nodeflow.interaction` holds `NodeConnectionInteraction`. It connects a loose
  connection end to a node only when all of these hold:
  - the connection still requires a port;
  - the connection does not start at the same node;
  - the loose end lies over a port, and that port is vacant;
  - the data types match, or a converter is registered.

  An output port whose model uses `ConnectionPolicy.MANY` accepts more than one
  connection.
- `nodeflow.scene` holds `FlowScene`. It does the following:
  - creates, connects and removes nodes;
  - sends data along connections;
  - lists models in dependency order with `node_data_dependent_order()`, which
    raises `ValueError` on a cycle;
  - finds the node at a point with `locate_node_at`;
  - reports events through `on(event, callback)`. The events are
    `node_created`, `node_deleted`, `connection_created` and
    `connection_deleted`;
  - saves and loads the whole graph as JSON with `save_to_memory` /
    `load_from_memory`, or with `save(path)` / `load(path)`. `save` adds
    `.flow` to a path that does not end in `flow`.
- `nodeflow.xml_utilities` reads and writes behavior-tree node models as XML.
  - `build_tree_node_model` reads one element.
  - `read_tree_nodes_model` reads the models out of the `<TreeNodesModel>` and
    `<BehaviorTree>` sections of a document.
  - `write_port_model` writes an `input_port`, `output_port` or `inout_port`
    element.
  - `node_type_from_string` maps a tag name to a `NodeType`.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from nodeflow.registry import DataModelRegistry, NodeDataModel, NodeDataType
from nodeflow.scene import FlowScene

NUMBER = NodeDataType("number", "Number")


class Source(NodeDataModel):
    def __init__(self):
        super().__init__("Source", outputs=[NUMBER])


class Sink(NodeDataModel):
    def __init__(self):
        super().__init__("Sink", inputs=[NUMBER])


registry = DataModelRegistry()
registry.register_model("Source", Source, "Inputs")
registry.register_model("Sink", Sink, "Outputs")

scene = FlowScene(registry)
source = scene.create_node(registry.create("Source"))
sink = scene.create_node(registry.create("Sink"))
scene.connect(sink, 0, source, 0)

source.model.set_out_data(0, 42)
assert sink.model.in_data[0] == 42

saved = scene.save_to_memory()
restored = FlowScene(registry)
restored.load_from_memory(saved)
assert len(restored.nodes) == 2 and len(restored.connections) == 1
```

## What it does not do

- It draws nothing and opens no window.
- It has no command-line tool.
- Node positions and sizes are plain numbers, and text is measured with a
  fixed-pitch `FontMetrics`, not with real fonts.
- On the XML side it reads node models and writes port elements only. It does
  not write whole behavior trees and does not validate documents against
  registered nodes.