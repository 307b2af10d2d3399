"""Reading and writing behavior-tree node models as XML elements."""

from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Union

_NAME_ATTRIBUTES = ("ID", "name")


class PortDirection(enum.Enum):
    """Which way data flows through a tree node's connector."""

    INPUT = "input"
    OUTPUT = "output"
    INOUT = "inout"


_PORT_TAGS = {
    PortDirection.INPUT: "input_port",
    PortDirection.OUTPUT: "output_port",
    PortDirection.INOUT: "inout_port",
}


class NodeType(enum.Enum):
    """The kind of a behavior-tree node."""

    UNDEFINED = "Undefined"
    ACTION = "Action"
    CONDITION = "Condition"
    CONTROL = "Control"
    DECORATOR = "Decorator"
    SUBTREE = "SubTree"


_NODE_TYPES_BY_NAME = {
    "Action": NodeType.ACTION,
    "Condition": NodeType.CONDITION,
    "Control": NodeType.CONTROL,
    "Decorator": NodeType.DECORATOR,
    "SubTree": NodeType.SUBTREE,
    "SubTreePlus": NodeType.SUBTREE,
}


@dataclass
class PortModel:
    """Description of a single node-model connector."""

    type_name: str = ""
    direction: PortDirection = PortDirection.INOUT
    description: str = ""
    default_value: str = ""


@dataclass
class NodeModel:
    """A registered node: its kind, its ID and its ports by name."""

    type: NodeType = NodeType.UNDEFINED
    registration_id: str = ""
    ports: dict[str, PortModel] = field(default_factory=dict)


def node_type_from_string(text: str) -> NodeType:
    """The node type a tag name stands for; UNDEFINED for any other name."""
    return _NODE_TYPES_BY_NAME.get(text, NodeType.UNDEFINED)


def _as_element(root: Union[ET.Element, str, bytes]) -> ET.Element:
    if isinstance(root, (str, bytes)):
        return ET.fromstring(root)
    return root


def build_tree_node_model(element: Union[ET.Element, str, bytes]) -> NodeModel:
    """Build the model of the node described by element.

    Plain attributes other than ID and name become INOUT ports; child
    input_port, output_port and inout_port elements describe typed ports.
    A name already seen keeps its first description. Elements whose
    tag is not a node type give an empty model.
    """
    element = _as_element(element)
    tag_name = element.tag
    registration_id = element.get("ID", tag_name)

    node_type = node_type_from_string(tag_name)
    if node_type is NodeType.UNDEFINED:
        return NodeModel()

    ports: dict[str, PortModel] = {}
    for attr_name in element.attrib:
        if attr_name not in _NAME_ATTRIBUTES:
            ports.setdefault(attr_name, PortModel(direction=PortDirection.INOUT))

    for direction, tag in _PORT_TAGS.items():
        for port_element in element.findall(tag):
            port = PortModel(
                type_name=port_element.get("type", ""),
                direction=direction,
                description="".join(port_element.itertext()),
                default_value=port_element.get("default", ""),
            )
            name = port_element.get("name")
            if name is not None:
                ports.setdefault(name, port)

    return NodeModel(node_type, registration_id, ports)


def read_tree_nodes_model(root: Union[ET.Element, str, bytes]) -> dict[str, NodeModel]:
    """Collect the node models declared in a document.

    Models listed under TreeNodesModel come first; nodes found inside each
    BehaviorTree add the models not declared there.
    """
    root = _as_element(root)
    models: dict[str, NodeModel] = {}

    model_root = root.find("TreeNodesModel")
    if model_root is not None:
        for node in model_root:
            model = build_tree_node_model(node)
            models.setdefault(model.registration_id, model)

    def visit(node: ET.Element) -> None:
        model = build_tree_node_model(node)
        if (model.type is not NodeType.UNDEFINED
                and model.registration_id
                and model.registration_id not in models):
            models[model.registration_id] = model
        for child in node:
            visit(child)

    for tree_root in root.findall("BehaviorTree"):
        first_child = next(iter(tree_root), None)
        if first_child is not None:
            visit(first_child)

    return models


def write_port_model(port_name: str, port: PortModel) -> ET.Element:
    """The XML element declaring a single connector of a node model."""
    element = ET.Element(_PORT_TAGS[port.direction])
    element.set("name", port_name)
    if port.type_name:
        element.set("type", port.type_name)
    if port.default_value:
        element.set("default", port.default_value)
    if port.description:
        element.text = port.description
    return element