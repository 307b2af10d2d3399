"""Node data models and the registry that creates them by name."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .geometry import PortType
from .style import node_style

logger = logging.getLogger(__name__)

TypeConverter = Callable[[Any], Any]
ModelCreator = Callable[[], "NodeDataModel"]


@dataclass(frozen=True)
class NodeDataType:
    """The type carried by a port: a stable id and a display name."""

    id: str = ""
    name: str = ""


class ConnectionPolicy(enum.Enum):
    """How many connections an output port accepts."""

    ONE = "one"
    MANY = "many"


class ValidationState(enum.Enum):
    """Whether a model is in a usable state."""

    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


class NodeDataModel:
    """The data and ports behind a node.

    Subclasses override the data methods; the base model stores the data it
    is given and reports updates to its listeners.
    """

    def __init__(self, name: str, inputs=(), outputs=(), *,
                 out_policy: ConnectionPolicy = ConnectionPolicy.MANY,
                 widget_size: Optional[tuple[int, int]] = None,
                 resizable: bool = False) -> None:
        self.name = name
        self.inputs: list[NodeDataType] = list(inputs)
        self.outputs: list[NodeDataType] = list(outputs)
        self.out_policy = out_policy
        self.widget_size = widget_size
        self.resizable = resizable
        self.validation_state = ValidationState.VALID
        self.validation_message = ""
        self.style = node_style()
        self.in_data: dict[int, Any] = {}
        self._out_data: dict[int, Any] = {}
        self.data_updated_listeners: list[Callable[[int], None]] = []
        self.size_updated_listeners: list[Callable[[], None]] = []

    def _ports(self, port_type: PortType) -> list[NodeDataType]:
        if port_type is PortType.IN:
            return self.inputs
        if port_type is PortType.OUT:
            return self.outputs
        return []

    def n_ports(self, port_type: PortType) -> int:
        """Number of ports on the given side."""
        return len(self._ports(port_type))

    def data_type(self, port_type: PortType, port_index: int) -> NodeDataType:
        """Type of the port; raises IndexError for a port that does not exist."""
        ports = self._ports(port_type)
        if not 0 <= port_index < len(ports):
            raise IndexError(f"no {port_type.value} port with index {port_index}")
        return ports[port_index]

    def out_data(self, port_index: int) -> Any:
        """The data currently offered on an output port, or None."""
        return self._out_data.get(port_index)

    def set_in_data(self, data: Any, port_index: int) -> None:
        """Receive data on an input port; None means the input was cleared."""
        self.in_data[port_index] = data

    def set_out_data(self, port_index: int, data: Any) -> None:
        """Offer data on an output port and tell the listeners."""
        self._out_data[port_index] = data
        for listener in list(self.data_updated_listeners):
            listener(port_index)

    def resize_widget(self, width: int, height: int) -> None:
        """Change the embedded widget's size and tell the listeners."""
        self.widget_size = (width, height)
        for listener in list(self.size_updated_listeners):
            listener()

    def port_out_connection_policy(self, port_index: int) -> ConnectionPolicy:
        return self.out_policy

    def save(self) -> dict[str, Any]:
        """The model's persistent state."""
        return {"name": self.name}

    def restore(self, state: dict[str, Any]) -> None:
        """Restore state written by save; the base model keeps only its name,
        which the registry already used to create it."""
        if not isinstance(state, dict):
            raise TypeError("model state must be a mapping")


class DataModelRegistry:
    """Creates models by name and holds the converters between data types."""

    def __init__(self) -> None:
        self.registered_model_creators: dict[str, ModelCreator] = {}
        self.registered_models_category: dict[str, str] = {}
        self.categories: set[str] = set()
        self._type_converters: dict[tuple[NodeDataType, NodeDataType], TypeConverter] = {}

    def register_model(self, name: str, creator: ModelCreator,
                       category: str = "Nodes") -> None:
        self.registered_model_creators[name] = creator
        self.registered_models_category[name] = category
        self.categories.add(category)

    def register_type_converter(self, from_type: NodeDataType, to_type: NodeDataType,
                                converter: TypeConverter) -> None:
        self._type_converters[(from_type, to_type)] = converter

    def create(self, model_name: str) -> NodeDataModel:
        """Create a new model; raises KeyError if the name is not registered."""
        creator = self.registered_model_creators.get(model_name)
        if creator is None:
            candidates = ", ".join(self.registered_model_creators)
            logger.debug("unable to create [%s]; candidates are: %s", model_name, candidates)
            raise KeyError(f"no registered model with name {model_name!r}")
        return creator()

    def type_converter(self, from_type: NodeDataType,
                       to_type: NodeDataType) -> Optional[TypeConverter]:
        """The converter from one type to another, or None."""
        return self._type_converters.get((from_type, to_type))

    def models_in_category(self, category: str) -> set[str]:
        return {name for name, cat in self.registered_models_category.items()
                if cat == category}