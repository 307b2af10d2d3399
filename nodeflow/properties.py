"""A named bag of values with typed lookup."""

from dataclasses import dataclass, field
from typing import Any


def _convert(value: Any, kind: type) -> Any:
    if isinstance(value, kind):
        return value
    if kind is bool and isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"cannot convert {value!r} to {kind.__name__}") from exc


@dataclass
class Properties:
    """Values stored by name."""

    values: dict[str, Any] = field(default_factory=dict)

    def put(self, name: str, value: Any) -> None:
        """Store a value, replacing any earlier value of that name."""
        self.values[name] = value

    def get(self, name: str, kind: type) -> Any:
        """Return the value of that name converted to kind.

        Raises KeyError if nothing is stored under the name and TypeError
        if the value cannot be converted.
        """
        if name not in self.values:
            raise KeyError(name)
        return _convert(self.values[name], kind)