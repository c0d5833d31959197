"""BaseTool ABC — shared wrapper contract for the loader, merger and packer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import ValidationError


@dataclass
class ToolParameter:
    """Declarative parameter definition, checked by ``BaseTool.validate``."""

    name: str
    default: Any = None
    choices: list[Any] | None = None
    min_value: float | None = None
    max_value: float | None = None
    help: str = ""


class BaseTool(ABC):
    """Template Method base for every tool.

    A tool wraps one library operation so that it can be driven from a
    parameter dictionary and chained: the result of one tool is passed as
    ``input_data`` to the next (Container → Sprite → packed atlas).
    """

    # ── metadata (override in subclass) ────────────────────────
    name: str
    display_name: str
    description: str
    version: str = "0.1.0"

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialise the tool with an optional event bus.

        Args:
            event_bus: Event bus for progress and completion events.
                       A private bus is created if none is provided.
        """
        self.event_bus = event_bus or EventBus()

    # ── parameter schema ───────────────────────────────────────
    @abstractmethod
    def define_parameters(self) -> list[ToolParameter]:
        """Return the list of parameters this tool accepts."""
        ...

    # ── I/O port declarations ──────────────────────────────────
    @abstractmethod
    def input_types(self) -> list[type]:
        """Return data types this tool can receive (empty list = entry point)."""
        ...

    @abstractmethod
    def output_types(self) -> list[type]:
        """Return data types this tool produces."""
        ...

    # ── lifecycle (Template Method skeleton) ───────────────────
    def run(self, params: dict[str, Any], input_data: Any = None) -> Any:
        """Execute the tool — public entry point, do NOT override.

        Parameters missing from *params* take their declared ``default``.

        Args:
            params: Parameter values keyed by parameter name.
            input_data: Optional result of a preceding tool.

        Returns:
            The result produced by the tool's core logic.
        """
        resolved = {p.name: p.default for p in self.define_parameters() if p.default is not None}
        resolved.update(params)
        self.validate(resolved)
        return self._do_execute(resolved, input_data)

    def validate(self, params: dict[str, Any]) -> None:
        """Validate params against ``define_parameters()``.

        Checks ``choices`` membership and numeric ``min_value`` /
        ``max_value`` bounds for every parameter that has a value.

        Args:
            params: Parameter dict to validate.

        Raises:
            ValidationError: If any parameter is invalid.
        """
        for param in self.define_parameters():
            value = params.get(param.name)
            if value is None:
                continue
            if param.choices is not None and value not in param.choices:
                msg = f"Parameter '{param.name}' must be one of {param.choices}, got '{value}'"
                raise ValidationError(msg)
            if param.min_value is not None and value < param.min_value:
                msg = f"Parameter '{param.name}' must be >= {param.min_value}, got {value}"
                raise ValidationError(msg)
            if param.max_value is not None and value > param.max_value:
                msg = f"Parameter '{param.name}' must be <= {param.max_value}, got {value}"
                raise ValidationError(msg)

    @abstractmethod
    def _do_execute(self, params: dict[str, Any], input_data: Any) -> Any:
        """Core logic — MUST override.

        Args:
            params: Validated parameter dictionary.
            input_data: Optional input from a preceding tool.

        Returns:
            The tool's result.
        """
        ...
