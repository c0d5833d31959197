"""PxoLoaderTool — BaseTool wrapper for loading ``.pxo`` containers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pxo_toolbox.core.base_tool import BaseTool, ToolParameter
from pxo_toolbox.core.datatypes import Container
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import ToolError
from pxo_toolbox.tools.pxo_loader.logic import load_container, validate_loader_params


class PxoLoaderTool(BaseTool):
    """Decode a Pixelorama ``.pxo`` file into metadata and per-cel images."""

    name = "pxo_loader"
    display_name = "Pxo Loader"
    description = "Load a Pixelorama .pxo file into metadata and raw cel images"
    version = "0.1.0"

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialise the loader tool.

        Args:
            event_bus: Shared event bus for progress reporting.
        """
        super().__init__(event_bus=event_bus)

    def define_parameters(self) -> list[ToolParameter]:
        """Return the parameter schema for loading."""
        return [
            ToolParameter(
                name="input",
                help="Path to the Pixelorama .pxo file.",
            ),
            ToolParameter(
                name="strict",
                default=False,
                help="Reject cel/layer count mismatches and out-of-range tags.",
            ),
        ]

    def input_types(self) -> list[type]:
        """Entry point — accepts no pipeline input."""
        return []

    def output_types(self) -> list[type]:
        """Produce a ``Container``."""
        return [Container]

    def validate(self, params: dict[str, Any]) -> None:
        """Validate parameters, including that the input file exists.

        Args:
            params: Parameter dict to validate.

        Raises:
            ValidationError: If parameters are invalid.
        """
        super().validate(params)

        raw_input = params.get("input")
        validate_loader_params(input_path=Path(raw_input) if raw_input is not None else None)

    def _do_execute(self, params: dict[str, Any], input_data: Any) -> Container:
        """Load the container named by ``params["input"]``.

        Args:
            params: Validated parameter dictionary.
            input_data: Ignored; the loader is an entry point.

        Returns:
            The decoded ``Container``.
        """
        if input_data is not None:
            msg = "The pxo loader does not accept pipeline input"
            raise ToolError(msg)

        return load_container(
            Path(params["input"]),
            strict=params.get("strict", False),
            event_bus=self.event_bus,
        )
