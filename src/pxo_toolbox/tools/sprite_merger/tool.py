"""SpriteMergerTool — BaseTool wrapper for merging container layers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pxo_toolbox.core.base_tool import BaseTool, ToolParameter
from pxo_toolbox.core.datatypes import Container, Sprite, SpriteOptions
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import ToolError
from pxo_toolbox.tools.pxo_loader.logic import validate_loader_params
from pxo_toolbox.tools.sprite_merger.logic import load_sprite, sprite_from_container


class SpriteMergerTool(BaseTool):
    """Merge the layers of every frame into a single image per frame."""

    name = "sprite_merger"
    display_name = "Sprite Merger"
    description = "Merge .pxo layers into one image per animation frame"
    version = "0.1.0"

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialise the sprite merger tool.

        Args:
            event_bus: Shared event bus for progress reporting.
        """
        super().__init__(event_bus=event_bus)

    def define_parameters(self) -> list[ToolParameter]:
        """Return the parameter schema for merging."""
        return [
            ToolParameter(
                name="input",
                default=None,
                help="Path to a .pxo file (not needed when a Container is piped in).",
            ),
            ToolParameter(
                name="ignore_layer_visibility",
                default=False,
                help="Include layers that are hidden in Pixelorama.",
            ),
            ToolParameter(
                name="ignore_cel_opacity",
                default=False,
                help="Draw every cel fully opaque.",
            ),
            ToolParameter(
                name="strict",
                default=False,
                help="Reject cel/layer count mismatches and out-of-range tags.",
            ),
        ]

    def input_types(self) -> list[type]:
        """Accept a ``Container`` from the loader."""
        return [Container]

    def output_types(self) -> list[type]:
        """Produce a ``Sprite``."""
        return [Sprite]

    def validate(self, params: dict[str, Any]) -> None:
        """Validate parameters; the input path is checked only when given.

        Args:
            params: Parameter dict to validate.

        Raises:
            ValidationError: If parameters are invalid.
        """
        super().validate(params)

        raw_input = params.get("input")
        if raw_input is None:
            # Input may come from the loader as a Container.
            return
        validate_loader_params(input_path=Path(raw_input))

    def _do_execute(self, params: dict[str, Any], input_data: Any) -> Sprite:
        """Merge a piped ``Container`` or load and merge ``params["input"]``.

        Args:
            params: Validated parameter dictionary.
            input_data: Optional ``Container`` from the loader.

        Returns:
            The merged ``Sprite``.

        Raises:
            ToolError: If neither a container nor an input path is available.
        """
        options = SpriteOptions(
            ignore_layer_visibility=params.get("ignore_layer_visibility", False),
            ignore_cel_opacity=params.get("ignore_cel_opacity", False),
        )

        if isinstance(input_data, Container):
            return sprite_from_container(input_data, options, event_bus=self.event_bus)

        raw_input = params.get("input")
        if raw_input is None:
            msg = "No Container piped in and no input .pxo file provided"
            raise ToolError(msg)

        return load_sprite(
            Path(raw_input),
            options,
            strict=params.get("strict", False),
            event_bus=self.event_bus,
        )
