"""AtlasPackerTool — BaseTool wrapper for packing sprites into an atlas."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pxo_toolbox.core.base_tool import BaseTool, ToolParameter
from pxo_toolbox.core.datatypes import AtlasPackResult, Sprite, SpriteOptions
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import ToolError
from pxo_toolbox.tools.atlas_packer.logic import pack_sprites
from pxo_toolbox.tools.pxo_loader.logic import validate_loader_params
from pxo_toolbox.tools.sprite_merger.logic import load_sprite

DEFAULT_MAX_SIZE = 2048


class AtlasPackerTool(BaseTool):
    """Pack the frames of one or more sprites into a single atlas image."""

    name = "atlas_packer"
    display_name = "Atlas Packer"
    description = "Pack sprite frames into one atlas with per-frame offsets"
    version = "0.1.0"

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialise the atlas packer tool.

        Args:
            event_bus: Shared event bus for progress reporting.
        """
        super().__init__(event_bus=event_bus)

    def define_parameters(self) -> list[ToolParameter]:
        """Return the parameter schema for packing."""
        return [
            ToolParameter(
                name="inputs",
                default=None,
                help="Paths of .pxo files to merge and pack (not needed when sprites are piped in).",
            ),
            ToolParameter(
                name="max_width",
                default=DEFAULT_MAX_SIZE,
                min_value=1,
                help="Maximum atlas width in pixels.",
            ),
            ToolParameter(
                name="max_height",
                default=DEFAULT_MAX_SIZE,
                min_value=1,
                help="Maximum atlas height in pixels.",
            ),
            ToolParameter(
                name="ignore_layer_visibility",
                default=False,
                help="Include hidden layers when merging input files.",
            ),
            ToolParameter(
                name="ignore_cel_opacity",
                default=False,
                help="Draw every cel fully opaque when merging input files.",
            ),
        ]

    def input_types(self) -> list[type]:
        """Accept a single ``Sprite`` or a list of them."""
        return [Sprite, list]

    def output_types(self) -> list[type]:
        """Produce an ``AtlasPackResult``."""
        return [AtlasPackResult]

    def validate(self, params: dict[str, Any]) -> None:
        """Validate bounds and, when given, every input path.

        Args:
            params: Parameter dict to validate.

        Raises:
            ValidationError: If parameters are invalid.
        """
        super().validate(params)

        for raw_input in params.get("inputs") or []:
            validate_loader_params(input_path=Path(raw_input))

    def _do_execute(self, params: dict[str, Any], input_data: Any) -> AtlasPackResult:
        """Pack piped sprites, or merge and pack ``params["inputs"]``.

        Args:
            params: Validated parameter dictionary.
            input_data: Optional ``Sprite`` or list of sprites.

        Returns:
            An ``AtlasPackResult`` with packed sprites and the atlas image.

        Raises:
            ToolError: If no sprites can be resolved.
        """
        sprites = self._resolve_sprites(params, input_data)

        packed, atlas = pack_sprites(
            sprites,
            params.get("max_width", DEFAULT_MAX_SIZE),
            params.get("max_height", DEFAULT_MAX_SIZE),
            event_bus=self.event_bus,
        )
        return AtlasPackResult(sprites=tuple(packed), atlas=atlas)

    def _resolve_sprites(self, params: dict[str, Any], input_data: Any) -> list[Sprite]:
        if isinstance(input_data, Sprite):
            return [input_data]
        if isinstance(input_data, (list, tuple)):
            if not all(isinstance(item, Sprite) for item in input_data):
                msg = "Pipeline input must contain only Sprite objects"
                raise ToolError(msg)
            return list(input_data)

        raw_inputs = params.get("inputs")
        if not raw_inputs:
            msg = "No sprites piped in and no input .pxo files provided"
            raise ToolError(msg)

        options = SpriteOptions(
            ignore_layer_visibility=params.get("ignore_layer_visibility", False),
            ignore_cel_opacity=params.get("ignore_cel_opacity", False),
        )
        return [load_sprite(Path(p), options, event_bus=self.event_bus) for p in raw_inputs]
