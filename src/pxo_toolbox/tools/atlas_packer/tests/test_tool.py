"""Tests for AtlasPackerTool (BaseTool integration)."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from pxo_toolbox.core.datatypes import AtlasPackResult, Sprite
from pxo_toolbox.core.exceptions import RectanglePackError, ToolError, ValidationError
from pxo_toolbox.tools.atlas_packer.tool import AtlasPackerTool
from pxo_toolbox.tools.sprite_merger.tool import SpriteMergerTool

# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture()
def tool() -> AtlasPackerTool:
    """Return a fresh AtlasPackerTool instance."""
    return AtlasPackerTool()


def _sprite(size: int, frames: int) -> Sprite:
    return Sprite(
        width=size,
        height=size,
        fps=6.0,
        tags=(),
        durations=(0.5,) * frames,
        images=tuple(Image.new("RGBA", (size, size), (255, 255, 255, 255)) for _ in range(frames)),
    )


# ── Metadata & Parameters ─────────────────────────────────────────────────


class TestToolMetadata:
    """Tests for tool identity and parameter schema."""

    def test_tool_name(self, tool: AtlasPackerTool) -> None:
        """Tool exposes the expected name."""
        assert tool.name == "atlas_packer"

    def test_ports(self, tool: AtlasPackerTool) -> None:
        """Accepts sprites, produces an AtlasPackResult."""
        assert Sprite in tool.input_types()
        assert AtlasPackResult in tool.output_types()


# ── Validation ─────────────────────────────────────────────────────────────


class TestToolValidation:
    """Tests for validation triggered by ``run()``."""

    def test_rejects_zero_width(self, tool: AtlasPackerTool) -> None:
        """``min_value`` on max_width is enforced."""
        with pytest.raises(ValidationError, match="max_width"):
            tool.run(params={"max_width": 0}, input_data=_sprite(2, 1))

    def test_rejects_missing_input_file(self, tool: AtlasPackerTool, tmp_path: Path) -> None:
        """Every listed input file must exist."""
        with pytest.raises(ValidationError, match="does not exist"):
            tool.validate({"inputs": [tmp_path / "a.pxo"]})


# ── Execution ──────────────────────────────────────────────────────────────


class TestToolExecution:
    """Tests for the full ``run()`` lifecycle."""

    def test_run_with_single_sprite(self, tool: AtlasPackerTool) -> None:
        """A single piped sprite is packed."""
        result = tool.run(params={"max_width": 16, "max_height": 16}, input_data=_sprite(4, 3))

        assert isinstance(result, AtlasPackResult)
        assert len(result.sprites) == 1
        assert len(result.sprites[0].frames) == 3

    def test_run_with_sprite_list(self, tool: AtlasPackerTool) -> None:
        """A list of sprites is packed into one atlas."""
        result = tool.run(params={}, input_data=[_sprite(4, 1), _sprite(8, 2)])

        assert [len(s.frames) for s in result.sprites] == [1, 2]
        assert result.atlas.width <= 2048

    def test_run_rejects_foreign_list(self, tool: AtlasPackerTool) -> None:
        """Piped lists must contain sprites only."""
        with pytest.raises(ToolError, match="only Sprite"):
            tool.run(params={}, input_data=[_sprite(4, 1), "not a sprite"])

    def test_run_from_files(self, tool: AtlasPackerTool, pxo_file: Path) -> None:
        """Input files are loaded, merged and packed."""
        result = tool.run(params={"inputs": [pxo_file, pxo_file], "max_width": 8, "max_height": 8})

        assert len(result.sprites) == 2
        assert all(len(s.frames) == 2 for s in result.sprites)

    def test_run_from_files_too_small(self, tool: AtlasPackerTool, pxo_file: Path) -> None:
        """Packing failures propagate."""
        with pytest.raises(RectanglePackError):
            tool.run(params={"inputs": [pxo_file], "max_width": 2, "max_height": 2})

    def test_run_without_input_fails(self, tool: AtlasPackerTool) -> None:
        """No sprites and no files is an error."""
        with pytest.raises(ToolError, match="No sprites"):
            tool.run(params={})

    def test_chained_after_merger(self, pxo_file: Path) -> None:
        """The merger's Sprite can be piped into the packer."""
        sprite = SpriteMergerTool().run(params={"input": pxo_file})

        result = AtlasPackerTool().run(params={"max_width": 4, "max_height": 2}, input_data=sprite)

        assert result.atlas.size == (4, 2)
