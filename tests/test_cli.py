"""Integration tests for the CLI layer."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from PIL import Image

from pxo_toolbox.cli.main import cli


def _invoke(config_dir: Path, *args: str) -> tuple[int, str]:
    result = CliRunner().invoke(cli, ["--config-dir", str(config_dir), *args])
    return result.exit_code, result.output


class TestInfoCommand:
    """Tests for the ``info`` sub-command."""

    def test_help_shows_usage(self) -> None:
        """``--help`` displays usage information without errors."""
        result = CliRunner().invoke(cli, ["info", "--help"])

        assert result.exit_code == 0
        assert "--strict" in result.output

    def test_prints_metadata_json(self, pxo_file: Path, tmp_path: Path) -> None:
        """Metadata is printed as JSON."""
        code, output = _invoke(tmp_path / "cfg", "info", str(pxo_file))

        assert code == 0
        info = json.loads(output)
        assert info["width"] == 2
        assert info["image_count"] == 4
        assert [layer["name"] for layer in info["layers"]] == ["base", "top"]

    def test_reports_bad_file(self, tmp_path: Path) -> None:
        """A file that is not a container exits with an error message."""
        bad = tmp_path / "bad.pxo"
        bad.write_bytes(b"XXXX" + b"\x00" * 12)

        code, output = _invoke(tmp_path / "cfg", "info", str(bad))

        assert code == 1
        assert "bad.pxo" in output
        assert "GCPF" in output


class TestPackCommand:
    """Tests for the ``pack`` sub-command."""

    def test_help_shows_options(self) -> None:
        """``--help`` lists the packing options."""
        result = CliRunner().invoke(cli, ["pack", "--help"])

        assert result.exit_code == 0
        assert "--max-width" in result.output
        assert "--ignore-layer-visibility" in result.output

    def test_writes_atlas_and_metadata(self, pxo_file: Path, tmp_path: Path) -> None:
        """Happy path: atlas PNG and JSON metadata are written."""
        out = tmp_path / "out" / "atlas.png"

        code, output = _invoke(tmp_path / "cfg", "pack", str(pxo_file), "-o", str(out), "-W", "16", "-H", "16")

        assert code == 0, output
        assert "Packed 2 frames" in output
        assert out.exists()
        with Image.open(out) as atlas:
            assert atlas.mode == "RGBA"
            width, height = atlas.size

        document = json.loads(out.with_suffix(".json").read_text(encoding="utf-8"))
        assert (document["width"], document["height"]) == (width, height)
        sprite = document["sprites"][0]
        assert sprite["source"] == "hero.pxo"
        assert sprite["fps"] == 12.0
        assert len(sprite["frames"]) == 2
        assert sprite["tags"] == [{"name": "idle", "from": 0, "to": 1}]

    def test_uses_config_defaults(self, pxo_file: Path, tmp_path: Path) -> None:
        """Bounds from config.toml apply when no option is given."""
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[pack]\nmax_width = 2\nmax_height = 2\n")

        code, output = _invoke(config_dir, "pack", str(pxo_file), "-o", str(tmp_path / "a.png"))

        assert code == 1
        assert "fit" in output

    def test_option_overrides_config(self, pxo_file: Path, tmp_path: Path) -> None:
        """Command-line bounds win over config.toml."""
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[pack]\nmax_width = 2\nmax_height = 2\n")

        code, output = _invoke(
            config_dir, "pack", str(pxo_file), "-o", str(tmp_path / "a.png"), "-W", "4", "-H", "2"
        )

        assert code == 0, output
