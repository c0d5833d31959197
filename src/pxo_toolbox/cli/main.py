"""CLI entry point — click group exposing ``info`` and ``pack``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from pxo_toolbox.core.config import ConfigManager
from pxo_toolbox.core.datatypes import PackedSprite
from pxo_toolbox.core.exceptions import PxoError


def _packed_sprite_to_dict(source: Path, sprite: PackedSprite) -> dict[str, Any]:
    """Describe one packed sprite for the JSON written next to the atlas."""
    return {
        "source": source.name,
        "width": sprite.width,
        "height": sprite.height,
        "fps": sprite.fps,
        "tags": [{"name": t.name, "from": t.from_frame, "to": t.to_frame} for t in sprite.tags],
        "frames": [{"duration": f.duration, "x": f.x_offset, "y": f.y_offset} for f in sprite.frames],
    }


@click.group()
@click.version_option(package_name="pxo-toolbox")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress to stderr.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.toml (default: ~/.config/pxo-toolbox).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """Pxo Toolbox — inspect and pack Pixelorama .pxo files."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = ConfigManager(config_dir=config_dir)
    try:
        config.load()
    except PxoError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = config


@cli.command(name="info")
@click.argument("pxo_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path))
@click.option("--strict", is_flag=True, default=False, help="Reject cel/layer mismatches and bad tags.")
def info_cmd(pxo_file: Path, strict: bool) -> None:
    """Print the metadata of PXO_FILE as JSON."""
    from pxo_toolbox.tools.pxo_loader.logic import probe_container

    try:
        summary = probe_container(pxo_file, strict=strict)
    except PxoError as exc:
        raise click.ClickException(f"{pxo_file.name}: {exc}") from exc

    click.echo(json.dumps(summary, indent=2))


@cli.command(name="pack")
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    "output_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Atlas image path; metadata is written next to it as .json.",
)
@click.option("-W", "--max-width", type=int, default=None, help="Maximum atlas width (default from config: 2048).")
@click.option("-H", "--max-height", type=int, default=None, help="Maximum atlas height (default from config: 2048).")
@click.option(
    "--ignore-layer-visibility/--respect-layer-visibility",
    default=None,
    help="Include hidden layers.",
)
@click.option(
    "--ignore-cel-opacity/--respect-cel-opacity",
    default=None,
    help="Draw every cel fully opaque.",
)
@click.pass_obj
def pack_cmd(
    config: ConfigManager,
    inputs: tuple[Path, ...],
    output_path: Path,
    max_width: int | None,
    max_height: int | None,
    ignore_layer_visibility: bool | None,
    ignore_cel_opacity: bool | None,
) -> None:
    """Merge each INPUTS .pxo file and pack all frames into one atlas."""
    from pxo_toolbox.core.events import EventBus
    from pxo_toolbox.tools.atlas_packer import AtlasPackerTool

    bus = EventBus()
    bus.subscribe(
        "completed",
        lambda **kw: click.echo(f"  [{kw['tool']}] {kw['message']}") if kw["tool"] == "atlas_packer" else None,
    )

    params = {
        "inputs": list(inputs),
        "max_width": max_width if max_width is not None else config.get("pack", "max_width"),
        "max_height": max_height if max_height is not None else config.get("pack", "max_height"),
        "ignore_layer_visibility": (
            ignore_layer_visibility
            if ignore_layer_visibility is not None
            else config.get("sprite", "ignore_layer_visibility")
        ),
        "ignore_cel_opacity": (
            ignore_cel_opacity if ignore_cel_opacity is not None else config.get("sprite", "ignore_cel_opacity")
        ),
    }

    tool = AtlasPackerTool(event_bus=bus)
    try:
        result = tool.run(params=params)
    except PxoError as exc:
        raise click.ClickException(str(exc)) from exc

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        result.atlas.save(str(output_path))
    except (OSError, ValueError) as exc:
        msg = f"Failed to save atlas to '{output_path}': {exc}"
        raise click.ClickException(msg) from exc

    meta_path = output_path.with_suffix(".json")
    document = {
        "atlas": output_path.name,
        "width": result.atlas.width,
        "height": result.atlas.height,
        "sprites": [_packed_sprite_to_dict(src, sprite) for src, sprite in zip(inputs, result.sprites, strict=True)],
    }
    meta_path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    frame_count = sum(len(sprite.frames) for sprite in result.sprites)
    click.echo(
        f"Packed {frame_count} frames from {len(inputs)} files "
        f"({result.atlas.width}x{result.atlas.height}px) → {output_path}"
    )
