"""Shared fixtures: build .pxo containers in memory."""

from __future__ import annotations

import json
import struct
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
import zstandard

PxoBuilder = Callable[..., bytes]


def _solid(width: int, height: int, rgba: Sequence[int]) -> bytes:
    return bytes(rgba) * (width * height)


def build_pxo(
    meta: dict[str, Any],
    cel_colours: Sequence[Sequence[int]] | None = None,
    *,
    cel_data: Sequence[bytes] | None = None,
    block_size: int = 64,
) -> bytes:
    """Encode *meta* plus cel pixels as a GCPF container.

    Cels default to solid colours from *cel_colours*; *cel_data* supplies
    raw pixel bytes instead.
    """
    if cel_data is None:
        colours = cel_colours or []
        cel_data = [_solid(meta["size_x"], meta["size_y"], c) for c in colours]
    payload = json.dumps(meta).encode("utf-8") + b"\n" + b"".join(cel_data)

    compressor = zstandard.ZstdCompressor()
    count = len(payload) // block_size + 1
    blocks = [compressor.compress(payload[i * block_size : (i + 1) * block_size]) for i in range(count)]

    header = b"GCPF" + struct.pack("<III", 2, block_size, len(payload))
    table = b"".join(struct.pack("<I", len(b)) for b in blocks)
    return header + table + b"".join(blocks)


def make_meta(
    *,
    width: int = 2,
    height: int = 2,
    fps: float = 12.0,
    frames: int = 1,
    layers: Sequence[tuple[str, bool]] = (("Layer 1", True),),
    opacity: float = 1.0,
    tags: Sequence[tuple[str, int, int]] = (),
) -> dict[str, Any]:
    """Build a metadata document with one cel per layer in every frame."""
    return {
        "size_x": width,
        "size_y": height,
        "fps": fps,
        "frames": [
            {"duration": 0.1 * (i + 1), "cels": [{"opacity": opacity} for _ in layers]} for i in range(frames)
        ],
        "layers": [{"name": name, "visible": visible} for name, visible in layers],
        "tags": [{"name": name, "from": start, "to": end} for name, start, end in tags],
    }


@pytest.fixture()
def pxo_builder() -> PxoBuilder:
    """Return ``build_pxo``."""
    return build_pxo


@pytest.fixture()
def meta_builder() -> Callable[..., dict[str, Any]]:
    """Return ``make_meta``."""
    return make_meta


@pytest.fixture()
def pxo_file(tmp_path: Path) -> Path:
    """Write a 2-frame, 2-layer 2x2 .pxo file and return its path.

    Layer 0 (visible) is red, layer 1 (visible) is half-covered blue.
    """
    meta = make_meta(frames=2, layers=(("base", True), ("top", True)), tags=(("idle", 0, 1),))
    red = _solid(2, 2, (255, 0, 0, 255))
    blue_half = bytes((0, 0, 255, 255)) * 2 + bytes((0, 0, 0, 0)) * 2
    path = tmp_path / "hero.pxo"
    path.write_bytes(build_pxo(meta, cel_data=[red, blue_half, red, blue_half]))
    return path
