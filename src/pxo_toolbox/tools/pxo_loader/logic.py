"""Container facade — decode, parse metadata and read cel images in one pass.

Integrates the GCPF decompressor, the metadata parser and the raw image
reader to turn a Pixelorama ``.pxo`` file into a ``Container``.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, BinaryIO

from pxo_toolbox.core.datatypes import Container, Metadata
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import ContainerReadError, ValidationError
from pxo_toolbox.tools.pxo_loader._gcpf import decompress_gcpf
from pxo_toolbox.tools.pxo_loader._images import load_images
from pxo_toolbox.tools.pxo_loader._meta import parse_metadata, tag_problem, validate_metadata

logger = logging.getLogger(__name__)

PXO_SUFFIX = ".pxo"

Source = BinaryIO | Path


# ── Validation ────────────────────────────────────────────────────────────


def validate_loader_params(*, input_path: Path | None) -> None:
    """Validate the path handed to the loader tool.

    Args:
        input_path: Path to the ``.pxo`` file.

    Raises:
        ValidationError: If the path is missing, absent, or not a ``.pxo`` file.
    """
    if input_path is None:
        msg = "A .pxo file path is required"
        raise ValidationError(msg)
    if not input_path.is_file():
        msg = f"Pxo file does not exist: '{input_path}'"
        raise ValidationError(msg)
    if input_path.suffix.lower() != PXO_SUFFIX:
        msg = f"Expected a .pxo file, got: '{input_path.name}'"
        raise ValidationError(msg)


# ── Public API ────────────────────────────────────────────────────────────


def load_container(
    source: Source,
    *,
    strict: bool = False,
    event_bus: EventBus | None = None,
) -> Container:
    """Load a ``Container`` from a ``.pxo`` stream or path.

    Args:
        source: Seekable binary stream at the start of the file, or a path.
        strict: Also require one cel per layer in every frame and in-range
            tags.  The file format itself guarantees neither.
        event_bus: Optional event bus for per-block progress.

    Returns:
        The metadata plus one raw RGBA image per cel.

    Raises:
        PxoError: Any subclass, depending on where decoding failed.
    """
    if isinstance(source, Path):
        with _open(source) as fh:
            return load_container(fh, strict=strict, event_bus=event_bus)

    payload = decompress_gcpf(source, event_bus=event_bus)
    reader = io.BytesIO(payload)

    metadata = parse_metadata(reader.readline())
    if strict:
        validate_metadata(metadata)
    else:
        for tag in metadata.tags:
            problem = tag_problem(tag, len(metadata.frames))
            if problem is not None:
                logger.warning("%s (kept as written)", problem)
    images = load_images(metadata, reader)

    logger.info(
        "Loaded container: %dx%d, %d frames, %d layers, %d cel images",
        metadata.width,
        metadata.height,
        len(metadata.frames),
        len(metadata.layers),
        len(images),
    )

    if event_bus is not None:
        event_bus.completed(
            "pxo_loader",
            message=f"Done — {len(metadata.frames)} frames, {len(images)} cels loaded",
        )

    return Container(metadata=metadata, images=images)


def probe_container(source: Source, *, strict: bool = False) -> dict[str, Any]:
    """Return a JSON-ready summary of a ``.pxo`` file's metadata.

    The cel images are still read so that truncated files are reported.

    Args:
        source: Binary stream or path of the ``.pxo`` file.
        strict: Apply strict metadata validation.

    Returns:
        A dict with keys ``width``, ``height``, ``fps``, ``frames``,
        ``layers``, ``tags`` and ``image_count``.
    """
    container = load_container(source, strict=strict)
    summary = describe_metadata(container.metadata)
    summary["image_count"] = len(container.images)
    return summary


def describe_metadata(metadata: Metadata) -> dict[str, Any]:
    """Convert metadata back into plain dicts and lists."""
    return {
        "width": metadata.width,
        "height": metadata.height,
        "fps": metadata.fps,
        "frames": [
            {
                "duration": frame.duration,
                "cels": [{"opacity": cel.opacity, "image_index": cel.image_index} for cel in frame.cels],
            }
            for frame in metadata.frames
        ],
        "layers": [{"name": layer.name, "visible": layer.visible} for layer in metadata.layers],
        "tags": [{"name": tag.name, "from": tag.from_frame, "to": tag.to_frame} for tag in metadata.tags],
    }


# ── Internal helpers ──────────────────────────────────────────────────────


def _open(path: Path) -> BinaryIO:
    try:
        return path.open("rb")
    except OSError as exc:
        msg = f"Failed to open pxo file '{path}'"
        raise ContainerReadError(msg) from exc
