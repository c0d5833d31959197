"""Merge the layers of a ``Container`` into one image per frame."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from pxo_toolbox.core.datatypes import Container, Metadata, Sprite, SpriteOptions
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import SpriteConversionError
from pxo_toolbox.tools.pxo_loader.logic import Source, load_container

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


# ── Public API ────────────────────────────────────────────────────────────


def load_sprite(
    source: Source,
    options: SpriteOptions | None = None,
    *,
    strict: bool = False,
    event_bus: EventBus | None = None,
) -> Sprite:
    """Load a ``.pxo`` stream or path straight into a ``Sprite``.

    Args:
        source: Binary stream or path of the ``.pxo`` file.
        options: Merge options; defaults honour visibility and opacity.
        strict: Apply strict metadata validation while loading.
        event_bus: Optional event bus for load and merge progress.

    Returns:
        The merged sprite.
    """
    container = load_container(source, strict=strict, event_bus=event_bus)
    return sprite_from_container(container, options, event_bus=event_bus)


def sprite_from_container(
    container: Container,
    options: SpriteOptions | None = None,
    *,
    event_bus: EventBus | None = None,
) -> Sprite:
    """Merge every frame of *container* bottom-to-top into a single image.

    A cel is drawn when ``ignore_layer_visibility`` is set or its layer is
    visible.  Its alpha channel is scaled by the cel opacity unless
    ``ignore_cel_opacity`` is set, then it is alpha-composited over the
    layers below it.

    Args:
        container: The loaded container.  It is not modified.
        options: Merge options; ``SpriteOptions()`` when omitted.
        event_bus: Optional event bus notified once per merged frame.

    Returns:
        A ``Sprite`` with one merged image and duration per frame.

    Raises:
        SpriteConversionError: If a frame buffer cannot be created or a cel
            image does not match the declared size.
    """
    options = options or SpriteOptions()
    metadata = container.metadata
    visible = visible_layer_indices(metadata)
    total = len(metadata.frames)

    images: list[Image.Image] = []
    for frame_index in range(total):
        images.append(merge_frame(container, frame_index, options, visible))

        if event_bus is not None:
            event_bus.progress(
                "sprite_merger",
                current=frame_index + 1,
                total=total,
                message=f"Merged frame {frame_index + 1}/{total}",
            )

    logger.info("Merged %d frames of %d layers", total, len(metadata.layers))

    if event_bus is not None:
        event_bus.completed("sprite_merger", message=f"Done — {total} frames merged")

    return Sprite(
        width=metadata.width,
        height=metadata.height,
        fps=metadata.fps,
        tags=metadata.tags,
        durations=tuple(frame.duration for frame in metadata.frames),
        images=tuple(images),
    )


def visible_layer_indices(metadata: Metadata) -> frozenset[int]:
    """Return the indices of every layer marked visible."""
    return frozenset(index for index, layer in enumerate(metadata.layers) if layer.visible)


def merge_frame(
    container: Container,
    frame_index: int,
    options: SpriteOptions,
    visible: frozenset[int],
) -> Image.Image:
    """Composite the cels of one frame onto a transparent canvas.

    Args:
        container: The loaded container.
        frame_index: Index into ``container.metadata.frames``.
        options: Merge options.
        visible: Indices of visible layers, see ``visible_layer_indices``.

    Returns:
        The merged RGBA image.

    Raises:
        SpriteConversionError: If the canvas cannot be built or a cel does
            not match it.
    """
    metadata = container.metadata
    frame = metadata.frames[frame_index]

    try:
        canvas = Image.new("RGBA", (metadata.width, metadata.height), TRANSPARENT)
    except ValueError as exc:
        msg = f"Cannot create a {metadata.width}x{metadata.height} frame image"
        raise SpriteConversionError(msg) from exc

    for layer_index, cel in enumerate(frame.cels):
        if layer_index >= len(metadata.layers):
            logger.warning("Frame %d has a cel for missing layer %d", frame_index, layer_index)

        if not (options.ignore_layer_visibility or layer_index in visible):
            continue

        multiplier = 1.0 if options.ignore_cel_opacity else cel.opacity
        source = container.images[cel.image_index]
        if multiplier != 1.0:
            source = scale_alpha(source, multiplier)

        try:
            canvas = Image.alpha_composite(canvas, source)
        except ValueError as exc:
            msg = f"Cel image {cel.image_index} does not match the {metadata.width}x{metadata.height} frame"
            raise SpriteConversionError(msg) from exc

    return canvas


def scale_alpha(image: Image.Image, multiplier: float) -> Image.Image:
    """Return a copy of *image* with its alpha channel multiplied by *multiplier*.

    RGB channels are left untouched.  The scaled alpha is truncated and
    saturated to 0-255, so opacities above 1.0 cannot overflow.  A NaN
    product becomes 0 and infinities saturate.

    Args:
        image: Source RGBA image.
        multiplier: Factor applied to every alpha value.

    Returns:
        A new RGBA image.
    """
    pixels = np.array(image.convert("RGBA"), dtype=np.float32)
    with np.errstate(invalid="ignore"):
        scaled = np.nan_to_num(pixels[:, :, 3] * multiplier, nan=0.0, posinf=255.0, neginf=0.0)
    pixels[:, :, 3] = np.clip(scaled, 0.0, 255.0)
    return Image.fromarray(pixels.astype(np.uint8))
