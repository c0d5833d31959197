"""Pack the frames of one or more sprites into a single atlas image."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import rectpack
from PIL import Image

from pxo_toolbox.core.datatypes import PackedFrame, PackedSprite, Sprite
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import RectanglePackError, SpriteConversionError, ValidationError

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)

# (sprite index, frame index) -> (x offset, y offset)
Placements = dict[tuple[int, int], tuple[int, int]]


# ── Validation ────────────────────────────────────────────────────────────


def validate_pack_params(*, max_width: int, max_height: int, sprites: Sequence[Sprite]) -> None:
    """Validate atlas bounds and sprites before packing.

    Args:
        max_width: Maximum atlas width in pixels.
        max_height: Maximum atlas height in pixels.
        sprites: Sprites to pack.

    Raises:
        ValidationError: If a bound is not positive or a sprite with frames
            has a zero dimension.
    """
    if max_width < 1:
        msg = f"Max width must be >= 1, got {max_width}"
        raise ValidationError(msg)
    if max_height < 1:
        msg = f"Max height must be >= 1, got {max_height}"
        raise ValidationError(msg)

    for index, sprite in enumerate(sprites):
        if sprite.frame_count and (sprite.width < 1 or sprite.height < 1):
            msg = f"Sprite {index} has frames but a {sprite.width}x{sprite.height} size"
            raise ValidationError(msg)


# ── Public API ────────────────────────────────────────────────────────────


def pack_sprite(
    sprite: Sprite,
    max_width: int,
    max_height: int,
    *,
    event_bus: EventBus | None = None,
) -> tuple[PackedSprite, Image.Image]:
    """Pack a single sprite into its own atlas.

    Args:
        sprite: The sprite to pack.
        max_width: Maximum atlas width in pixels.
        max_height: Maximum atlas height in pixels.
        event_bus: Optional event bus for progress events.

    Returns:
        The packed sprite and the atlas image.
    """
    packed, atlas = pack_sprites([sprite], max_width, max_height, event_bus=event_bus)
    return packed[0], atlas


def pack_sprites(
    sprites: Sequence[Sprite],
    max_width: int,
    max_height: int,
    *,
    event_bus: EventBus | None = None,
) -> tuple[list[PackedSprite], Image.Image]:
    """Pack every frame of every sprite into one shared atlas.

    The atlas is only as large as the placed frames require, never larger
    than *max_width* x *max_height*.  Frames are copied without blending.

    Args:
        sprites: Sprites to pack, in the order the result is returned.
        max_width: Maximum atlas width in pixels.
        max_height: Maximum atlas height in pixels.
        event_bus: Optional event bus notified once per placed frame.

    Returns:
        One ``PackedSprite`` per input sprite, and the atlas image.

    Raises:
        ValidationError: If the bounds or sprite sizes are invalid.
        RectanglePackError: If the frames do not all fit.
        SpriteConversionError: If the atlas cannot be built or a frame image
            does not match its sprite size.
    """
    validate_pack_params(max_width=max_width, max_height=max_height, sprites=sprites)

    placements = place_frames(sprites, max_width, max_height)

    width = max((x + sprites[s].width for (s, _), (x, _) in placements.items()), default=0)
    height = max((y + sprites[s].height for (s, _), (_, y) in placements.items()), default=0)

    try:
        atlas = Image.new("RGBA", (width, height), TRANSPARENT)
    except ValueError as exc:
        msg = f"Cannot create a {width}x{height} atlas image"
        raise SpriteConversionError(msg) from exc

    total = len(placements)
    packed: list[PackedSprite] = []
    placed = 0

    for s, sprite in enumerate(sprites):
        frames: list[PackedFrame] = []
        for f, image in enumerate(sprite.images):
            x, y = placements[(s, f)]
            _blit(atlas, image, sprite, x, y)
            frames.append(PackedFrame(duration=sprite.durations[f], x_offset=x, y_offset=y))

            placed += 1
            if event_bus is not None:
                event_bus.progress(
                    "atlas_packer",
                    current=placed,
                    total=total,
                    message=f"Placed sprite {s} frame {f} at ({x}, {y})",
                )

        packed.append(
            PackedSprite(
                width=sprite.width,
                height=sprite.height,
                fps=sprite.fps,
                tags=tuple(sprite.tags),
                frames=tuple(frames),
            )
        )

    logger.info("Packed %d frames from %d sprites into a %dx%d atlas", total, len(sprites), width, height)

    if event_bus is not None:
        event_bus.completed("atlas_packer", message=f"Done — {total} frames packed into {width}x{height} atlas")

    return packed, atlas


def place_frames(sprites: Sequence[Sprite], max_width: int, max_height: int) -> Placements:
    """Find a position for every sprite frame inside a single bin.

    Args:
        sprites: Sprites whose frames are placed as ``width x height`` rects.
        max_width: Bin width.
        max_height: Bin height.

    Returns:
        Offsets keyed by ``(sprite index, frame index)``.

    Raises:
        RectanglePackError: If any frame cannot be placed.
    """
    packer = rectpack.newPacker(rotation=False)
    expected = 0
    for s, sprite in enumerate(sprites):
        for f in range(sprite.frame_count):
            packer.add_rect(sprite.width, sprite.height, rid=(s, f))
            expected += 1
    packer.add_bin(max_width, max_height)
    packer.pack()

    placements: Placements = {rid: (x, y) for _bin, x, y, _w, _h, rid in packer.rect_list()}
    if len(placements) != expected:
        msg = f"Only {len(placements)} of {expected} frames fit into {max_width}x{max_height}"
        raise RectanglePackError(msg)

    logger.debug("Placed %d frames into a %dx%d bin", expected, max_width, max_height)
    return placements


# ── Internal helpers ──────────────────────────────────────────────────────


def _blit(atlas: Image.Image, image: Image.Image, sprite: Sprite, x: int, y: int) -> None:
    if image.size != (sprite.width, sprite.height):
        msg = f"Frame image is {image.width}x{image.height}, sprite is {sprite.width}x{sprite.height}"
        raise SpriteConversionError(msg)
    # No mask: pixels are copied as-is, alpha included.
    atlas.paste(image.convert("RGBA"), (x, y))
