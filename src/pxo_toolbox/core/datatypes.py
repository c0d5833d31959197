"""Shared value objects produced and consumed by the loader, merger and packer."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class Tag:
    """A named sub-animation covering an inclusive range of frame indices."""

    name: str
    from_frame: int
    to_frame: int

    @property
    def frame_count(self) -> int:
        """Return the number of frames the tag spans (0 for an inverted range)."""
        return max(0, self.to_frame - self.from_frame + 1)


@dataclass(frozen=True)
class Layer:
    """A drawing plane; its position in ``Metadata.layers`` is its layer index."""

    name: str
    visible: bool


@dataclass(frozen=True)
class Cel:
    """The content of one (frame, layer) pair.

    Attributes:
        opacity: Cel opacity, nominally 0.0-1.0 but not clamped.
        image_index: Index of the matching raw image in ``Container.images``.
    """

    opacity: float
    image_index: int


@dataclass(frozen=True)
class Frame:
    """One time-step of the animation, holding one cel per layer."""

    duration: float
    cels: tuple[Cel, ...]


@dataclass(frozen=True)
class Metadata:
    """Animation metadata stored on the first line of a decoded container.

    Attributes:
        width: Pixel width shared by every cel image.
        height: Pixel height shared by every cel image.
        fps: Playback rate used together with frame durations.
        frames: Frames in playback order.
        layers: Layers bottom-to-top.
        tags: Named frame ranges.
    """

    width: int
    height: int
    fps: float
    frames: tuple[Frame, ...]
    layers: tuple[Layer, ...]
    tags: tuple[Tag, ...]

    @property
    def cel_count(self) -> int:
        """Return the total number of cels across all frames."""
        return sum(len(frame.cels) for frame in self.frames)


@dataclass(frozen=True)
class Container:
    """Decoded metadata plus one raw RGBA image per cel, indexed by ``image_index``."""

    metadata: Metadata
    images: tuple[Image.Image, ...]


@dataclass(frozen=True)
class SpriteOptions:
    """Controls how container layers are merged into sprite frames."""

    ignore_layer_visibility: bool = False
    ignore_cel_opacity: bool = False


@dataclass(frozen=True)
class Sprite:
    """A container with all layers merged into one image per frame."""

    width: int
    height: int
    fps: float
    tags: tuple[Tag, ...]
    durations: tuple[float, ...]
    images: tuple[Image.Image, ...]

    @property
    def frame_count(self) -> int:
        """Return the number of frames in the sprite."""
        return len(self.images)


@dataclass(frozen=True)
class PackedFrame:
    """Placement of one sprite frame inside a shared atlas image."""

    duration: float
    x_offset: int
    y_offset: int


@dataclass(frozen=True)
class PackedSprite:
    """A sprite whose frame images live in a separate atlas image."""

    width: int
    height: int
    fps: float
    tags: tuple[Tag, ...]
    frames: tuple[PackedFrame, ...]


@dataclass(frozen=True)
class AtlasPackResult:
    """Result of packing one or more sprites into a single atlas."""

    sprites: tuple[PackedSprite, ...]
    atlas: Image.Image
