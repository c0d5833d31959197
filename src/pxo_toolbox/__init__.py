"""Load Pixelorama ``.pxo`` files, merge their layers and pack them into atlases.

Basic usage::

    from pathlib import Path

    import pxo_toolbox

    container = pxo_toolbox.load_container(Path("hero.pxo"))
    sprite = pxo_toolbox.sprite_from_container(container)

    # or straight from the file
    sprite = pxo_toolbox.load_sprite(Path("hero.pxo"))

    packed, atlas = pxo_toolbox.pack_sprite(sprite, 2048, 2048)
    packed_list, atlas = pxo_toolbox.pack_sprites([sprite_a, sprite_b], 2048, 2048)
"""

from pxo_toolbox.core.datatypes import (
    AtlasPackResult,
    Cel,
    Container,
    Frame,
    Layer,
    Metadata,
    PackedFrame,
    PackedSprite,
    Sprite,
    SpriteOptions,
    Tag,
)
from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import (
    BlockDecompressionError,
    ContainerReadError,
    FormatError,
    MetadataEncodingError,
    MetadataSyntaxError,
    PxoError,
    ReadImageError,
    RectanglePackError,
    SpriteConversionError,
    ToolError,
    UnexpectedCompressionModeError,
    UnexpectedJsonError,
    UnexpectedMagicError,
    ValidationError,
    ZeroBlockSizeError,
)
from pxo_toolbox.tools.atlas_packer.logic import pack_sprite, pack_sprites
from pxo_toolbox.tools.pxo_loader.logic import load_container, probe_container
from pxo_toolbox.tools.sprite_merger.logic import load_sprite, sprite_from_container

__version__ = "0.1.0"

__all__ = [
    "AtlasPackResult",
    "BlockDecompressionError",
    "Cel",
    "Container",
    "ContainerReadError",
    "EventBus",
    "FormatError",
    "Frame",
    "Layer",
    "Metadata",
    "MetadataEncodingError",
    "MetadataSyntaxError",
    "PackedFrame",
    "PackedSprite",
    "PxoError",
    "ReadImageError",
    "RectanglePackError",
    "Sprite",
    "SpriteConversionError",
    "SpriteOptions",
    "Tag",
    "ToolError",
    "UnexpectedCompressionModeError",
    "UnexpectedJsonError",
    "UnexpectedMagicError",
    "ValidationError",
    "ZeroBlockSizeError",
    "load_container",
    "load_sprite",
    "pack_sprite",
    "pack_sprites",
    "probe_container",
    "sprite_from_container",
]
