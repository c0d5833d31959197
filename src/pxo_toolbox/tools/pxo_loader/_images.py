"""Read the raw RGBA8 cel images that follow the metadata line."""

from __future__ import annotations

import logging
from typing import BinaryIO

from PIL import Image

from pxo_toolbox.core.datatypes import Metadata
from pxo_toolbox.core.exceptions import ReadImageError
from pxo_toolbox.tools.pxo_loader._gcpf import read_exact

logger = logging.getLogger(__name__)


def load_images(metadata: Metadata, reader: BinaryIO) -> tuple[Image.Image, ...]:
    """Read one ``width * height * 4`` byte image per cel.

    Images are read frame by frame, cel by cel, so the position of each
    image in the result equals the ``image_index`` of its cel.

    Args:
        metadata: Parsed metadata declaring dimensions and cels.
        reader: Stream positioned just after the metadata line.

    Returns:
        One RGBA image per cel.

    Raises:
        ContainerReadError: If the payload ends before every cel is read.
        ReadImageError: If the bytes cannot be turned into an image.
    """
    size = (metadata.width, metadata.height)
    cel_bytes = metadata.width * metadata.height * 4
    images: list[Image.Image] = []

    for frame in metadata.frames:
        for cel in frame.cels:
            data = read_exact(reader, cel_bytes)
            try:
                images.append(Image.frombytes("RGBA", size, data))
            except ValueError as exc:
                msg = f"Cel image {cel.image_index} does not match {size[0]}x{size[1]} RGBA"
                raise ReadImageError(msg) from exc

    logger.debug("Read %d cel images of %dx%d", len(images), *size)
    return tuple(images)
