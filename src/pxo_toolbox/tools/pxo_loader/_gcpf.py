"""Decompress Godot block-compressed (GCPF) files.

Pixelorama saves ``.pxo`` projects through Godot's compressed file
access, which splits the payload into fixed-size blocks and compresses
each block independently.  The header layout (all little-endian u32
after the magic):

    Offset   Size  Field
    0        4     Magic: ``GCPF``
    4        4     Compression mode (2 = zstd, the only supported mode)
    8        4     Block size (uncompressed bytes per block)
    12       4     Total uncompressed size
    16       4*N   Compressed size of each block
    16+4N    ...   Compressed blocks, back to back

``N`` is always ``total_size // block_size + 1``, so a payload that is an
exact multiple of the block size still carries a trailing empty block.
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO

import zstandard

from pxo_toolbox.core.events import EventBus
from pxo_toolbox.core.exceptions import (
    BlockDecompressionError,
    ContainerReadError,
    MetadataEncodingError,
    UnexpectedCompressionModeError,
    UnexpectedMagicError,
    ZeroBlockSizeError,
)

logger = logging.getLogger(__name__)

MAGIC = "GCPF"
COMPRESSION_MODE_ZSTD = 2


def decompress_gcpf(source: BinaryIO, *, event_bus: EventBus | None = None) -> bytes:
    """Read a GCPF container from *source* and return the decompressed payload.

    Args:
        source: Binary stream positioned at the start of the container.
        event_bus: Optional event bus notified once per decoded block.

    Returns:
        The concatenation of every decompressed block, in order.

    Raises:
        UnexpectedMagicError: If the first four bytes are not ``GCPF``.
        UnexpectedCompressionModeError: If the mode is not zstd.
        ZeroBlockSizeError: If the header declares a zero block size.
        BlockDecompressionError: If a block is not a valid zstd frame.
        ContainerReadError: If the stream ends before the declared data.
    """
    _check_head(source)

    block_size = read_u32(source)
    if block_size == 0:
        msg = "Block size cannot be zero"
        raise ZeroBlockSizeError(msg)
    total_size = read_u32(source)
    count = block_count(total_size, block_size)
    logger.debug("GCPF header: block_size=%d total_size=%d blocks=%d", block_size, total_size, count)

    block_sizes = [read_u32(source) for _ in range(count)]

    decompressor = zstandard.ZstdDecompressor()
    blocks: list[bytes] = []
    for index, compressed_size in enumerate(block_sizes):
        compressed = read_exact(source, compressed_size)
        blocks.append(_decompress_block(decompressor, compressed, index))

        if event_bus is not None:
            event_bus.progress(
                "pxo_loader",
                current=index + 1,
                total=count,
                message=f"Decompressed block {index + 1}/{count}",
            )

    return b"".join(blocks)


def block_count(total_size: int, block_size: int) -> int:
    """Return the number of blocks a container with these sizes declares."""
    return total_size // block_size + 1


def is_gcpf(data: bytes) -> bool:
    """Return True if the bytes start with the GCPF magic.

    Args:
        data: Raw bytes to inspect.
    """
    return data[:4] == MAGIC.encode("ascii")


def read_exact(source: BinaryIO, size: int) -> bytes:
    """Read exactly *size* bytes from *source*.

    Raises:
        ContainerReadError: If the stream fails or ends early.
    """
    try:
        data = source.read(size)
    except OSError as exc:
        msg = f"Failed to read {size} bytes from container"
        raise ContainerReadError(msg) from exc
    if len(data) != size:
        msg = f"Unexpected end of container: wanted {size} bytes, got {len(data)}"
        raise ContainerReadError(msg)
    return data


def read_u32(source: BinaryIO) -> int:
    """Read one little-endian unsigned 32-bit integer."""
    value: int = struct.unpack("<I", read_exact(source, 4))[0]
    return value


def _check_head(source: BinaryIO) -> None:
    raw_magic = read_exact(source, 4)
    try:
        magic = raw_magic.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Magic header is not valid UTF-8: {raw_magic!r}"
        raise MetadataEncodingError(msg) from exc
    if magic != MAGIC:
        raise UnexpectedMagicError(MAGIC, magic)

    mode = read_u32(source)
    if mode != COMPRESSION_MODE_ZSTD:
        raise UnexpectedCompressionModeError(COMPRESSION_MODE_ZSTD, mode)


def _decompress_block(decompressor: zstandard.ZstdDecompressor, compressed: bytes, index: int) -> bytes:
    """Decompress every zstd frame in one block; an empty block yields no bytes."""
    chunks: list[bytes] = []
    remaining = compressed
    while remaining:
        # decompressobj tolerates frames written without a content size.
        dobj = decompressor.decompressobj()
        try:
            chunks.append(dobj.decompress(remaining))
        except zstandard.ZstdError as exc:
            msg = f"Failed to decompress block {index}"
            raise BlockDecompressionError(msg) from exc
        if not dobj.eof:
            msg = f"Failed to decompress block {index}: truncated zstd frame"
            raise BlockDecompressionError(msg)
        remaining = dobj.unused_data
    return b"".join(chunks)
