"""Parse the JSON metadata line at the head of a decoded ``.pxo`` payload.

Keys used (all required)::

    size_x, size_y          — unsigned image width / height
    fps                     — playback rate
    frames[].duration       — seconds
    frames[].cels[].opacity — per-cel opacity
    layers[].name / visible
    tags[].name / from / to — inclusive frame range

``Cel.image_index`` is not stored in the file; it is assigned here in
frame-major, cel-order traversal, which is also the order the raw cel
images follow the metadata line.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from pxo_toolbox.core.datatypes import Cel, Frame, Layer, Metadata, Tag
from pxo_toolbox.core.exceptions import (
    MetadataEncodingError,
    MetadataSyntaxError,
    UnexpectedJsonError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def parse_metadata(line: bytes | str) -> Metadata:
    """Parse one metadata line into a ``Metadata``.

    Args:
        line: The newline-terminated first line of the payload.

    Returns:
        The validated metadata.

    Raises:
        MetadataEncodingError: If *line* is bytes that are not valid UTF-8.
        MetadataSyntaxError: If the text is not well-formed JSON.
        UnexpectedJsonError: If any required key is missing or mistyped.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = "Metadata line is not valid UTF-8"
            raise MetadataEncodingError(msg) from exc

    try:
        document = json.loads(line, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as exc:
        msg = f"Metadata line is not valid JSON: {exc.msg}"
        raise MetadataSyntaxError(msg) from exc

    root = _as_object(document)
    width = _as_uint(_expect(root, "size_x"))
    height = _as_uint(_expect(root, "size_y"))
    fps = _as_number(_expect(root, "fps"))

    frames: list[Frame] = []
    image_index = 0
    for raw_frame in _as_array(_expect(root, "frames")):
        frame = _as_object(raw_frame)
        duration = _as_number(_expect(frame, "duration"))

        cels: list[Cel] = []
        for raw_cel in _as_array(_expect(frame, "cels")):
            opacity = _as_number(_expect(_as_object(raw_cel), "opacity"))
            cels.append(Cel(opacity=opacity, image_index=image_index))
            image_index += 1

        frames.append(Frame(duration=duration, cels=tuple(cels)))

    layers = [
        Layer(
            name=_as_string(_expect(layer, "name")),
            visible=_as_bool(_expect(layer, "visible")),
        )
        for layer in map(_as_object, _as_array(_expect(root, "layers")))
    ]

    tags = [
        Tag(
            name=_as_string(_expect(tag, "name")),
            from_frame=_as_uint(_expect(tag, "from")),
            to_frame=_as_uint(_expect(tag, "to")),
        )
        for tag in map(_as_object, _as_array(_expect(root, "tags")))
    ]

    logger.debug(
        "Parsed metadata: %dx%d, %d frames, %d layers, %d tags",
        width,
        height,
        len(frames),
        len(layers),
        len(tags),
    )

    return Metadata(
        width=width,
        height=height,
        fps=fps,
        frames=tuple(frames),
        layers=tuple(layers),
        tags=tuple(tags),
    )


def validate_metadata(metadata: Metadata) -> None:
    """Check the structural invariants the file format does not enforce.

    Every frame must hold exactly one cel per layer, and every tag must
    describe a non-inverted range inside the frame list.

    Args:
        metadata: Parsed metadata.

    Raises:
        ValidationError: On the first violated invariant.
    """
    layer_count = len(metadata.layers)
    for index, frame in enumerate(metadata.frames):
        if len(frame.cels) != layer_count:
            msg = f"Frame {index} has {len(frame.cels)} cels but there are {layer_count} layers"
            raise ValidationError(msg)

    frame_count = len(metadata.frames)
    for tag in metadata.tags:
        problem = tag_problem(tag, frame_count)
        if problem is not None:
            raise ValidationError(problem)


def tag_problem(tag: Tag, frame_count: int) -> str | None:
    """Describe why *tag* does not fit a list of *frame_count* frames, if it does not."""
    if tag.from_frame > tag.to_frame:
        return f"Tag '{tag.name}' starts after it ends ({tag.from_frame} > {tag.to_frame})"
    if tag.to_frame >= frame_count:
        return f"Tag '{tag.name}' ends at frame {tag.to_frame} but there are {frame_count} frames"
    return None


# ---------------------------------------------------------------------------
# Schema helpers
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are JavaScript literals, not JSON.
    msg = f"Metadata line is not valid JSON: unexpected constant {name}"
    raise MetadataSyntaxError(msg)


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        msg = f"Metadata line is not valid JSON: number out of range {text}"
        raise MetadataSyntaxError(msg)
    return value


def _expect(obj: dict[str, Any], key: str) -> Any:
    if key not in obj:
        msg = f"Missing metadata key '{key}'"
        raise UnexpectedJsonError(msg)
    return obj[key]


def _as_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        msg = f"Expected a JSON object, got {type(value).__name__}"
        raise UnexpectedJsonError(msg)
    return value


def _as_array(value: Any) -> list[Any]:
    if not isinstance(value, list):
        msg = f"Expected a JSON array, got {type(value).__name__}"
        raise UnexpectedJsonError(msg)
    return value


def _as_uint(value: Any) -> int:
    # bool is an int subclass; JSON true/false are not numbers.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"Expected an unsigned integer, got {value!r}"
        raise UnexpectedJsonError(msg)
    return value


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"Expected a number, got {value!r}"
        raise UnexpectedJsonError(msg)
    return float(value)


def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        msg = f"Expected a string, got {value!r}"
        raise UnexpectedJsonError(msg)
    return value


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        msg = f"Expected a boolean, got {value!r}"
        raise UnexpectedJsonError(msg)
    return value
