"""Exception hierarchy for the pxo-toolbox library."""


class PxoError(Exception):
    """Base exception for all pxo-toolbox errors."""


class ContainerReadError(PxoError):
    """Raised when the source stream cannot be read or ends early."""


class FormatError(PxoError):
    """Raised when the container bytes do not follow the expected format."""


class UnexpectedMagicError(FormatError):
    """Raised when the container does not start with the expected magic tag."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected magic header '{expected}', got '{actual}'")


class UnexpectedCompressionModeError(FormatError):
    """Raised when the container uses an unsupported compression mode."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected compression mode {expected} (zstd), got {actual}")


class ZeroBlockSizeError(FormatError):
    """Raised when the container declares a block size of zero."""


class BlockDecompressionError(FormatError):
    """Raised when a compressed block cannot be decompressed."""


class MetadataEncodingError(FormatError):
    """Raised when the metadata line or magic tag is not valid UTF-8."""


class MetadataSyntaxError(FormatError):
    """Raised when the metadata line is not well-formed JSON."""


class UnexpectedJsonError(PxoError):
    """Raised when the metadata JSON does not match the expected schema."""


class ReadImageError(PxoError):
    """Raised when raw cel bytes do not form an image of the declared size."""


class SpriteConversionError(PxoError):
    """Raised when a composite or atlas image buffer cannot be created."""


class RectanglePackError(PxoError):
    """Raised when sprite frames do not fit into the requested atlas bounds."""


class ValidationError(PxoError):
    """Raised when parameter or strict metadata validation fails."""


class ToolError(PxoError):
    """Raised when a tool wrapper cannot resolve its input."""
