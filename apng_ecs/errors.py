"""Error types raised by the APNG codec.

All errors derive from ValueError so callers that already guard codec calls
with ``except ValueError`` keep working.
"""


class APNGError(ValueError):
    """Base class for all codec errors."""


class FormatError(APNGError):
    """Malformed or truncated chunk stream (bad signature, bounds, CRC)."""


class MissingHeaderError(APNGError):
    """Key frame has no IHDR chunk."""


class EncodingError(APNGError):
    """A chunk or field cannot be encoded (length or value out of range)."""


class EmptyInputError(APNGError):
    """No images were supplied."""
