"""Exception types raised by the gradient texture core."""


class GradientTextureError(ValueError):
    """Base class for gradient texture generation and export errors."""


class InvalidLayoutError(GradientTextureError):
    """Raised when a strip layout has length < 2 or thickness < 1."""


class UnsupportedOutputFormatError(GradientTextureError):
    """Raised when an export format other than PNG or TGA is requested."""


class MissingOutputDestinationError(GradientTextureError):
    """Raised when an export is requested but no destination path resolved."""
