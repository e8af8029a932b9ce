"""
Exception types raised by the rendering pipeline.
"""


class ConfigurationError(ValueError):
    """Invalid render configuration (sizes, iteration bound, viewport)."""


class PixelIndexError(IndexError):
    """A sample mapped to a pixel index outside the frame buffer."""


class EncodingError(RuntimeError):
    """The image encoder could not write the pixel buffer."""
