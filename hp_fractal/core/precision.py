"""
Arbitrary precision arithmetic for deep fractal zooms.

The rendering core is written against a small numeric contract (construct,
add/sub/mul/div, compare, abs, floor) so it never depends on one arithmetic
library directly. ``PrecisionConfig`` selects the backend: a private mpmath
context carrying a fixed number of significant digits, or plain numpy
``float64`` for quick previews where the zoom is shallow enough.
"""

import math
from dataclasses import dataclass
from typing import Any, Tuple, Union
import logging

import mpmath
import numpy as np
from mpmath.ctx_mp import MPContext

logger = logging.getLogger(__name__)

DEFAULT_DIGITS = 100

# Digits kept beyond what the pixel spacing strictly needs.
GUARD_DIGITS = 10


class PrecisionConfig:
    """Configuration for precision levels and arithmetic operations."""

    def __init__(self, precision: Union[str, int] = DEFAULT_DIGITS):
        """
        Initialize precision configuration.

        Args:
            precision: Either 'double' or a number of significant decimal digits
        """
        self.precision = precision
        self._setup_precision()

    def _setup_precision(self):
        """Setup the numeric backend based on configuration."""
        if isinstance(self.precision, bool):
            raise ValueError(f"Invalid precision specification: {self.precision}")

        if isinstance(self.precision, str):
            if self.precision == 'double':
                self.use_mpmath = False
                self.decimal_places = 15
                self.context = None
            elif self.precision.isdigit():
                self.precision = int(self.precision)
                self._setup_precision()
            else:
                raise ValueError(f"Unknown precision type: {self.precision}")

        elif isinstance(self.precision, int):
            if self.precision < 1:
                raise ValueError(f"Precision must be positive, got {self.precision}")
            self.use_mpmath = True
            self.decimal_places = self.precision
            # A private context keeps this render's precision independent of
            # the global mpmath.mp setting and of any other renderer.
            self.context = MPContext()
            self.context.dps = self.decimal_places
            logger.debug(f"mpmath context at {self.decimal_places} digits "
                         f"({self.context.prec} bits)")
        else:
            raise ValueError(f"Invalid precision specification: {self.precision}")

    def number(self, value: Any) -> Any:
        """Convert an int, string, float or backend number into a backend number."""
        if self.use_mpmath:
            return self.context.mpf(value)
        return np.float64(value)

    def floor(self, value: Any) -> int:
        """Largest integer not greater than ``value``."""
        if self.use_mpmath:
            return int(self.context.floor(value))
        return int(np.floor(value))

    def pack(self, value: Any) -> Any:
        """Reduce a backend number to a picklable, lossless representation."""
        if self.use_mpmath:
            return value._mpf_
        return float(value)

    def unpack(self, raw: Any) -> Any:
        """Inverse of ``pack``."""
        if self.use_mpmath:
            return self.context.make_mpf(raw)
        return np.float64(raw)

    def format_number(self, value: Any, digits: int = 10) -> str:
        """Format a number according to the precision configuration."""
        if self.use_mpmath:
            return self.context.nstr(value, n=min(digits, self.decimal_places))
        precision = min(digits, self.decimal_places)
        return f"{float(value):.{precision}g}"

    def __repr__(self) -> str:
        return f"PrecisionConfig({self.precision!r})"


class HighPrecisionComplex:
    """Complex number built from two backend reals."""

    __slots__ = ('real', 'imag')

    def __init__(self, real: Any, imag: Any):
        self.real = real
        self.imag = imag

    def __add__(self, other: 'HighPrecisionComplex') -> 'HighPrecisionComplex':
        """Add two complex numbers."""
        return HighPrecisionComplex(
            self.real + other.real,
            self.imag + other.imag
        )

    def __mul__(self, other: 'HighPrecisionComplex') -> 'HighPrecisionComplex':
        """Multiply two complex numbers."""
        real = self.real * other.real - self.imag * other.imag
        imag = self.real * other.imag + self.imag * other.real
        return HighPrecisionComplex(real, imag)

    def square(self) -> 'HighPrecisionComplex':
        """Optimized squaring."""
        real = self.real * self.real - self.imag * self.imag
        imag = 2 * self.real * self.imag
        return HighPrecisionComplex(real, imag)

    def exceeds(self, boundary: Any) -> bool:
        """True if either component's magnitude is past ``boundary``."""
        return abs(self.real) > boundary or abs(self.imag) > boundary

    def to_tuple(self) -> Tuple[Any, Any]:
        """Convert to tuple of (real, imag)."""
        return (self.real, self.imag)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HighPrecisionComplex):
            return NotImplemented
        return self.real == other.real and self.imag == other.imag

    def __hash__(self) -> int:
        return hash((self.real, self.imag))

    def __repr__(self) -> str:
        return f"HighPrecisionComplex({self.real!r}, {self.imag!r})"


@dataclass(frozen=True)
class Vector2:
    """A point of the complex plane."""

    x: Any
    y: Any

    def to_complex(self) -> HighPrecisionComplex:
        return HighPrecisionComplex(self.x, self.y)


def detect_precision_need(zoom: Union[str, float], width: int) -> Union[str, int]:
    """
    Estimate the precision needed to tell adjacent pixels apart.

    Args:
        zoom: Width of the rendered slice of the real axis
        width: Frame width in pixels

    Returns:
        'double' for shallow views, otherwise a number of decimal digits
    """
    spacing = mpmath.mpf(zoom) / width
    if spacing <= 0:
        raise ValueError("zoom must be positive")

    digits_needed = max(1, int(math.ceil(-float(mpmath.log10(spacing)))) + 2)

    if digits_needed <= 12:
        return 'double'
    return digits_needed + GUARD_DIGITS
