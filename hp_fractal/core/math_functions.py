"""
Core escape-time iteration for the quadratic map ``z <- z^2 + c``.

Every point is classified independently. Before iterating, two closed-form
tests catch the main cardioid and the period-2 bulb, the largest interior
regions of the set, which would otherwise always run to the iteration cap.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union
import logging

from .exceptions import ConfigurationError
from .precision import HighPrecisionComplex, PrecisionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EscapeResult:
    """
    Outcome of classifying one point.

    ``iteration`` is the 0-based step at which the orbit left the escape
    boundary, or ``None`` when the point stayed bounded.
    """

    iteration: Optional[int] = None

    @property
    def bounded(self) -> bool:
        return self.iteration is None

    @property
    def escaped(self) -> bool:
        return self.iteration is not None

    @classmethod
    def escaped_at(cls, iteration: int) -> 'EscapeResult':
        return cls(iteration)

    def __str__(self) -> str:
        if self.bounded:
            return "bounded"
        return f"escaped at iteration {self.iteration}"


BOUNDED = EscapeResult()


class PointClassifier:
    """Escape-time classification of single points of the complex plane."""

    def __init__(self, precision: PrecisionConfig, max_iter: int = 100,
                 escape_boundary: Union[str, int, Any] = "2.0"):
        """
        Initialize point classifier.

        Args:
            precision: Numeric backend used for every operation
            max_iter: Maximum number of iterations
            escape_boundary: Per-component magnitude past which a point escapes
        """
        if isinstance(max_iter, bool) or not isinstance(max_iter, int) or max_iter <= 0:
            raise ConfigurationError(f"max_iter must be a positive integer, got {max_iter!r}")

        self.precision = precision
        self.max_iter = max_iter
        self.escape_boundary = precision.number(escape_boundary)

        if self.escape_boundary <= 0:
            raise ConfigurationError("escape_boundary must be positive")

        self._quarter = precision.number(1) / 4
        self._sixteenth = precision.number(1) / 16
        self._zero = precision.number(0)

    def in_main_cardioid(self, c: HighPrecisionComplex) -> bool:
        """Closed-form membership test for the main cardioid."""
        x = c.real - self._quarter
        y_sq = c.imag * c.imag
        q = x * x + y_sq
        return q * (q + x) <= y_sq * self._quarter

    def in_period2_bulb(self, c: HighPrecisionComplex) -> bool:
        """Closed-form membership test for the disk centred on -1."""
        x = c.real + 1
        return x * x + c.imag * c.imag <= self._sixteenth

    def classify(self, c: HighPrecisionComplex) -> EscapeResult:
        """
        Decide whether ``c`` belongs to the set.

        Args:
            c: Point of the complex plane

        Returns:
            BOUNDED, or an escaped result carrying the escape iteration
        """
        return self.iterate(c, use_shortcut=True)

    def iterate(self, c: HighPrecisionComplex, use_shortcut: bool = False) -> EscapeResult:
        """Run the iteration; the interior shortcut is skipped unless ``use_shortcut``."""
        if use_shortcut and (self.in_period2_bulb(c) or self.in_main_cardioid(c)):
            return BOUNDED
        for i, z in enumerate(self.orbit(c, self.max_iter)):
            if z.exceeds(self.escape_boundary):
                return EscapeResult.escaped_at(i)
        return BOUNDED

    def orbit(self, c: HighPrecisionComplex, steps: int) -> Iterator[HighPrecisionComplex]:
        """Yield the first ``steps`` iterates z1, z2, ... starting from z0 = 0."""
        z = HighPrecisionComplex(self._zero, self._zero)
        for _ in range(steps):
            z = z.square() + c
            yield z

    def __repr__(self) -> str:
        return (f"PointClassifier(max_iter={self.max_iter}, "
                f"escape_boundary={self.precision.format_number(self.escape_boundary)})")
