"""
Placement of sampled points into a dense row-major pixel buffer.
"""

from typing import Iterable, Tuple
import logging

import numpy as np

from ..core.exceptions import PixelIndexError
from ..core.sampling import SamplePoint
from ..core.viewport import ViewportMapper
from .coloring import ColorRGB

logger = logging.getLogger(__name__)


class PixelBuffer:
    """
    Row-major RGB frame buffer of ``width * height`` cells.

    Cell ``(col, row)`` lives at flat index ``row * width + col``. Every
    access is bounds-checked; negative indices are rejected rather than
    wrapped.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._data = np.zeros((width * height, 3), dtype=np.uint8)

    def __len__(self) -> int:
        return self.width * self.height

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self):
            raise PixelIndexError(f"Pixel index {index} outside buffer of {len(self)} cells")
        return index

    def __getitem__(self, index: int) -> ColorRGB:
        r, g, b = self._data[self._check(index)]
        return ColorRGB(int(r), int(g), int(b))

    def __setitem__(self, index: int, color: ColorRGB) -> None:
        self._data[self._check(index)] = color.to_tuple()

    def index_of(self, col: int, row: int) -> int:
        """Flat index of cell (col, row)."""
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise PixelIndexError(f"Pixel ({col}, {row}) outside {self.width}x{self.height} frame")
        return row * self.width + col

    def get_pixel(self, col: int, row: int) -> ColorRGB:
        return self[self.index_of(col, row)]

    def to_array(self) -> np.ndarray:
        """Copy of the buffer shaped (height, width, 3), dtype uint8."""
        return self._data.reshape(self.height, self.width, 3).copy()

    def tobytes(self) -> bytes:
        """Packed RGB bytes, top row first."""
        return self._data.tobytes()

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


class ImageAssembler:
    """Write each sample's color into the buffer cell its coordinate maps to."""

    def __init__(self, mapper: ViewportMapper):
        self.mapper = mapper

    def assemble(self, samples: Iterable[SamplePoint]) -> PixelBuffer:
        """
        Build the pixel buffer for a sampled frame.

        Args:
            samples: Sample points of the frame, in any order

        Returns:
            Filled pixel buffer

        Raises:
            PixelIndexError: a sample maps outside the frame
        """
        buffer = PixelBuffer(self.mapper.width, self.mapper.height)

        count = 0
        for sample in samples:
            col, row = self.mapper.plane_to_pixel(sample.plane)
            # A column past the right edge would silently land on the next row.
            buffer[buffer.index_of(col, row)] = sample.color
            count += 1

        if count != len(buffer):
            logger.warning(f"Assembled {count} samples into a buffer of {len(buffer)} cells")
        else:
            logger.debug(f"Assembled {count} samples")
        return buffer
