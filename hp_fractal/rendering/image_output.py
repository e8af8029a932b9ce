"""
Image export and format handling for fractal rendering.

This module encodes a finished pixel buffer with Pillow, supporting PNG,
TIFF, JPEG and PPM output with render metadata embedded where the format
allows it.
"""

import numpy as np
from typing import Dict, Any, Optional, Union
from pathlib import Path
from dataclasses import dataclass, asdict, field
import json
import logging
from datetime import datetime

from PIL import Image, PngImagePlugin

from ..core.exceptions import EncodingError
from .assembly import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    # Viewport, as decimal strings so no precision is lost
    center_x: str
    center_y: str
    zoom: str
    resolution: tuple  # width, height

    # Iteration parameters
    max_iterations: int
    escape_boundary: str
    precision: Union[str, int]

    # Timing and performance
    render_time_seconds: float = 0.0
    workers: int = 1

    # Generation info
    timestamp: str = ""
    software_version: str = ""

    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Set default timestamp and version if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()
        if not self.software_version:
            from .. import __version__
            self.software_version = __version__

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        data = asdict(self)
        data['resolution'] = list(self.resolution)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        data['resolution'] = tuple(data['resolution'])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


class ImageExporter:
    """Image export with metadata support."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.tiff': self._save_tiff,
            '.tif': self._save_tiff,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
            '.ppm': self._save_ppm,
        }

    def save_image(self, image: Union[PixelBuffer, np.ndarray], filepath: Path,
                   metadata: Optional[RenderMetadata] = None,
                   quality: int = 95) -> Path:
        """
        Save an RGB frame to file with metadata.

        Args:
            image: Pixel buffer, or uint8 array shaped (height, width, 3)
            filepath: Output file path; the suffix selects the format
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)

        Returns:
            The path written

        Raises:
            EncodingError: unsupported format or the write failed
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise EncodingError(f"Unsupported format '{suffix}'. Supported: {supported}")

        image_array = self._prepare_image_array(image)
        pil_image = Image.fromarray(image_array)

        save_method = self.supported_formats[suffix]
        try:
            save_method(pil_image, filepath, metadata, quality)
        except (OSError, ValueError) as e:
            raise EncodingError(f"Could not write {filepath}: {e}") from e

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def _prepare_image_array(self, image: Union[PixelBuffer, np.ndarray]) -> np.ndarray:
        """Prepare and validate image array for export."""
        if isinstance(image, PixelBuffer):
            return image.to_array()

        image_array = np.asarray(image)
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise EncodingError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")
        if image_array.dtype != np.uint8:
            raise EncodingError(f"Expected uint8 image array, got {image_array.dtype}")
        return image_array

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", f"Mandelbrot set at ({metadata.center_x}, {metadata.center_y})")
            pnginfo.add_text("Software", f"hp-fractal v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_tiff(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as TIFF with metadata."""
        save_kwargs = {'format': 'TIFF', 'compression': 'tiff_lzw'}

        if metadata:
            save_kwargs['description'] = metadata.to_json()
            save_kwargs['software'] = f"hp-fractal v{metadata.software_version}"

        pil_image.save(filepath, **save_kwargs)

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG; metadata goes to a companion JSON file."""
        pil_image.save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            self._save_companion_json(filepath, metadata)

    def _save_ppm(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as binary PPM; metadata goes to a companion JSON file."""
        pil_image.save(filepath, "PPM")

        if metadata:
            self._save_companion_json(filepath, metadata)

    def _save_companion_json(self, filepath: Path, metadata: RenderMetadata) -> None:
        json_path = filepath.with_suffix('.json')
        with open(json_path, 'w') as f:
            f.write(metadata.to_json())
        logger.info(f"Saved metadata: {json_path}")


def read_png_metadata(filepath: Path) -> Optional[RenderMetadata]:
    """Read the render metadata embedded in a PNG written by ``ImageExporter``."""
    with Image.open(filepath) as img:
        text = getattr(img, 'text', {}).get('FractalMetadata')
    if text is None:
        return None
    return RenderMetadata.from_json(text)
