"""
Main API classes for fractal generation.

This module provides the high-level interface for rendering, combining the
precision backend, viewport mapping, classification, coloring, assembly and
image export into one pipeline.
"""

from typing import Optional, Union, Dict, Any, Callable
from dataclasses import dataclass, asdict
from pathlib import Path
import logging
import time

import mpmath

from .core.exceptions import ConfigurationError
from .core.math_functions import EscapeResult, PointClassifier
from .core.precision import DEFAULT_DIGITS, HighPrecisionComplex, PrecisionConfig
from .core.sampling import FrameSampler
from .core.viewport import DEFAULT_ASPECT, ViewportMapper, viewport_from_center
from .rendering.assembly import ImageAssembler, PixelBuffer
from .rendering.coloring import ColorRGB, Colorizer
from .rendering.image_output import ImageExporter, RenderMetadata
from .acceleration.multiprocessing import MultiprocessingSampler

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""

    # Image parameters
    width: int = 640
    height: int = 360

    # Viewport; decimal strings keep full precision
    center_x: str = "-0.75"
    center_y: str = "0.0"
    zoom: str = "3.5"
    aspect: str = DEFAULT_ASPECT

    # Iteration parameters
    max_iterations: int = 100
    escape_boundary: str = "2.0"

    # Quality and precision
    precision: Union[str, int] = DEFAULT_DIGITS  # 'double' or number of digits

    # Performance
    workers: int = 1

    # Output
    output_format: str = 'png'
    jpeg_quality: int = 95
    save_metadata: bool = True

    def validate(self):
        """Validate configuration parameters."""
        for name in ('width', 'height', 'max_iterations', 'workers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("Width and height must be positive")

        if self.max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")

        if self.workers < 1:
            raise ConfigurationError("workers must be >= 1")

        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigurationError("jpeg_quality must be between 1 and 100")

        try:
            PrecisionConfig(self.precision)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        values = {}
        for name in ('center_x', 'center_y', 'zoom', 'aspect', 'escape_boundary'):
            try:
                values[name] = mpmath.mpf(str(getattr(self, name)))
            except (TypeError, ValueError):
                raise ConfigurationError(f"{name} must be a number, got {getattr(self, name)!r}") from None

        for name in ('zoom', 'aspect', 'escape_boundary'):
            if values[name] <= 0:
                raise ConfigurationError(f"{name} must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class FractalRenderer:
    """Main fractal rendering engine."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)

        Raises:
            ConfigurationError: invalid configuration or degenerate viewport
        """
        self.config = config or RenderConfig()
        self.config.validate()

        self.precision_config = PrecisionConfig(self.config.precision)
        self.viewport = viewport_from_center(
            self.precision_config,
            str(self.config.center_x), str(self.config.center_y),
            str(self.config.zoom), str(self.config.aspect)
        )
        self.mapper = ViewportMapper(self.viewport, self.config.width,
                                     self.config.height, self.precision_config)
        self.classifier = PointClassifier(self.precision_config, self.config.max_iterations,
                                          str(self.config.escape_boundary))
        self.colorizer = Colorizer()
        self.sampler = FrameSampler(self.mapper, self.classifier, self.colorizer)
        self.assembler = ImageAssembler(self.mapper)
        self.image_exporter = ImageExporter()
        self.last_render_time = 0.0

        logger.debug(f"FractalRenderer initialized: {self.mapper}, "
                     f"precision={self.config.precision}")

    def render(self, progress_callback: Optional[Callable[[int, int], None]] = None) -> PixelBuffer:
        """
        Render the configured frame.

        Args:
            progress_callback: Called as ``callback(rows_done, rows_total)``

        Returns:
            The assembled pixel buffer
        """
        start_time = time.time()

        logger.info(f"Starting render: {self.config.width}x{self.config.height}, "
                    f"center=({self.config.center_x}, {self.config.center_y}), "
                    f"zoom={self.config.zoom}, precision={self.config.precision}")

        if self.config.workers > 1:
            samples = MultiprocessingSampler(self.config.workers).sample(
                self.config, self.precision_config, progress_callback)
        else:
            samples = self.sampler.sample(progress_callback)

        # Every sample is present before assembly starts.
        buffer = self.assembler.assemble(samples)

        self.last_render_time = time.time() - start_time
        logger.info(f"Render complete: {self.last_render_time:.2f}s")
        return buffer

    def render_to_file(self, output_path: Union[str, Path],
                       progress_callback: Optional[Callable[[int, int], None]] = None) -> Path:
        """
        Render the frame and encode it to ``output_path``.

        A path without a suffix gets the configured output format.
        """
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_suffix(f".{self.config.output_format}")

        buffer = self.render(progress_callback)
        metadata = self.build_metadata(self.last_render_time) if self.config.save_metadata else None
        return self.image_exporter.save_image(buffer, output_path, metadata, self.config.jpeg_quality)

    def build_metadata(self, render_time: float = 0.0) -> RenderMetadata:
        return RenderMetadata(
            center_x=str(self.config.center_x),
            center_y=str(self.config.center_y),
            zoom=str(self.config.zoom),
            resolution=(self.config.width, self.config.height),
            max_iterations=self.config.max_iterations,
            escape_boundary=str(self.config.escape_boundary),
            precision=self.config.precision,
            render_time_seconds=render_time,
            workers=self.config.workers,
        )

    def classify_point(self, x: Union[str, Any], y: Union[str, Any]) -> EscapeResult:
        """Classify a single plane coordinate with this renderer's settings."""
        c = HighPrecisionComplex(self.precision_config.number(x), self.precision_config.number(y))
        return self.classifier.classify(c)

    def color_of(self, result: EscapeResult) -> ColorRGB:
        return self.colorizer.colorize(result)

    def update_config(self, **kwargs) -> 'FractalRenderer':
        """Return a renderer for this configuration with ``kwargs`` overridden."""
        for key in kwargs:
            if not hasattr(self.config, key):
                raise ConfigurationError(f"Unknown configuration parameter: {key}")

        return FractalRenderer(RenderConfig(**{**self.config.to_dict(), **kwargs}))
