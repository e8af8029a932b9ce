"""
Multiprocessing backend for parallel frame sampling.

Rows are split into disjoint contiguous ranges and each range is sampled in
a separate worker process. Workers only produce sample points; the caller
assembles the frame once every range has finished.
"""

from typing import List, Optional, Tuple, Callable, Any
import multiprocessing as mp
import logging
import time
from dataclasses import dataclass
from concurrent.futures import ProcessPoolExecutor, as_completed

from ..core.precision import PrecisionConfig, Vector2
from ..core.sampling import SamplePoint
from ..rendering.coloring import ColorRGB

logger = logging.getLogger(__name__)

# (packed x, packed y, (r, g, b))
PackedSample = Tuple[Any, Any, Tuple[int, int, int]]


@dataclass(frozen=True)
class RowRange:
    """Rows ``[row_start, row_end)`` of the frame handled by one worker."""
    range_id: int
    row_start: int
    row_end: int

    @property
    def rows(self) -> int:
        return self.row_end - self.row_start


def create_row_ranges(height: int, parts: int) -> List[RowRange]:
    """
    Split ``height`` rows into at most ``parts`` disjoint, contiguous ranges.

    Args:
        height: Total frame height
        parts: Desired number of ranges

    Returns:
        List of RowRange objects covering every row exactly once
    """
    if height <= 0:
        return []
    parts = max(1, min(parts, height))
    base, extra = divmod(height, parts)

    ranges = []
    start = 0
    for range_id in range(parts):
        end = start + base + (1 if range_id < extra else 0)
        ranges.append(RowRange(range_id, start, end))
        start = end

    logger.debug(f"Created {len(ranges)} row ranges for {height} rows")
    return ranges


def sample_row_range(config, row_range: RowRange) -> List[PackedSample]:
    """
    Sample one row range in a worker process.

    Args:
        config: RenderConfig of the frame; the pipeline is rebuilt from it
        row_range: Rows to sample

    Returns:
        Packed samples, picklable without loss of precision
    """
    from ..api import FractalRenderer

    renderer = FractalRenderer(config)
    precision = renderer.precision_config

    start_time = time.time()
    packed = [
        (precision.pack(s.plane.x), precision.pack(s.plane.y), s.color.to_tuple())
        for s in renderer.sampler.iter_rows(row_range.row_start, row_range.row_end)
    ]
    logger.debug(f"Row range {row_range.range_id} sampled in {time.time() - start_time:.2f}s")
    return packed


def unpack_samples(packed: List[PackedSample], precision: PrecisionConfig) -> List[SamplePoint]:
    return [
        SamplePoint(Vector2(precision.unpack(x), precision.unpack(y)), ColorRGB(*rgb))
        for x, y, rgb in packed
    ]


def get_optimal_process_count() -> int:
    return max(1, mp.cpu_count())


class MultiprocessingSampler:
    """Parallel frame sampling over a process pool."""

    def __init__(self, num_processes: Optional[int] = None, ranges_per_process: int = 4):
        """
        Initialize multiprocessing sampler.

        Args:
            num_processes: Number of worker processes (None for CPU count)
            ranges_per_process: Row ranges queued per worker, for load balance
        """
        if num_processes is None:
            self.num_processes = get_optimal_process_count()
        else:
            self.num_processes = max(1, num_processes)

        self.ranges_per_process = max(1, ranges_per_process)
        logger.info(f"Multiprocessing sampler: {self.num_processes} processes")

    def sample(self, config, precision: PrecisionConfig,
               progress_callback: Optional[Callable[[int, int], None]] = None) -> List[SamplePoint]:
        """
        Sample a full frame in parallel.

        Returns only after every row range has completed. Any failed range
        fails the whole frame.

        Args:
            config: RenderConfig of the frame
            precision: Precision configuration of the calling renderer
            progress_callback: Called as ``callback(rows_done, rows_total)``

        Returns:
            All ``width * height`` samples in row-major order
        """
        start_time = time.time()
        ranges = create_row_ranges(config.height, self.num_processes * self.ranges_per_process)

        logger.info(f"Sampling {len(ranges)} row ranges with {self.num_processes} processes")

        results: List[Optional[List[PackedSample]]] = [None] * len(ranges)
        rows_done = 0

        with ProcessPoolExecutor(max_workers=self.num_processes) as executor:
            future_to_range = {executor.submit(sample_row_range, config, row_range): row_range
                               for row_range in ranges}

            for future in as_completed(future_to_range):
                row_range = future_to_range[future]
                try:
                    results[row_range.range_id] = future.result()
                except Exception as e:
                    logger.error(f"Row range {row_range.range_id} "
                                 f"[{row_range.row_start}, {row_range.row_end}) failed: {e}")
                    for pending in future_to_range:
                        pending.cancel()
                    raise

                rows_done += row_range.rows
                if progress_callback:
                    progress_callback(rows_done, config.height)

        samples = []
        for packed in results:
            samples.extend(unpack_samples(packed, precision))

        logger.info(f"Parallel sampling complete: {time.time() - start_time:.2f}s")
        return samples
