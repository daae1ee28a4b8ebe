"""Layout pipeline: normalize, optionally stack, then sample ticks."""
import time
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from chartshape.config import Config
from chartshape.metrics import SelfMetrics
from chartshape.normalize import as_sequence, classify_shape, count_points, normalize_series
from chartshape.series import SeriesCollection
from chartshape.stack import stack_layout, x_domain
from chartshape.ticks import max_tick_values

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Output of a single pipeline run."""
    series: SeriesCollection
    shape: str
    stacked: bool = False
    ticks: List[Any] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "series": list(self.series),
            "shape": self.shape,
            "stacked": self.stacked,
            "ticks": list(self.ticks),
        }


class LayoutPipeline:
    """Runs raw chart data through the normalizer and stacked layout."""

    def __init__(self, config: Config, self_metrics: Optional[SelfMetrics] = None):
        self.config = config
        self.self_metrics = self_metrics
        self.run_count = 0
        self.start_time = time.time()

        if self.self_metrics is None and config.metrics.enabled:
            self.self_metrics = SelfMetrics(prefix=config.metrics.prefix)

        logger.info("Layout pipeline initialized")

    def run(
        self,
        data: Any,
        categories: Optional[Sequence[Any]] = None,
        stacked: Optional[bool] = None,
        max_ticks: Optional[int] = None
    ) -> LayoutResult:
        """
        Execute one run. Arguments left as None fall back to the layout config.
        """
        layout = self.config.layout
        categories = categories if categories is not None else layout.categories
        stacked = stacked if stacked is not None else layout.stacked
        max_ticks = max_ticks if max_ticks is not None else layout.max_ticks

        run_start = time.time()
        stage = "normalize"
        try:
            # One-shot iterables are materialised once and shared by both steps
            data = as_sequence(data)
            shape = classify_shape(data)
            if stacked:
                stage = "stack"
                # The layout normalizes internally
                series = stack_layout(categories, layout.sort_series)(data)
            else:
                series = normalize_series(data, categories, sort=layout.sort_series)

            stage = "ticks"
            ticks = x_domain(series)
            if max_ticks is not None:
                ticks = list(max_tick_values(max_ticks, ticks))
        except Exception as e:
            logger.error(f"Error in {stage} stage: {e}")
            if self.self_metrics:
                self.self_metrics.record_error(stage)
            raise

        duration = time.time() - run_start
        points = count_points(series)
        if self.self_metrics:
            self.self_metrics.record_series(shape.value, len(series))
            self.self_metrics.record_points("stack" if stacked else "normalize", points)
            self.self_metrics.record_duration(duration)

        self.run_count += 1
        logger.info(
            f"Run {self.run_count}: {shape.value} -> {len(series)} series, "
            f"{points} points, {len(ticks)} ticks in {duration:.4f}s"
            + (" (stacked)" if stacked else "")
        )

        return LayoutResult(series=series, shape=shape.value, stacked=stacked, ticks=ticks)
