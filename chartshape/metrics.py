"""Self-monitoring metrics exposed through prometheus_client."""
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class SelfMetrics:
    """Counters and timings for normalization and layout runs."""

    def __init__(self, registry=None, prefix=""):
        if registry is None:
            # Custom registry keeps default Python/process metrics out
            registry = CollectorRegistry()
        self.registry = registry

        self.series_normalized_total = Counter(
            f"{prefix}series_normalized_total",
            "Total number of series produced by the normalizer",
            ["shape"],
            registry=registry
        )

        self.points_total = Counter(
            f"{prefix}points_total",
            "Total number of points processed",
            ["stage"],
            registry=registry
        )

        self.layout_duration_seconds = Histogram(
            f"{prefix}layout_duration_seconds",
            "Duration of each layout run in seconds",
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=registry
        )

        self.errors_total = Counter(
            f"{prefix}errors_total",
            "Total number of failed layout runs",
            ["stage"],
            registry=registry
        )

    def record_series(self, shape: str, count: int):
        """Record normalized series."""
        self.series_normalized_total.labels(shape=shape).inc(count)

    def record_points(self, stage: str, count: int):
        """Record processed points."""
        self.points_total.labels(stage=stage).inc(count)

    def record_duration(self, duration: float):
        """Record layout run duration."""
        self.layout_duration_seconds.observe(duration)

    def record_error(self, stage: str):
        """Record failed run."""
        self.errors_total.labels(stage=stage).inc()

    def render_latest(self) -> bytes:
        """Prometheus text exposition of this registry."""
        return generate_latest(self.registry)
