"""HTTP API for layout runs using FastAPI."""
from typing import Any, List, Optional
from fastapi import FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel
import logging
import time

from chartshape.pipeline import LayoutPipeline
from chartshape.ticks import max_tick_values

logger = logging.getLogger(__name__)


class LayoutRequest(BaseModel):
    """Raw chart data plus optional per-request layout overrides."""
    data: Any = None
    categories: Optional[List[Any]] = None
    max_ticks: Optional[int] = None


class TicksRequest(BaseModel):
    """Request to sample an axis domain."""
    domain: List[Any]
    max_ticks: int


class LogLevelRequest(BaseModel):
    """Request to change log level."""
    level: str


class LayoutAPI:
    """FastAPI wrapper around a layout pipeline."""

    def __init__(self, pipeline: LayoutPipeline):
        """
        Initialize layout API.

        Args:
            pipeline: Pipeline that serves normalize and stack requests
        """
        self.pipeline = pipeline
        self.app = FastAPI(title="Chart Series Layout API")

        self._setup_routes()

    def _run(self, request: LayoutRequest, stacked: bool) -> dict:
        if request.max_ticks is not None and request.max_ticks < 0:
            raise HTTPException(status_code=400, detail="max_ticks must be >= 0")

        try:
            result = self.pipeline.run(
                request.data,
                categories=request.categories,
                stacked=stacked,
                max_ticks=request.max_ticks
            )
        except Exception as e:
            logger.error(f"Error running layout: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return result.to_dict()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/healthz")
        async def healthz():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": time.time()}

        @self.app.get("/status")
        async def status():
            """Get current pipeline status."""
            layout = self.pipeline.config.layout
            return {
                "uptime_seconds": time.time() - self.pipeline.start_time,
                "run_count": self.pipeline.run_count,
                "layout": {
                    "stacked": layout.stacked,
                    "max_ticks": layout.max_ticks,
                    "categories": layout.categories,
                    "sort_series": layout.sort_series,
                },
            }

        @self.app.post("/normalize")
        async def normalize(request: LayoutRequest):
            """Normalize raw data into canonical series."""
            return self._run(request, stacked=False)

        @self.app.post("/stack")
        async def stack(request: LayoutRequest):
            """Normalize raw data and add stacking baselines."""
            return self._run(request, stacked=True)

        @self.app.post("/ticks")
        async def ticks(request: TicksRequest):
            """Sample evenly spaced tick values from a domain."""
            if request.max_ticks < 0:
                raise HTTPException(status_code=400, detail="max_ticks must be >= 0")
            return {"ticks": list(max_tick_values(request.max_ticks, request.domain))}

        @self.app.post("/control/loglevel")
        async def set_log_level(request: LogLevelRequest):
            """Change log level at runtime."""
            level = request.level.upper()

            if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid log level: {level}"
                )

            logging.getLogger().setLevel(getattr(logging, level))
            logger.info(f"Log level changed to: {level}")

            return {
                "status": "log_level_changed",
                "level": level,
                "timestamp": time.time()
            }

        @self.app.get("/metrics")
        async def metrics():
            """Prometheus exposition of self-metrics."""
            if not self.pipeline.self_metrics:
                raise HTTPException(status_code=404, detail="Self-metrics disabled")
            return Response(
                content=self.pipeline.self_metrics.render_latest(),
                media_type=CONTENT_TYPE_LATEST
            )

    def run(self, host: str = "0.0.0.0", port: int = 8082):
        """Run the API server."""
        import uvicorn
        uvicorn.run(self.app, host=host, port=port, log_level="info")
