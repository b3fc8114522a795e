"""
Scrape endpoint wiring for the collector registry.
"""

from typing import Optional

from fastapi import APIRouter, FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest, start_http_server

from .errors import ExpositionError
from .logging import get_logger

METRICS_PATH = "/metrics"


class ExpositionServer:
    """Background HTTP server answering scrapes of a collector registry.

    The server runs on a daemon thread that is never joined; it lives until
    the process exits.
    """

    def __init__(self, port: int, registry: Optional[CollectorRegistry] = None, host: str = "0.0.0.0"):
        self.host = host
        self.requested_port = port
        self.registry = registry if registry is not None else REGISTRY
        self.logger = get_logger("nano_metrics.exposition")
        self._server = None
        self._thread = None

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int:
        """Bound port, which differs from the requested one when that was 0."""
        if self._server is None:
            return self.requested_port
        return self._server.server_port

    def start(self) -> "ExpositionServer":
        """Start serving scrapes."""
        if self._server is not None:
            return self

        try:
            self._server, self._thread = start_http_server(
                self.requested_port,
                addr=self.host,
                registry=self.registry
            )
        except OSError as e:
            self.logger.error(
                "Metrics endpoint failed to start",
                host=self.host,
                port=self.requested_port,
                error=str(e)
            )
            raise ExpositionError(
                f"Cannot serve metrics on {self.host}:{self.requested_port}",
                details={"host": self.host, "port": self.requested_port, "error": str(e)}
            ) from e

        self.logger.info("Metrics endpoint started", host=self.host, port=self.port, path=METRICS_PATH)
        return self


def metrics_router(registry: Optional[CollectorRegistry] = None) -> APIRouter:
    """Router exposing the scrape route, for hosts that already run an ASGI server."""
    target = registry if registry is not None else REGISTRY
    router = APIRouter()

    @router.get(METRICS_PATH)
    async def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(target),
            media_type=CONTENT_TYPE_LATEST
        )

    return router


def create_app(registry: Optional[CollectorRegistry] = None) -> FastAPI:
    """Create a FastAPI application serving only the scrape route."""
    app = FastAPI(
        title="Metrics",
        docs_url=None,
        redoc_url=None,
    )
    app.include_router(metrics_router(registry))
    return app
