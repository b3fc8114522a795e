"""
Process-wide reporter singleton and application bootstrap.

Prefer constructing a :class:`PrometheusReporter` at startup and passing it
to whatever reports metrics. :func:`get_prometheus_reporter` exists for call
sites that need an ambient instance.
"""

import threading
from typing import Mapping, Optional

from prometheus_client import CollectorRegistry

from .config import MetricsConfig, get_config
from .errors import MetricsError
from .exposition import ExpositionServer
from .logging import configure_logging, get_logger, set_reporter_context
from .reporter import PrometheusReporter

logger = get_logger("nano_metrics.registry")

_reporter: Optional[PrometheusReporter] = None
_lock = threading.Lock()


def get_prometheus_reporter(
    port: int,
    game: str,
    server_type: str,
    const_labels: Optional[Mapping[str, str]] = None,
    *,
    additional_labels: Optional[Mapping[str, str]] = None,
    registry: Optional[CollectorRegistry] = None,
    host: str = "0.0.0.0",
) -> PrometheusReporter:
    """Get the reporter singleton, creating it on first use.

    The first successful call builds the reporter, registers its collectors
    and starts the scrape endpoint; its arguments win. Later calls return the
    same instance and ignore their arguments. Concurrent first callers block
    until that single initialization finishes.

    Raises:
        RegistrationError: collectors could not be registered.
        ExpositionError: the scrape endpoint could not bind ``port``.

    On failure the singleton stays unset, so the caller decides whether to
    abort the process.
    """
    global _reporter

    reporter = _reporter
    if reporter is not None:
        logger.debug("Reporter already initialized, ignoring arguments", port=port, game=game, server_type=server_type)
        return reporter

    with _lock:
        if _reporter is not None:
            logger.debug("Reporter already initialized, ignoring arguments", port=port, game=game, server_type=server_type)
            return _reporter

        reporter = PrometheusReporter(
            game,
            server_type,
            const_labels=const_labels,
            additional_labels=additional_labels,
            registry=registry,
        )
        reporter.register_metrics()
        try:
            reporter.server = ExpositionServer(port, registry=reporter.registry, host=host).start()
        except MetricsError:
            reporter.unregister_metrics()
            raise

        set_reporter_context(game, server_type)
        _reporter = reporter
        return reporter


def reset_prometheus_reporter() -> None:
    """Forget the singleton (for testing)."""
    global _reporter
    with _lock:
        _reporter = None


def bootstrap_reporter(config: Optional[MetricsConfig] = None) -> PrometheusReporter:
    """Acquire the reporter from configuration, exiting the process on failure."""
    config = config or get_config()
    configure_logging(config.log_level)
    set_reporter_context(config.game, config.server_type)

    try:
        return get_prometheus_reporter(
            config.port,
            config.game,
            config.server_type,
            config.const_labels,
            additional_labels=config.additional_labels,
            host=config.host,
        )
    except MetricsError as e:
        logger.error("Metrics initialization failed", **e.to_dict())
        raise SystemExit(1) from e
