"""
nano-metrics package.

Declares a fixed catalog of counters, gauges and summaries, registers them
once with a Prometheus collector registry, and serves them for scraping on
`/metrics`:

- catalog: metric names, kinds and help text
- labels: completion of observation label sets with process-wide defaults
- reporter: collector construction and the report_* API
- registry: process-wide reporter singleton and bootstrap
- exposition: background scrape server and FastAPI route
- config / logging / errors: settings, structured logging, error types
"""

from .catalog import (
    CATALOG,
    CONNECTED_CLIENTS,
    EXCEEDED_RATE_LIMITING,
    GOROUTINES,
    HEAP_OBJECTS,
    HEAP_SIZE,
    MESSAGE_COUNT,
    PROCESS_DELAY,
    RESPONSE_TIME,
    MetricDefinition,
    MetricKind,
)
from .errors import ExpositionError, MetricsError, RegistrationError
from .labels import LabelReconciler
from .registry import bootstrap_reporter, get_prometheus_reporter
from .reporter import PrometheusReporter

__all__ = [
    "CATALOG",
    "CONNECTED_CLIENTS",
    "EXCEEDED_RATE_LIMITING",
    "GOROUTINES",
    "HEAP_OBJECTS",
    "HEAP_SIZE",
    "MESSAGE_COUNT",
    "PROCESS_DELAY",
    "RESPONSE_TIME",
    "ExpositionError",
    "LabelReconciler",
    "MetricDefinition",
    "MetricKind",
    "MetricsError",
    "PrometheusReporter",
    "RegistrationError",
    "bootstrap_reporter",
    "get_prometheus_reporter",
]
