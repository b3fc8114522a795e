"""
Shared fixtures for nano-metrics tests.
"""

import pytest
from prometheus_client import CollectorRegistry

from nano_metrics.logging import clear_context
from nano_metrics.registry import reset_prometheus_reporter
from nano_metrics.reporter import PrometheusReporter


@pytest.fixture(autouse=True)
def reset_singleton():
    """Start every test without a reporter singleton."""
    reset_prometheus_reporter()
    yield
    reset_prometheus_reporter()
    clear_context()


@pytest.fixture
def registry():
    """Create an isolated collector registry."""
    return CollectorRegistry()


@pytest.fixture
def reporter(registry):
    """Create a registered reporter with one additional label."""
    reporter = PrometheusReporter(
        "mygame",
        "frontend",
        const_labels={"region": "us"},
        additional_labels={"shard": "default"},
        registry=registry,
    )
    reporter.register_metrics()
    return reporter


@pytest.fixture
def base_labels():
    """Constant labels every series of the reporter fixture carries."""
    return {"game": "mygame", "serverType": "frontend", "region": "us"}
