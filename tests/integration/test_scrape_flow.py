"""
End-to-end tests: acquire the reporter, report, scrape.
"""

import httpx
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

from nano_metrics import CONNECTED_CLIENTS, EXCEEDED_RATE_LIMITING, RESPONSE_TIME
from nano_metrics.exposition import create_app
from nano_metrics.registry import get_prometheus_reporter


def scraped_samples(text):
    return {
        (sample.name, tuple(sorted(sample.labels.items()))): sample.value
        for family in text_string_to_metric_families(text)
        for sample in family.samples
    }


class TestScrapeFlow:
    """Integration tests for reporting and scraping."""

    def test_gauge_visible_on_scrape(self, registry):
        """Test a reported gauge appears with constant labels."""
        reporter = get_prometheus_reporter(0, "mygame", "frontend", {"region": "us"}, registry=registry, host="127.0.0.1")

        reporter.report_gauge(CONNECTED_CLIENTS, {}, 42)

        response = httpx.get(f"http://127.0.0.1:{reporter.server.port}/metrics", trust_env=False)
        assert response.status_code == 200

        samples = scraped_samples(response.text)
        key = (
            "nano_acceptor_connected_clients",
            (("game", "mygame"), ("region", "us"), ("serverType", "frontend")),
        )
        assert samples[key] == 42.0

    def test_all_kinds_with_additional_labels(self, registry):
        """Test every kind is exposed with completed label sets."""
        reporter = get_prometheus_reporter(
            0,
            "mygame",
            "backend",
            additional_labels={"shard": "default"},
            registry=registry,
            host="127.0.0.1",
        )

        reporter.report_summary(RESPONSE_TIME, {"route": "room.join"}, 150.0)
        reporter.report_count(EXCEEDED_RATE_LIMITING, {"shard": "3"}, 2)
        reporter.report_gauge("not_in_catalog", {}, 1.0)

        samples = scraped_samples(TestClient(create_app(registry)).get("/metrics").text)

        summary_labels = (("game", "mygame"), ("route", "room.join"), ("serverType", "backend"), ("shard", "default"))
        counter_labels = (("game", "mygame"), ("serverType", "backend"), ("shard", "3"))
        assert samples[("nano_handler_response_time_ns_count", summary_labels)] == 1.0
        assert samples[("nano_handler_response_time_ns_sum", summary_labels)] == 150.0
        assert samples[("nano_acceptor_exceeded_rate_limiting_total", counter_labels)] == 2.0
        assert not any("not_in_catalog" in name for name, _ in samples)
