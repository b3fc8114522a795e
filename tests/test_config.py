"""
Tests for MetricsConfig.
"""

import pytest
from pydantic import ValidationError

from nano_metrics.config import MetricsConfig, get_config


def test_defaults(monkeypatch):
    """Test default settings."""
    monkeypatch.delenv("NANO_METRICS_PORT", raising=False)
    config = MetricsConfig()

    assert config.port == 9090
    assert config.host == "0.0.0.0"
    assert config.const_labels == {}
    assert config.additional_labels == {}
    assert config.log_level == "info"


def test_from_environment(monkeypatch):
    """Test settings are read from prefixed environment variables."""
    monkeypatch.setenv("NANO_METRICS_PORT", "9100")
    monkeypatch.setenv("NANO_METRICS_GAME", "mygame")
    monkeypatch.setenv("NANO_METRICS_SERVER_TYPE", "frontend")
    monkeypatch.setenv("NANO_METRICS_CONST_LABELS", '{"region": "us"}')
    monkeypatch.setenv("NANO_METRICS_ADDITIONAL_LABELS", '{"shard": "default"}')

    config = get_config()

    assert config.port == 9100
    assert config.game == "mygame"
    assert config.server_type == "frontend"
    assert config.const_labels == {"region": "us"}
    assert config.additional_labels == {"shard": "default"}


def test_overrides_win(monkeypatch):
    """Test explicit values take precedence over the environment."""
    monkeypatch.setenv("NANO_METRICS_PORT", "9100")
    assert get_config(port=9200).port == 9200


def test_invalid_port():
    """Test out of range ports are rejected."""
    with pytest.raises(ValidationError):
        MetricsConfig(port=70000)
