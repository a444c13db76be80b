"""
Unit tests for configuration and logging helpers.
"""

import pytest
import structlog
from pydantic import ValidationError

from config.settings import AppSettings, KubernetesSettings, ServerSettings, get_settings
from kubestate.utils.logging import get_logger, renderer_for


class TestConfiguration:
    """Test configuration loading."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = AppSettings()

        assert settings.env in ["development", "staging", "production"]
        assert settings.log_level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        assert settings.collector_list == ["poddisruptionbudget"]
        assert settings.metrics_prefix == "ksm"

    def test_kubernetes_settings_defaults(self):
        """Test Kubernetes settings defaults watch every namespace."""
        kube = KubernetesSettings()

        assert kube.namespace_list == []
        assert kube.watch_timeout_seconds >= 1
        assert kube.retry_delay_seconds >= 0

    def test_namespaces_from_env(self, monkeypatch):
        """Test comma separated namespaces from the environment."""
        monkeypatch.setenv("KUBERNETES_NAMESPACES", "kube-system, default,,monitoring")

        assert KubernetesSettings().namespace_list == ["kube-system", "default", "monitoring"]

    def test_collectors_from_env(self, monkeypatch):
        """Test enabled collectors from the environment."""
        monkeypatch.setenv("APP_COLLECTORS", "poddisruptionbudget,deployment")

        assert AppSettings().collector_list == ["poddisruptionbudget", "deployment"]

    def test_server_settings_validation(self):
        """Test the port must be a valid TCP port."""
        assert ServerSettings(port=9100).port == 9100

        with pytest.raises(ValidationError):
            ServerSettings(port=0)

    def test_metrics_prefix_validation(self):
        """Test the metrics prefix must be a valid name fragment."""
        assert AppSettings(metrics_prefix="kube_state").metrics_prefix == "kube_state"

        with pytest.raises(ValidationError):
            AppSettings(metrics_prefix="bad-prefix")

    def test_get_settings_is_cached(self):
        """Test settings are built once."""
        assert get_settings() is get_settings()


class TestLogging:
    """Test logging helpers."""

    def test_get_logger(self):
        """Test a logger can be created."""
        logger = get_logger("test")

        assert logger is not None

    def test_renderer_for_json(self):
        """Test JSON output renders events as JSON objects."""
        renderer = renderer_for("json")

        assert renderer(None, "info", {"event": "Shard listed", "count": 2}) == (
            '{"event": "Shard listed", "count": 2}'
        )

    def test_renderer_for_console(self):
        """Test console output uses the dev renderer."""
        assert isinstance(renderer_for("console"), structlog.dev.ConsoleRenderer)

    def test_renderer_for_unknown_format(self):
        """Test unknown formats are rejected."""
        with pytest.raises(ValueError, match="xml"):
            renderer_for("xml")
