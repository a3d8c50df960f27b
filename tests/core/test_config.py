"""Tests for library settings."""

from apatite.core.config import (
    Settings,
    get_settings,
    resolve_approx_precision,
    resolve_precision,
)
from apatite.linalg import Vector


class TestSettingsDefaults:
    """Test the built-in defaults."""

    def test_defaults(self, monkeypatch):
        for name in ("PRECISION", "APPROX_PRECISION", "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE"):
            monkeypatch.delenv(f"APATITE_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.PRECISION == 1e-6
        assert settings.APPROX_PRECISION == 1e-5
        assert settings.LOG_LEVEL == "WARNING"
        assert settings.LOG_FORMAT == "text"
        assert settings.LOG_FILE is None

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_no_import_time_snapshot(self, override_settings):
        """Test that settings are only reachable through the live accessor."""
        import apatite.core
        import apatite.core.config

        assert not hasattr(apatite.core.config, "settings")
        assert "settings" not in apatite.core.__all__
        assert override_settings(PRECISION=0.25) is get_settings()
        assert get_settings().PRECISION == 0.25


class TestEnvironmentOverrides:
    """Test APATITE_* environment variables."""

    def test_override_precision(self, override_settings):
        settings = override_settings(PRECISION=0.1)
        assert settings.PRECISION == 0.1
        assert resolve_precision(None) == 0.1

    def test_explicit_value_wins(self, override_settings):
        override_settings(PRECISION=0.1, APPROX_PRECISION=0.2)
        assert resolve_precision(0.5) == 0.5
        assert resolve_approx_precision(0.5) == 0.5
        assert resolve_approx_precision(None) == 0.2

    def test_predicates_read_precision_at_call_time(self, override_settings):
        """Test that changing the settings changes predicate results."""
        v = Vector(1.0, 0.0)
        w = Vector(1.0, 0.05)
        override_settings(PRECISION=1e-6)
        assert not v.is_parallel_to(w)
        override_settings(PRECISION=0.1)
        assert v.is_parallel_to(w)

    def test_compare_uses_approx_precision(self, override_settings):
        override_settings(APPROX_PRECISION=0.1)
        assert Vector(1.0).compare(Vector(1.05))
