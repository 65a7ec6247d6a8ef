"""Unit tests for service settings and logging setup."""

import json

import pytest
import structlog

from madurez_digital.observability import configure_logging, get_logger
from madurez_digital.settings import Settings


class TestSettings:
    """Tests for environment-driven Settings."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.likert_min == 1
        assert settings.likert_max == 5
        assert settings.report_endpoint_path == "/api/survey/generate-report"
        assert settings.report_timeout_seconds is None
        assert settings.pdf_filename == "reporte-madurez-digital.pdf"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MADUREZ_REPORT_SERVICE_URL", "http://informes.internal:8080")
        monkeypatch.setenv("MADUREZ_REPORT_TIMEOUT_SECONDS", "45")
        settings = Settings()
        assert settings.report_service_url == "http://informes.internal:8080"
        assert settings.report_timeout_seconds == 45.0


class TestLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize("log_json", [True, False])
    def test_configure_logging_emits(
        self, log_json: bool, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(Settings(log_json=log_json, log_level="debug"))
        get_logger("tests").info("Survey session started", survey_id="abc")
        assert "Survey session started" in capsys.readouterr().out
        structlog.reset_defaults()

    def test_events_carry_logger_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(Settings(log_json=True, log_level="info"))
        get_logger("madurez_digital.core.scoring").info("Scores computed", pillar_count=4)
        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        structlog.reset_defaults()
        assert event["logger"] == "madurez_digital.core.scoring"
        assert event["event"] == "Scores computed"
        assert event["level"] == "info"
        assert event["pillar_count"] == 4
