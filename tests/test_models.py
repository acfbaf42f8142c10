"""Unit tests for models and logging setup."""
import logging
from dataclasses import replace
from datetime import date

import pytest

from conflict_radar.errors import ValidationError
from conflict_radar.logging_config import setup_logging
from conflict_radar.models import DateRecommendation, SourceResult


class TestEvent:
    """Test cases for Event helpers."""

    def test_dedup_key_normalizes(self, make_event):
        event = make_event(title="The AI Summit!", venue="O2  Arena")
        assert event.dedup_key() == "ai summit|2024-03-15|o2 arena"

    def test_flags(self, make_event):
        event = make_event(venue=" ", image_url="", description="short")
        assert not event.has_venue
        assert not event.has_image
        assert not event.has_long_description


class TestAnalysisParams:
    """Test cases for AnalysisParams.validate and effective_window."""

    def test_valid(self, prague_params):
        prague_params.validate()

    def test_inverted_preferred_dates(self, prague_params):
        params = replace(prague_params, start_date=date(2024, 3, 20))
        with pytest.raises(ValidationError):
            params.validate()

    def test_boolean_attendees_rejected(self, prague_params):
        with pytest.raises(ValidationError):
            replace(prague_params, expected_attendees=True).validate()

    def test_effective_window_extends_to_preferred(self, prague_params):
        params = replace(prague_params, end_date=date(2024, 4, 2))
        assert params.effective_window() == (date(2024, 3, 1), date(2024, 4, 2))


class TestDisplay:
    """Test cases for status and display lines."""

    def test_source_result_status_line(self):
        ok = SourceResult(source_name="PredictHQ", events_found=3)
        failed = SourceResult(source_name="PredictHQ", success=False, error_message="timeout")
        assert ok.status_line == "PredictHQ: 3 event(s) found"
        assert failed.status_line == "PredictHQ: ERROR: timeout"

    def test_recommendation_display_line(self):
        rec = DateRecommendation(
            start_date=date(2024, 3, 15),
            end_date=date(2024, 3, 16),
            conflict_score=75,
            risk_level="High",
        )
        assert rec.display_line == "2024-03-15 → 2024-03-16: 75.0 (High)"
        assert rec.is_high_risk


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_handlers_replaced_not_stacked(self, tmp_path):
        log_file = tmp_path / "radar.log"
        setup_logging("debug", str(log_file))
        logger = setup_logging("warning")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_file_handler_writes(self, tmp_path):
        log_file = tmp_path / "radar.log"
        logger = setup_logging("INFO", str(log_file))
        logging.getLogger("conflict-radar.engine").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "[INFO] conflict-radar.engine: hello" in log_file.read_text()
        setup_logging("INFO")
