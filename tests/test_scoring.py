"""Unit tests for ConflictScorer."""
import threading
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from conflict_radar.audience import CategoryOverlapEstimator, OverlapPrediction
from conflict_radar.scoring import ConflictScorer, event_contribution, significance


def _slow_predictor(release):
    predictor = MagicMock()

    def predict(planned, candidate):
        release.wait(5)
        return OverlapPrediction(overlap_score=1.0)

    predictor.predict.side_effect = predict
    return predictor


class TestEventContribution:
    """Test cases for per-event points."""

    def test_full_profile(self, make_event):
        """20 base + 30 category + 15 venue + 10 image + 5 description."""
        event = make_event(venue="Roxy", image_url="x", description="d" * 51)
        assert event_contribution(event, "Technology") == 80

    def test_description_must_exceed_fifty_chars(self, make_event):
        """Exactly 50 characters earns nothing."""
        event = make_event(category="Sports", description="d" * 50)
        assert event_contribution(event, "Technology") == 20

    def test_significance_weights(self, make_event):
        """Venue counts double."""
        assert significance(make_event(venue="Roxy")) == 2
        assert significance(make_event(image_url="x", description="d" * 60)) == 2
        assert significance(make_event()) == 0


class TestConflictScorer:
    """Test cases for ConflictScorer.score / evaluate."""

    def setup_method(self):
        self.scorer = ConflictScorer()

    def test_no_competitors_scores_zero(self, prague_params):
        assert self.scorer.score([], 500, "Technology", prague_params) == 0

    def test_scenario_a(self, make_event, prague_params):
        """One significant same-category competitor scores 75 at 500 attendees."""
        event = make_event(title="AI Summit", venue="O2 Arena", image_url="x")
        assert self.scorer.score([event], 500, "Technology", prague_params) == 75

    def test_attendee_multiplier_boundaries(self, make_event, prague_params):
        """500 gets no boost, 501 gets x1.1, 1001 gets x1.2."""
        events = [make_event()]  # 20 + 30 = 50
        base = self.scorer.score(events, 500, "Technology", prague_params)
        medium = self.scorer.score(events, 501, "Technology", prague_params)
        large = self.scorer.score(events, 1001, "Technology", prague_params)
        assert base == 50
        assert medium == pytest.approx(55)
        assert large == pytest.approx(60)
        assert base < medium < large

    def test_tail_events_add_flat_amount(self, make_event, prague_params, monkeypatch):
        """Beyond the detailed set, each competitor adds a flat 15."""
        monkeypatch.setattr("conflict_radar.scoring.TOP_SIGNIFICANT_EVENTS", 1)
        events = [make_event(category="Other") for _ in range(3)]
        # 20 for the detailed event, 15 for each of the other two
        assert self.scorer.score(events, 100, "Technology", prague_params) == 50

    def test_most_significant_scored_in_detail(self, make_event, prague_params, monkeypatch):
        """The detailed slot goes to the most significant competitor."""
        monkeypatch.setattr("conflict_radar.scoring.TOP_SIGNIFICANT_EVENTS", 1)
        plain = make_event(category="Other")
        big = make_event(category="Other", venue="Roxy", image_url="x")
        # 20 + 15 + 10 for big, 15 for plain
        assert self.scorer.score([plain, big], 100, "Technology", prague_params) == 60

    def test_score_clamped(self, make_event, prague_params):
        """Scores never exceed 100."""
        events = [make_event(venue="Roxy", image_url="x") for _ in range(10)]
        assert self.scorer.score(events, 5000, "Technology", prague_params) == 100

    def test_failing_event_is_skipped(self, make_event, prague_params, monkeypatch):
        """An exception while scoring one event drops only that event."""
        good = make_event(title="good")
        bad = make_event(title="bad")

        import conflict_radar.scoring as scoring

        original = scoring.event_contribution

        def flaky(event, category):
            if event.title == "bad":
                raise ZeroDivisionError("boom")
            return original(event, category)

        monkeypatch.setattr(scoring, "event_contribution", flaky)
        result = self.scorer.evaluate([good, bad], 100, "Technology", prague_params)
        assert result.score == 50
        assert result.events_skipped == 1


class TestAdvancedScoring:
    """Test cases for the audience-overlap adjustment."""

    def test_predictor_overlap_scales_contribution(self, make_event, prague_params):
        """contribution x (1 + overlap x 0.5)."""
        predictor = MagicMock()
        predictor.predict.return_value = OverlapPrediction(overlap_score=0.8, reasoning=["similar"])
        scorer = ConflictScorer(overlap_predictor=predictor)
        params = replace(prague_params, enable_advanced_analysis=True)

        result = scorer.evaluate([make_event(title="Dev Days")], 100, "Technology", params)

        assert result.score == pytest.approx(50 * 1.4)
        assert result.audience_overlap.average_overlap == pytest.approx(0.8)
        assert result.audience_overlap.high_overlap_events == ["Dev Days"]
        assert result.audience_overlap.reasoning == ["similar"]

    def test_timeout_uses_fallback_weight(self, make_event, prague_params):
        """A slow predictor is abandoned and the fallback applied with weight 0.3."""
        release = threading.Event()
        scorer = ConflictScorer(
            overlap_predictor=_slow_predictor(release),
            fallback_estimator=CategoryOverlapEstimator(),
            overlap_timeout=0.05,
        )
        params = replace(prague_params, enable_advanced_analysis=True)
        try:
            score = scorer.score([make_event()], 100, "Technology", params)
        finally:
            release.set()
        # same category fallback overlap 0.8
        assert score == pytest.approx(50 * (1 + 0.8 * 0.3))

    def test_predictor_error_uses_fallback(self, make_event, prague_params):
        predictor = MagicMock()
        predictor.predict.side_effect = RuntimeError("model offline")
        scorer = ConflictScorer(overlap_predictor=predictor)
        params = replace(prague_params, enable_advanced_analysis=True)
        assert scorer.score([make_event()], 100, "Technology", params) == pytest.approx(62)

    def test_both_estimators_failing_means_no_multiplier(self, make_event, prague_params):
        predictor = MagicMock()
        predictor.predict.side_effect = RuntimeError("model offline")
        fallback = MagicMock()
        fallback.predict.side_effect = ValueError("no data")
        scorer = ConflictScorer(overlap_predictor=predictor, fallback_estimator=fallback)
        params = replace(prague_params, enable_advanced_analysis=True)

        result = scorer.evaluate([make_event()], 100, "Technology", params)

        assert result.score == 50
        assert result.audience_overlap is None

    def test_predictor_not_called_when_disabled(self, make_event, prague_params):
        predictor = MagicMock()
        scorer = ConflictScorer(overlap_predictor=predictor)
        scorer.score([make_event()], 100, "Technology", prague_params)
        predictor.predict.assert_not_called()
