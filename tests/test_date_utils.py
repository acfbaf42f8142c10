"""Unit tests for date parsing and candidate generation."""
from dataclasses import replace
from datetime import date

from conflict_radar.date_utils import event_duration_days, generate_candidates, parse_date_text


class TestParseDateText:
    """Test cases for provider date strings."""

    def test_iso_datetime_with_z(self):
        """ISO timestamps keep their calendar date."""
        assert parse_date_text("2024-06-15T19:00:00Z") == date(2024, 6, 15)

    def test_plain_and_european_formats(self):
        """Common formats parse."""
        assert parse_date_text("2024-06-15") == date(2024, 6, 15)
        assert parse_date_text("15.06.2024") == date(2024, 6, 15)
        assert parse_date_text("June 15, 2024") == date(2024, 6, 15)

    def test_garbage_returns_none(self):
        """Unparseable text returns None."""
        assert parse_date_text("sometime soon") is None
        assert parse_date_text("") is None

    def test_non_string_returns_none(self):
        """Lists and numbers from loose JSON are not dates."""
        assert parse_date_text(["2024-03-15"]) is None
        assert parse_date_text(20240315) is None


class TestGenerateCandidates:
    """Test cases for generate_candidates."""

    def test_preferred_dates_are_a_candidate(self, prague_params):
        """The preferred range itself is evaluated."""
        candidates = generate_candidates(prague_params)
        pairs = {(c.start_date, c.end_date) for c in candidates}
        assert (date(2024, 3, 15), date(2024, 3, 16)) in pairs

    def test_candidates_unique(self, prague_params):
        """No (start, end) pair repeats."""
        candidates = generate_candidates(prague_params)
        pairs = [(c.start_date, c.end_date) for c in candidates]
        assert len(pairs) == len(set(pairs))

    def test_candidates_inside_window_with_same_duration(self, prague_params):
        """Every candidate fits the window and keeps the preferred length."""
        for c in generate_candidates(prague_params):
            assert date(2024, 3, 1) <= c.start_date
            assert c.end_date <= date(2024, 3, 31)
            assert (c.end_date - c.start_date).days == 1

    def test_offsets_clipped_at_window_start(self, prague_params):
        """Shifts before the window start are dropped."""
        params = replace(prague_params, start_date=date(2024, 3, 2), end_date=date(2024, 3, 3))
        starts = {c.start_date for c in generate_candidates(params)}
        assert min(starts) == date(2024, 3, 1)

    def test_sweep_covers_window(self, prague_params):
        """The sweep reaches dates far from the preferred range."""
        starts = {c.start_date for c in generate_candidates(prague_params)}
        assert date(2024, 3, 1) in starts
        assert date(2024, 3, 28) in starts

    def test_window_widened_to_preferred_dates(self, prague_params):
        """Preferred dates outside the window still produce a candidate."""
        params = replace(
            prague_params,
            start_date=date(2024, 4, 2),
            end_date=date(2024, 4, 3),
        )
        pairs = {(c.start_date, c.end_date) for c in generate_candidates(params)}
        assert (date(2024, 4, 2), date(2024, 4, 3)) in pairs

    def test_single_day_event(self, prague_params):
        """A one-day event yields zero-length candidates."""
        params = replace(prague_params, start_date=date(2024, 3, 15), end_date=date(2024, 3, 15))
        assert all(c.start_date == c.end_date for c in generate_candidates(params))
        assert event_duration_days(params.start_date, params.end_date) == 0
