"""Shared fixtures for conflict-radar tests."""
import itertools
from datetime import date

import pytest

from conflict_radar.models import AnalysisParams, Event

_ids = itertools.count(1)


@pytest.fixture
def make_event():
    """Factory for Events with sensible defaults."""
    def _make(**overrides):
        fields = {
            "id": f"evt_{next(_ids)}",
            "title": "Sample Event",
            "date": date(2024, 3, 15),
            "city": "Prague",
            "category": "Technology",
            "source": "test",
        }
        fields.update(overrides)
        return Event(**fields)
    return _make


@pytest.fixture
def prague_params():
    """Scenario A parameters: a two-day Technology event in Prague."""
    return AnalysisParams(
        city="Prague",
        category="Technology",
        expected_attendees=500,
        start_date=date(2024, 3, 15),
        end_date=date(2024, 3, 16),
        date_range_start=date(2024, 3, 1),
        date_range_end=date(2024, 3, 31),
    )


class StaticProvider:
    """Provider returning a fixed list of events."""

    def __init__(self, name, events):
        self.name = name
        self.events = events
        self.calls = []

    def fetch(self, city, start, end, category=None):
        self.calls.append((city, start, end, category))
        return list(self.events)


class FailingProvider:
    """Provider that always raises."""

    def __init__(self, name, error):
        self.name = name
        self.error = error

    def fetch(self, city, start, end, category=None):
        raise self.error
