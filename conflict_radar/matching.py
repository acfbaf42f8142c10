"""Select the events that compete with a candidate date range."""

from typing import List

from .config import RELATED_CATEGORIES
from .models import AnalysisParams, DateCandidate, Event


def is_related_category(planned_category: str, other_category: str) -> bool:
    """True if other_category competes with planned_category (not symmetric)."""
    if other_category == planned_category:
        return True
    return other_category in RELATED_CATEGORIES.get(planned_category, [])


def is_competing(event: Event, candidate: DateCandidate, params: AnalysisParams) -> bool:
    if not candidate.contains(event.date):
        return False
    # Any event with a venue is significant enough to pull an audience
    return is_related_category(params.category, event.category) or event.has_venue


def match_competing_events(
    candidate: DateCandidate,
    events: List[Event],
    params: AnalysisParams,
) -> List[Event]:
    """Events on the candidate's dates that share or neighbour its category."""
    return [event for event in events if is_competing(event, candidate, params)]
