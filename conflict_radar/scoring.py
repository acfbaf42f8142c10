"""Conflict scoring.

Turns the competing events of one candidate date range into a 0-100 score.
The most significant competitors (venue, image, real description) are scored
one by one; the long tail adds a flat amount each. With advanced analysis
on, each detailed contribution is scaled up by how much of the audience the
competitor is expected to share.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from .audience import (
    AudienceOverlapPredictor,
    CategoryOverlapEstimator,
    OverlapEstimate,
    estimate_overlap,
)
from .config import (
    ATTENDEE_MULTIPLIERS,
    BASE_EVENT_SCORE,
    DESCRIPTION_SCORE,
    HIGH_OVERLAP_THRESHOLD,
    IMAGE_SCORE,
    MAX_SCORE,
    MIN_SCORE,
    OVERLAP_TIMEOUT_SECONDS,
    REMAINING_EVENT_SCORE,
    SAME_CATEGORY_SCORE,
    SIGNIFICANCE_DESCRIPTION_WEIGHT,
    SIGNIFICANCE_IMAGE_WEIGHT,
    SIGNIFICANCE_VENUE_WEIGHT,
    TOP_SIGNIFICANT_EVENTS,
    VENUE_SCORE,
)
from .errors import ComputationError
from .models import AnalysisParams, AudienceOverlapSummary, DateCandidate, Event

logger = logging.getLogger("conflict-radar.scoring")

MAX_OVERLAP_REASONS = 5


@dataclass
class ScoreResult:
    score: float
    audience_overlap: Optional[AudienceOverlapSummary] = None
    events_scored: int = 0
    events_skipped: int = 0


def significance(event: Event) -> int:
    """How prominent a competing event is; decides who gets detailed scoring."""
    return (
        SIGNIFICANCE_VENUE_WEIGHT * int(event.has_venue)
        + SIGNIFICANCE_IMAGE_WEIGHT * int(event.has_image)
        + SIGNIFICANCE_DESCRIPTION_WEIGHT * int(event.has_long_description)
    )


def event_contribution(event: Event, category: str) -> float:
    """Base conflict points for one competing event, before overlap scaling."""
    score = BASE_EVENT_SCORE
    if event.category == category:
        score += SAME_CATEGORY_SCORE
    if event.has_venue:
        score += VENUE_SCORE
    if event.has_image:
        score += IMAGE_SCORE
    if event.has_long_description:
        score += DESCRIPTION_SCORE
    return float(score)


def attendee_multiplier(expected_attendees: int) -> float:
    for threshold, multiplier in ATTENDEE_MULTIPLIERS:
        if expected_attendees > threshold:
            return multiplier
    return 1.0


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def planned_event(params: AnalysisParams, candidate: Optional[DateCandidate] = None) -> Event:
    """The organizer's event, shaped like a competitor for overlap prediction."""
    start = candidate.start_date if candidate else params.start_date
    end = candidate.end_date if candidate else params.end_date
    return Event(
        id="planned",
        title=f"Planned {params.category} event",
        date=start,
        end_date=end,
        city=params.city,
        category=params.category,
        subcategory=params.subcategory,
        venue=params.venue,
        expected_attendees=params.expected_attendees,
        source="planner",
    )


class ConflictScorer:
    """Weighted conflict score for the competitors of one candidate."""

    def __init__(
        self,
        overlap_predictor=None,
        fallback_estimator=None,
        overlap_timeout: float = OVERLAP_TIMEOUT_SECONDS,
        executor: Optional[Executor] = None,
    ):
        self.overlap_predictor = overlap_predictor or AudienceOverlapPredictor()
        self.fallback_estimator = fallback_estimator or CategoryOverlapEstimator()
        self.overlap_timeout = overlap_timeout
        self.executor = executor

    def score(
        self,
        competing_events: List[Event],
        expected_attendees: int,
        category: str,
        params: AnalysisParams,
        candidate: Optional[DateCandidate] = None,
    ) -> float:
        """Conflict score in [0, 100]."""
        return self.evaluate(competing_events, expected_attendees, category, params, candidate).score

    def evaluate(
        self,
        competing_events: List[Event],
        expected_attendees: int,
        category: str,
        params: AnalysisParams,
        candidate: Optional[DateCandidate] = None,
    ) -> ScoreResult:
        """Score plus the audience-overlap evidence behind it."""
        if not competing_events:
            return ScoreResult(score=0.0)

        ranked = sorted(competing_events, key=significance, reverse=True)
        detailed = ranked[:TOP_SIGNIFICANT_EVENTS]
        remaining = len(ranked) - len(detailed)

        advanced = params.enable_advanced_analysis
        planned = planned_event(params, candidate) if advanced else None

        executor = self.executor
        owns_executor = advanced and executor is None
        if owns_executor:
            executor = ThreadPoolExecutor(max_workers=TOP_SIGNIFICANT_EVENTS)

        total = 0.0
        scored = 0
        skipped = 0
        overlaps = []
        try:
            for event in detailed:
                try:
                    contribution, estimate = self._score_event(event, category, planned, executor)
                except ComputationError as e:
                    skipped += 1
                    logger.warning(f"Skipping {event.title!r} in conflict score: {e}")
                    continue
                total += contribution
                scored += 1
                if estimate is not None:
                    overlaps.append((event, estimate))
        finally:
            if owns_executor:
                executor.shutdown(wait=False, cancel_futures=True)

        total += remaining * REMAINING_EVENT_SCORE
        total *= attendee_multiplier(expected_attendees)

        return ScoreResult(
            score=clamp_score(total),
            audience_overlap=_summarize_overlap(overlaps) if advanced else None,
            events_scored=scored,
            events_skipped=skipped,
        )

    def _score_event(self, event: Event, category: str, planned: Optional[Event], executor):
        try:
            contribution = event_contribution(event, category)
            if planned is None:
                return contribution, None
            estimate = estimate_overlap(
                planned,
                event,
                self.overlap_predictor,
                self.fallback_estimator,
                executor,
                self.overlap_timeout,
            )
            return contribution * estimate.multiplier, estimate
        except Exception as e:
            raise ComputationError(f"{type(e).__name__}: {e}") from e


def _summarize_overlap(overlaps: List[tuple]) -> Optional[AudienceOverlapSummary]:
    measured = [(event, est) for event, est in overlaps if est.method != "none"]
    if not measured:
        return None

    average = sum(est.overlap_score for _, est in measured) / len(measured)
    high = [event.title for event, est in measured if est.overlap_score >= HIGH_OVERLAP_THRESHOLD]

    reasoning: List[str] = []
    for _, est in measured:
        for line in est.reasoning:
            if line not in reasoning:
                reasoning.append(line)

    return AudienceOverlapSummary(
        average_overlap=round(average, 3),
        high_overlap_events=high,
        reasoning=reasoning[:MAX_OVERLAP_REASONS],
    )


__all__ = [
    "ConflictScorer",
    "OverlapEstimate",
    "ScoreResult",
    "attendee_multiplier",
    "clamp_score",
    "event_contribution",
    "planned_event",
    "significance",
]
