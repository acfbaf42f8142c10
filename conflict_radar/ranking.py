"""Risk tiers, reason strings and final ordering of scored candidates."""

from collections import Counter
from typing import List, Tuple

from .config import (
    HIGH_COMPETITION_SCORE,
    HIGH_RISK_BACKFILL_MIN_SCORE,
    LOW_RISK_MAX_SCORE,
    MAX_HIGH_PROFILE_REASONS,
    MAX_REASONS,
    MAX_RESULT_DATES,
    MEDIUM_RISK_MAX_SCORE,
    MODERATE_COMPETITION_SCORE,
    RISK_HIGH,
    RISK_LOW,
    RISK_MEDIUM,
)
from .models import DateRecommendation, Event

NO_COMPETITION_REASON = "No major competing events found"
HIGH_COMPETITION_REASON = "High competition for audience attention"
MODERATE_COMPETITION_REASON = "Moderate competition expected"


def classify_risk(score: float) -> str:
    if score <= LOW_RISK_MAX_SCORE:
        return RISK_LOW
    if score <= MEDIUM_RISK_MAX_SCORE:
        return RISK_MEDIUM
    return RISK_HIGH


def build_reasons(competing_events: List[Event], score: float) -> List[str]:
    """Explain a score in at most three short lines."""
    if not competing_events:
        return [NO_COMPETITION_REASON]

    reasons = []

    # Counter keeps first-seen order for ties
    by_category = Counter(event.category for event in competing_events)
    for category, count in by_category.most_common():
        reasons.append(f"{count} {category} events during period")

    high_profile = [e for e in competing_events if e.has_venue and e.has_image]
    for event in high_profile[:MAX_HIGH_PROFILE_REASONS]:
        reasons.append(f"Overlaps with high-profile event: {event.title}")

    if score > HIGH_COMPETITION_SCORE:
        reasons.append(HIGH_COMPETITION_REASON)
    elif score > MODERATE_COMPETITION_SCORE:
        reasons.append(MODERATE_COMPETITION_REASON)

    return reasons[:MAX_REASONS]


def rank_recommendations(
    recommendations: List[DateRecommendation],
) -> Tuple[List[DateRecommendation], List[DateRecommendation]]:
    """Split scored candidates into (recommended, high risk) lists of up to three.

    Recommended dates are the lowest-scoring Low-risk candidates. High-risk
    dates are the highest-scoring High-risk candidates, topped up with
    Medium-risk candidates scoring above the backfill threshold.
    """
    ordered = sorted(recommendations, key=lambda r: r.conflict_score)

    recommended = [r for r in ordered if r.risk_level == RISK_LOW][:MAX_RESULT_DATES]

    descending = sorted(recommendations, key=lambda r: r.conflict_score, reverse=True)
    high_risk = [r for r in descending if r.risk_level == RISK_HIGH][:MAX_RESULT_DATES]
    if len(high_risk) < MAX_RESULT_DATES:
        backfill = [
            r for r in descending
            if r.risk_level == RISK_MEDIUM and r.conflict_score > HIGH_RISK_BACKFILL_MIN_SCORE
        ]
        high_risk.extend(backfill[:MAX_RESULT_DATES - len(high_risk)])

    return recommended, high_risk
