"""Audience overlap prediction.

Estimates what fraction of the planned event's audience a competing event
would also attract. Two estimators share one signature,
``predict(planned, candidate) -> OverlapPrediction``:

- AudienceOverlapPredictor builds an audience profile per event (age range,
  interests, professions, spending, preferred days and venue types) from its
  category, venue and subcategory, and compares the profiles.
- CategoryOverlapEstimator only looks at categories. It is cheap, never
  blocks and is used whenever the profile predictor is late or fails.
"""

import copy
import logging
from concurrent.futures import Executor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import FALLBACK_OVERLAP_WEIGHT, OVERLAP_TIMEOUT_SECONDS, OVERLAP_WEIGHT
from .errors import OverlapTimeoutError
from .matching import is_related_category
from .models import Event

logger = logging.getLogger("conflict-radar.audience")


@dataclass(frozen=True)
class OverlapPrediction:
    overlap_score: float
    reasoning: List[str] = field(default_factory=list)

    def __post_init__(self):
        object.__setattr__(self, "overlap_score", _clamp01(self.overlap_score))


@dataclass(frozen=True)
class OverlapEstimate:
    """An overlap value plus which code path produced it."""
    overlap_score: float
    weight: float
    method: str  # "predictor", "fallback" or "none"
    reasoning: List[str] = field(default_factory=list)

    @property
    def multiplier(self) -> float:
        return 1 + self.overlap_score * self.weight


NO_OVERLAP = OverlapEstimate(overlap_score=0.0, weight=0.0, method="none")


# ---------------------------------------------------------------------------
# Audience profiles per category
# ---------------------------------------------------------------------------
CATEGORY_PROFILES: Dict[str, dict] = {
    "Technology": {
        "age": (25, 45),
        "interests": ["programming", "innovation", "startups", "ai", "cloud"],
        "professions": ["software_engineer", "product_manager", "data_scientist", "entrepreneur"],
        "ticket_price": 150,
        "travel_distance": 200,
        "preferred_days": ["tuesday", "wednesday", "thursday"],
        "venue_types": ["conference_center", "tech_hub", "university"],
        "formats": ["conference", "workshop", "hackathon"],
    },
    "Business": {
        "age": (30, 55),
        "interests": ["leadership", "strategy", "networking", "finance", "marketing"],
        "professions": ["executive", "manager", "consultant", "entrepreneur"],
        "ticket_price": 300,
        "travel_distance": 500,
        "preferred_days": ["wednesday", "thursday", "friday"],
        "venue_types": ["hotel", "conference_center", "business_center"],
        "formats": ["conference", "networking", "workshop"],
    },
    "Finance": {
        "age": (28, 60),
        "interests": ["finance", "investing", "markets", "strategy"],
        "professions": ["analyst", "executive", "consultant", "banker"],
        "ticket_price": 350,
        "travel_distance": 400,
        "preferred_days": ["tuesday", "wednesday", "thursday"],
        "venue_types": ["hotel", "conference_center"],
        "formats": ["conference", "networking"],
    },
    "Marketing": {
        "age": (24, 50),
        "interests": ["marketing", "branding", "social_media", "strategy"],
        "professions": ["marketer", "manager", "designer", "consultant"],
        "ticket_price": 200,
        "travel_distance": 300,
        "preferred_days": ["wednesday", "thursday"],
        "venue_types": ["conference_center", "hotel", "club"],
        "formats": ["conference", "workshop", "networking"],
    },
    "Entertainment": {
        "age": (18, 65),
        "interests": ["music", "movies", "gaming", "nightlife", "art"],
        "professions": ["artist", "musician", "designer", "student", "creative"],
        "ticket_price": 75,
        "travel_distance": 100,
        "preferred_days": ["friday", "saturday", "sunday"],
        "venue_types": ["concert_hall", "stadium", "outdoor", "club"],
        "formats": ["concert", "festival", "show", "party"],
    },
    "Music": {
        "age": (16, 55),
        "interests": ["music", "nightlife", "festivals", "art"],
        "professions": ["musician", "student", "creative", "artist"],
        "ticket_price": 60,
        "travel_distance": 150,
        "preferred_days": ["friday", "saturday"],
        "venue_types": ["concert_hall", "club", "stadium", "outdoor"],
        "formats": ["concert", "festival", "party"],
    },
    "Arts & Culture": {
        "age": (25, 70),
        "interests": ["art", "theatre", "music", "history", "literature"],
        "professions": ["artist", "teacher", "creative", "academic"],
        "ticket_price": 45,
        "travel_distance": 80,
        "preferred_days": ["thursday", "friday", "saturday", "sunday"],
        "venue_types": ["theatre", "gallery", "concert_hall"],
        "formats": ["exhibition", "performance", "show"],
    },
    "Sports": {
        "age": (16, 60),
        "interests": ["fitness", "competition", "team_sports", "outdoor_activities"],
        "professions": ["athlete", "coach", "fitness_trainer", "student"],
        "ticket_price": 50,
        "travel_distance": 150,
        "preferred_days": ["saturday", "sunday"],
        "venue_types": ["stadium", "arena", "outdoor", "gym"],
        "formats": ["tournament", "match", "exhibition"],
    },
    "Education": {
        "age": (18, 45),
        "interests": ["learning", "research", "career", "innovation"],
        "professions": ["student", "teacher", "academic", "researcher"],
        "ticket_price": 40,
        "travel_distance": 150,
        "preferred_days": ["monday", "tuesday", "wednesday", "thursday"],
        "venue_types": ["university", "conference_center"],
        "formats": ["lecture", "workshop", "conference"],
    },
}

DEFAULT_PROFILE = {
    "age": (25, 50),
    "interests": ["general"],
    "professions": ["professional"],
    "ticket_price": 100,
    "travel_distance": 200,
    "preferred_days": ["saturday"],
    "venue_types": ["conference_center"],
    "formats": ["conference"],
}

# Factor weights for the combined overlap score
FACTOR_WEIGHTS = {
    "demographic": 0.3,
    "interest": 0.4,
    "behavior": 0.2,
    "historical": 0.1,
}


class AudienceOverlapPredictor:
    """Rule-based audience overlap model built from per-category profiles."""

    def predict(self, planned: Event, candidate: Event) -> OverlapPrediction:
        profile_a = self.build_profile(planned)
        profile_b = self.build_profile(candidate)

        factors = {
            "demographic": _demographic_similarity(profile_a, profile_b),
            "interest": _jaccard(profile_a["interests"], profile_b["interests"]),
            "behavior": _behavior_similarity(profile_a, profile_b),
            "historical": (
                _jaccard(profile_a["venue_types"], profile_b["venue_types"])
                + _jaccard(profile_a["formats"], profile_b["formats"])
            ) / 2,
        }
        score = sum(factors[name] * weight for name, weight in FACTOR_WEIGHTS.items())
        return OverlapPrediction(overlap_score=score, reasoning=_reasoning(factors))

    def build_profile(self, event: Event) -> dict:
        """Category base profile adjusted for the event's venue and subcategory."""
        profile = copy.deepcopy(CATEGORY_PROFILES.get(event.category, DEFAULT_PROFILE))

        venue = (event.venue or "").lower()
        if "hotel" in venue:
            profile["ticket_price"] *= 1.3
            profile["venue_types"] = ["hotel", "conference_center"]
        elif "university" in venue:
            profile["age"] = (18, 35)
            profile["ticket_price"] *= 0.7
            profile["venue_types"] = ["university", "conference_center"]

        subcategory = (event.subcategory or "").lower()
        if "ai" in subcategory.split() or "machine learning" in subcategory or subcategory == "ml":
            profile["interests"] += ["ai", "machine_learning"]
            profile["professions"] += ["data_scientist", "ai_researcher"]
        elif "startup" in subcategory:
            profile["interests"] += ["entrepreneurship", "startups"]
            profile["professions"] += ["founder", "entrepreneur"]

        return profile


class CategoryOverlapEstimator:
    """Category-only overlap estimate. Deterministic and instantaneous."""

    SAME_CATEGORY = 0.8
    RELATED_CATEGORY = 0.5
    SAME_SUBCATEGORY_BONUS = 0.3
    UNRELATED = 0.1

    def predict(self, planned: Event, candidate: Event) -> OverlapPrediction:
        if planned.category == candidate.category:
            score = self.SAME_CATEGORY
            reasoning = [f"Both events are {planned.category}"]
        elif (is_related_category(planned.category, candidate.category)
              or is_related_category(candidate.category, planned.category)):
            score = self.RELATED_CATEGORY
            reasoning = [f"{candidate.category} audiences overlap with {planned.category}"]
        else:
            score = self.UNRELATED
            reasoning = ["Limited category overlap"]

        if (planned.subcategory and candidate.subcategory
                and planned.subcategory.lower() == candidate.subcategory.lower()):
            score += self.SAME_SUBCATEGORY_BONUS
            reasoning.append(f"Same subcategory: {candidate.subcategory}")

        return OverlapPrediction(overlap_score=score, reasoning=reasoning)


def predict_with_deadline(
    predictor,
    planned: Event,
    candidate: Event,
    executor: Executor,
    timeout: float = OVERLAP_TIMEOUT_SECONDS,
) -> OverlapPrediction:
    """Run predictor.predict on the executor, giving up after ``timeout`` seconds.

    Raises OverlapTimeoutError when the deadline passes; any exception from
    the predictor itself propagates unchanged.
    """
    future = executor.submit(predictor.predict, planned, candidate)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        future.cancel()
        raise OverlapTimeoutError(timeout)


def estimate_overlap(
    planned: Event,
    candidate: Event,
    predictor,
    fallback,
    executor: Optional[Executor],
    timeout: float = OVERLAP_TIMEOUT_SECONDS,
) -> OverlapEstimate:
    """Overlap for one competing event: predictor, then fallback, then nothing."""
    if predictor is not None and executor is not None:
        try:
            prediction = predict_with_deadline(predictor, planned, candidate, executor, timeout)
            return OverlapEstimate(
                overlap_score=prediction.overlap_score,
                weight=OVERLAP_WEIGHT,
                method="predictor",
                reasoning=list(prediction.reasoning),
            )
        except OverlapTimeoutError as e:
            logger.warning(f"{e} for {candidate.title!r}, using fallback estimate")
        except Exception as e:
            logger.warning(
                f"Audience overlap prediction failed for {candidate.title!r}: {e}",
                extra={"error_type": type(e).__name__},
            )

    return fallback_overlap(planned, candidate, fallback)


def fallback_overlap(planned: Event, candidate: Event, fallback) -> OverlapEstimate:
    """The cheaper, non-time-boxed path; NO_OVERLAP if it fails too."""
    if fallback is None:
        return NO_OVERLAP
    try:
        prediction = fallback.predict(planned, candidate)
    except Exception as e:
        logger.warning(f"Fallback overlap estimate failed for {candidate.title!r}: {e}")
        return NO_OVERLAP
    return OverlapEstimate(
        overlap_score=prediction.overlap_score,
        weight=FALLBACK_OVERLAP_WEIGHT,
        method="fallback",
        reasoning=list(prediction.reasoning),
    )


def _clamp01(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, value))


def _jaccard(a: List[str], b: List[str]) -> float:
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def _range_overlap(a: tuple, b: tuple) -> float:
    overlap = max(0, min(a[1], b[1]) - max(a[0], b[0]))
    span = max(a[1], b[1]) - min(a[0], b[0])
    return overlap / span if span > 0 else 1.0


def _ratio_similarity(a: float, b: float) -> float:
    larger = max(a, b)
    if larger <= 0:
        return 0.0
    return 1 - abs(a - b) / larger


def _demographic_similarity(a: dict, b: dict) -> float:
    return (
        _range_overlap(a["age"], b["age"]) * 0.3
        + _jaccard(a["interests"], b["interests"]) * 0.4
        + _jaccard(a["professions"], b["professions"]) * 0.3
    )


def _behavior_similarity(a: dict, b: dict) -> float:
    return (
        _ratio_similarity(a["ticket_price"], b["ticket_price"]) * 0.3
        + _ratio_similarity(a["travel_distance"], b["travel_distance"]) * 0.2
        + _jaccard(a["preferred_days"], b["preferred_days"]) * 0.5
    )


def _reasoning(factors: dict) -> List[str]:
    reasoning = []

    if factors["demographic"] > 0.7:
        reasoning.append("High demographic similarity between target audiences")
    elif factors["demographic"] > 0.4:
        reasoning.append("Moderate demographic overlap")
    else:
        reasoning.append("Low demographic similarity")

    if factors["interest"] > 0.6:
        reasoning.append("Strong interest alignment in event topics")
    elif factors["interest"] > 0.3:
        reasoning.append("Some shared interests between audiences")
    else:
        reasoning.append("Limited interest overlap")

    if factors["behavior"] > 0.6:
        reasoning.append("Similar spending and attendance patterns")
    elif factors["behavior"] > 0.3:
        reasoning.append("Some behavioral similarities")
    else:
        reasoning.append("Different audience behavior patterns")

    return reasoning
