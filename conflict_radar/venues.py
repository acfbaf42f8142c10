"""Venue intelligence.

A heuristic read on how crowded a venue and its market are on a given date.
There is no booking system behind this: capacity is guessed from the venue
name and bookings come from the competing events we already know about.
"""

import logging
from datetime import date
from typing import Iterable, List

from .models import Event, VenueIntelligenceSummary, normalize_text

logger = logging.getLogger("conflict-radar.venues")

DEFAULT_CAPACITY = 100

# First keyword found in the venue name wins
CAPACITY_BY_KEYWORD = [
    ("stadium", 10000),
    ("arena", 10000),
    ("hall", 1000),
    ("theatre", 800),
    ("theater", 800),
    ("conference", 500),
    ("center", 500),
    ("centre", 500),
    ("hotel", 300),
    ("club", 300),
    ("university", 200),
    ("college", 200),
]

# Monday..Sunday, matching date.weekday()
DAY_OF_WEEK_MULTIPLIERS = [1.0, 1.1, 1.1, 1.0, 1.2, 1.2, 0.9]

# January..December
SEASONAL_DEMAND = [0.7, 0.8, 1.0, 1.2, 1.3, 1.2, 1.1, 1.0, 1.1, 1.0, 0.9, 0.8]

FACTOR_WEIGHTS = {
    "capacity_utilization": 0.3,
    "pricing_impact": 0.2,
    "competitor_pressure": 0.3,
    "demand": 0.2,
}

DEMAND_WEIGHTS = {
    "seasonality": 0.4,
    "competitor_activity": 0.3,
    "economic": 0.2,
    "social": 0.1,
}
ECONOMIC_FACTOR = 0.8
SOCIAL_FACTOR = 0.9


def estimate_capacity(venue_name: str) -> int:
    name = (venue_name or "").lower()
    for keyword, capacity in CAPACITY_BY_KEYWORD:
        if keyword in name:
            return capacity
    return DEFAULT_CAPACITY


def seasonal_multiplier(day: date) -> float:
    if 6 <= day.month <= 9:
        return 1.3   # Summer
    if day.month in (12, 1):
        return 1.2   # Holidays
    if day.month in (2, 3):
        return 0.8   # Late winter
    return 1.0


def demand_multiplier(day: date) -> float:
    """Price pressure for a date: season times day of week."""
    return seasonal_multiplier(day) * DAY_OF_WEEK_MULTIPLIERS[day.weekday()]


class VenueIntelligence:
    """Capacity, pricing and competitor pressure for one venue on one date."""

    def analyze(
        self,
        venue_name: str,
        day: date,
        expected_attendees: int,
        competing: Iterable[Event] = (),
    ) -> VenueIntelligenceSummary:
        competing = list(competing)
        capacity = estimate_capacity(venue_name)

        same_venue = [e for e in competing if _same_venue(e.venue, venue_name)]
        booked = sum(e.expected_attendees or 0 for e in same_venue)
        capacity_utilization = min((booked + expected_attendees) / capacity, 1.0)

        pricing_impact = min(demand_multiplier(day), 2.0) / 2.0
        competitor_pressure = _competitor_pressure(competing, expected_attendees)
        demand = self.demand_level(day, competitor_pressure)

        conflict_score = (
            capacity_utilization * FACTOR_WEIGHTS["capacity_utilization"]
            + pricing_impact * FACTOR_WEIGHTS["pricing_impact"]
            + competitor_pressure * FACTOR_WEIGHTS["competitor_pressure"]
            + demand * FACTOR_WEIGHTS["demand"]
        )
        conflict_score = max(0.0, min(1.0, conflict_score))

        logger.debug(
            f"Venue {venue_name!r} on {day}: capacity {capacity}, "
            f"utilization {capacity_utilization:.2f}, conflict {conflict_score:.2f}"
        )

        return VenueIntelligenceSummary(
            conflict_score=round(conflict_score, 3),
            capacity_utilization=round(capacity_utilization, 3),
            pricing_impact=round(pricing_impact, 3),
            recommendations=self.recommendations(
                conflict_score, capacity_utilization, demand, len(competing)
            ),
        )

    def demand_level(self, day: date, competitor_activity: float) -> float:
        level = (
            SEASONAL_DEMAND[day.month - 1] * DEMAND_WEIGHTS["seasonality"]
            + competitor_activity * DEMAND_WEIGHTS["competitor_activity"]
            + ECONOMIC_FACTOR * DEMAND_WEIGHTS["economic"]
            + SOCIAL_FACTOR * DEMAND_WEIGHTS["social"]
        )
        return min(level, 1.0)

    def recommendations(
        self,
        conflict_score: float,
        capacity_utilization: float,
        demand: float,
        competitor_count: int,
    ) -> List[str]:
        recs = []

        if capacity_utilization >= 1.0:
            recs.append("Venue is likely at capacity - consider a larger venue")
        elif capacity_utilization > 0.8:
            recs.append("Venue will be busy - confirm your booking early")

        if conflict_score > 0.7:
            recs.append("Consider premium pricing due to high demand")
        elif conflict_score < 0.3:
            recs.append("Consider promotional pricing to attract attendees")
        else:
            recs.append("Standard pricing recommended")

        if competitor_count > 2:
            recs.append("Increase marketing budget to compete with multiple events")
        elif demand > 0.8:
            recs.append("Focus on early bird promotions due to high demand")

        return recs


def _same_venue(a, b) -> bool:
    na = normalize_text(a or "")
    return bool(na) and na == normalize_text(b or "")


def _competitor_pressure(competing: List[Event], expected_attendees: int) -> float:
    competitor_attendees = sum(e.expected_attendees or 0 for e in competing)
    market = competitor_attendees + expected_attendees
    if market <= 0:
        return 0.0
    return competitor_attendees / market
