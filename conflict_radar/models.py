"""Data models for conflict analysis."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .config import LONG_DESCRIPTION_LENGTH, RISK_HIGH, RISK_LOW, RISK_MEDIUM
from .errors import ValidationError


@dataclass(frozen=True)
class Event:
    """A single event, normalized from any provider."""
    id: str
    title: str
    date: date
    city: str
    category: str
    source: str  # Which provider this came from
    end_date: Optional[date] = None
    venue: Optional[str] = None
    subcategory: Optional[str] = None
    description: Optional[str] = None
    expected_attendees: Optional[int] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_venue(self) -> bool:
        return bool(self.venue and self.venue.strip())

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def has_long_description(self) -> bool:
        return bool(self.description) and len(self.description) > LONG_DESCRIPTION_LENGTH

    @property
    def sort_key(self):
        """Sort by date, then title."""
        return (self.date, self.title.lower())

    def dedup_key(self) -> str:
        """Key for deduplication: normalized title + date + normalized venue."""
        return f"{normalize_text(self.title)}|{self.date.isoformat()}|{normalize_text(self.venue or '')}"


@dataclass
class SourceResult:
    """Result from a single provider fetch."""
    source_name: str
    events: List[Event] = field(default_factory=list)
    success: bool = True
    error_message: Optional[str] = None
    events_found: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def status_line(self) -> str:
        if not self.success:
            return f"{self.source_name}: ERROR: {self.error_message}"
        return f"{self.source_name}: {self.events_found} event(s) found"


@dataclass
class AnalysisParams:
    """What the organizer is planning and which dates to consider."""
    city: str
    category: str
    expected_attendees: int
    start_date: date
    end_date: date
    date_range_start: date
    date_range_end: date
    subcategory: Optional[str] = None
    venue: Optional[str] = None
    enable_advanced_analysis: bool = False

    def validate(self) -> None:
        """Raise ValidationError if the parameters cannot be analyzed."""
        if not self.city or not self.city.strip():
            raise ValidationError("city is required")
        if not self.category or not self.category.strip():
            raise ValidationError("category is required")
        if isinstance(self.expected_attendees, bool) or not isinstance(self.expected_attendees, int):
            raise ValidationError("expected_attendees must be an integer")
        if self.expected_attendees <= 0:
            raise ValidationError("expected_attendees must be positive")
        if self.start_date > self.end_date:
            raise ValidationError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        if self.date_range_start > self.date_range_end:
            raise ValidationError(
                f"date_range_start {self.date_range_start} is after date_range_end {self.date_range_end}"
            )

    def effective_window(self) -> tuple:
        """Analysis window, widened to contain the preferred dates if needed."""
        return (
            min(self.date_range_start, self.start_date),
            max(self.date_range_end, self.end_date),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisParams":
        """Build params from a camelCase payload with ISO date strings."""
        def get(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        try:
            attendees = get("expectedAttendees", "expected_attendees")
            return cls(
                city=get("city", "city") or "",
                category=get("category", "category") or "",
                expected_attendees=int(attendees) if attendees is not None else 0,
                start_date=_parse_iso_date(get("startDate", "start_date")),
                end_date=_parse_iso_date(get("endDate", "end_date")),
                date_range_start=_parse_iso_date(get("dateRangeStart", "date_range_start")),
                date_range_end=_parse_iso_date(get("dateRangeEnd", "date_range_end")),
                subcategory=get("subcategory", "subcategory"),
                venue=get("venue", "venue"),
                enable_advanced_analysis=bool(
                    get("enableAdvancedAnalysis", "enable_advanced_analysis", False)
                ),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid analysis parameters: {e}") from e


@dataclass(frozen=True)
class DateCandidate:
    """A trial (start, end) date pair."""
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class AudienceOverlapSummary:
    average_overlap: float
    high_overlap_events: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class VenueIntelligenceSummary:
    conflict_score: float
    capacity_utilization: float
    pricing_impact: float
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DateRecommendation:
    """Scored candidate dates with the evidence behind the score."""
    start_date: date
    end_date: date
    conflict_score: float
    risk_level: str  # Low / Medium / High
    competing_events: List[Event] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)
    audience_overlap: Optional[AudienceOverlapSummary] = None
    venue_intelligence: Optional[VenueIntelligenceSummary] = None

    @property
    def is_low_risk(self) -> bool:
        return self.risk_level == RISK_LOW

    @property
    def is_medium_risk(self) -> bool:
        return self.risk_level == RISK_MEDIUM

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level == RISK_HIGH

    @property
    def display_line(self) -> str:
        """Format as 'START → END: SCORE (RISK)'."""
        return (
            f"{self.start_date.isoformat()} → {self.end_date.isoformat()}: "
            f"{self.conflict_score:.1f} ({self.risk_level})"
        )


@dataclass
class AnalysisResult:
    recommended_dates: List[DateRecommendation]
    high_risk_dates: List[DateRecommendation]
    all_events: List[Event]
    analyzed_at: datetime = field(default_factory=datetime.now)
    source_results: List[SourceResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def normalize_text(text: str) -> str:
    """Normalize text for comparison: lowercase, strip "the" prefix, punctuation."""
    text = text.lower().strip()
    # Remove "the " prefix
    text = re.sub(r'^the\s+', '', text)
    # Remove punctuation and extra whitespace
    text = re.sub(r'[^\w\s]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def _parse_iso_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("missing date")
    return date.fromisoformat(str(value)[:10])
