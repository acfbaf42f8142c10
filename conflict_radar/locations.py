"""Location normalization.

Providers disagree on what goes in the city field: some report the country
("Czech Republic"), some the local-language name ("Praha"), some nothing at
all. This module maps raw city/venue strings onto a canonical city so the
engine only analyzes events that are actually in the target city.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .config import (
    CITY_ALIASES,
    CITY_PATTERNS,
    COUNTRY_NAMES,
    GENERIC_VENUE_WORDS,
    MIN_PARTIAL_VENUE_LENGTH,
    VENUE_CITY_MAP,
)
from .models import Event

logger = logging.getLogger("conflict-radar.locations")


@dataclass(frozen=True)
class VenueMatch:
    """A venue table hit."""
    venue: str
    city: str
    country: str
    confidence: str  # high / medium / low
    # exact: whole string is a key; contains: string holds a key; partial: key holds the string
    match_type: str = "exact"

    @property
    def is_definite(self) -> bool:
        return self.match_type in ("exact", "contains")


class LocationNormalizer:
    """Resolve raw city and venue strings to canonical city names."""

    def __init__(
        self,
        city_aliases: Optional[Dict[str, str]] = None,
        venue_mappings: Optional[Dict[str, dict]] = None,
        city_patterns: Optional[Sequence[Tuple[str, str]]] = None,
    ):
        self.city_aliases = {k.lower(): v for k, v in (city_aliases or CITY_ALIASES).items()}
        self.venue_mappings = {k.lower(): v for k, v in (venue_mappings or VENUE_CITY_MAP).items()}
        self.city_patterns = [
            (re.compile(pattern, re.IGNORECASE), city)
            for pattern, city in (city_patterns or CITY_PATTERNS)
        ]

    def canonical_city(self, name: str) -> str:
        """Alias lookup only; unknown names come back trimmed."""
        lookup = (name or "").strip().lower()
        return self.city_aliases.get(lookup, (name or "").strip())

    def aliases_for(self, city: str) -> List[str]:
        """All known lowercase spellings of a city, including its own name."""
        canonical = self.canonical_city(city)
        aliases = [alias for alias, target in self.city_aliases.items() if target == canonical]
        if canonical.lower() not in aliases:
            aliases.append(canonical.lower())
        return aliases

    def lookup_venue(self, venue: str) -> Optional[VenueMatch]:
        """Match a venue name to the venue table.

        Tries the exact key, then keys found whole-word inside the venue
        string, then keys that contain a distinctive venue string.
        """
        if not venue:
            return None
        lower = " ".join(venue.lower().split())
        if not lower:
            return None

        mapping = self.venue_mappings.get(lower)
        if mapping:
            return _venue_match(mapping)

        # Longest key wins so "O2 Arena London" beats "O2 Arena"
        contained = [key for key in self.venue_mappings if _contains_words(lower, key)]
        if contained:
            mapping = self.venue_mappings[max(contained, key=len)]
            logger.debug(f"Venue pattern match: {venue!r} -> {mapping['city']}")
            return _venue_match(mapping, "contains")

        if not _is_distinctive(lower):
            return None
        partial = [key for key in self.venue_mappings if _contains_words(key, lower)]
        if not partial:
            return None
        mapping = self.venue_mappings[min(partial, key=len)]
        logger.debug(f"Venue partial match: {venue!r} -> {mapping['city']}")
        return _venue_match(mapping, "partial")

    def extract_city(self, text: str) -> Optional[str]:
        """Last resort: spot a known city name anywhere in free text."""
        if not text:
            return None
        for pattern, city in self.city_patterns:
            if pattern.search(text):
                return city
        return None

    def resolve_city(self, raw: str) -> Optional[str]:
        """Map a raw city or venue string to a canonical city, or None."""
        if not raw or not raw.strip():
            return None
        lower = raw.strip().lower()

        if lower in self.city_aliases:
            return self.city_aliases[lower]

        match = self.lookup_venue(raw)
        if match:
            return match.city

        return self.extract_city(raw)

    def belongs_to_city(self, event: Event, target_city: str) -> bool:
        """Decide whether an event takes place in the target city."""
        target = self.canonical_city(target_city)
        raw_city = (event.city or "").strip().lower()
        venue_match = self.lookup_venue(event.venue) if event.has_venue else None

        if raw_city and raw_city not in COUNTRY_NAMES and self.city_aliases.get(raw_city) == target:
            # A well-known venue elsewhere overrides a city field that only looks right
            if (
                venue_match
                and venue_match.is_definite
                and venue_match.confidence == "high"
                and venue_match.city != target
            ):
                logger.debug(
                    f"Excluding {event.title!r}: venue {event.venue!r} is in {venue_match.city}"
                )
                return False
            return True

        if raw_city == target.lower():
            return True

        if venue_match:
            return venue_match.city == target

        # The city field may hold an unmapped spelling of another city
        if raw_city and raw_city not in COUNTRY_NAMES:
            other = self.resolve_city(event.city)
            if other and other != target:
                return False

        text = " ".join(part for part in (event.city, event.venue, event.title) if part)
        return self.extract_city(text) == target

    def filter_events(self, events: List[Event], target_city: str) -> List[Event]:
        """Keep events in the target city, rewriting their city to the canonical name."""
        target = self.canonical_city(target_city)
        kept = []
        for event in events:
            if self.belongs_to_city(event, target):
                if event.city != target:
                    event = replace(event, city=target)
                kept.append(event)
            else:
                logger.debug(f"  Filtered out: {event.title} ({event.city}, {event.venue})")

        logger.info(f"Location filter kept {len(kept)} of {len(events)} events for {target}")
        return kept

    def venues_for_city(self, city: str) -> List[VenueMatch]:
        canonical = self.canonical_city(city)
        return [
            _venue_match(mapping)
            for mapping in self.venue_mappings.values()
            if mapping["city"] == canonical
        ]


def _venue_match(mapping: dict, match_type: str = "exact") -> VenueMatch:
    return VenueMatch(
        venue=mapping["venue"],
        city=mapping["city"],
        country=mapping["country"],
        confidence=mapping["confidence"],
        match_type=match_type,
    )


def _contains_words(text: str, phrase: str) -> bool:
    """True if phrase appears in text on word boundaries."""
    return re.search(rf"(?<!\w){re.escape(phrase)}(?!\w)", text) is not None


def _is_distinctive(venue: str) -> bool:
    if len(venue) < MIN_PARTIAL_VENUE_LENGTH:
        return False
    words = re.findall(r"\w+", venue)
    return any(word not in GENERIC_VENUE_WORDS for word in words)
