"""Event deduplication.

The same happening is often reported by Ticketmaster, PredictHQ and the
venue's own calendar. We collapse these into one entry.

Strategy: only events on the same date can be duplicates. Within a date,
two events are the same if they share a (non-empty) venue, or if their
normalized titles are at least 80% similar by edit distance.
The first event seen wins, so the input order decides which source's
record survives.
"""

import logging
from typing import List, Tuple

from rapidfuzz.distance import Levenshtein

from .config import TITLE_SIMILARITY_THRESHOLD
from .models import Event, normalize_text

logger = logging.getLogger("conflict-radar.dedup")


def deduplicate(events: List[Event]) -> List[Event]:
    """Remove duplicate events, keeping the first one seen."""
    unique: List[Event] = []
    seen_keys = set()

    for event in events:
        key = event.dedup_key()
        if key in seen_keys:
            continue

        if any(_is_duplicate(event, existing) for existing in unique):
            logger.debug(f"  Duplicate dropped: {event.title} ({event.source}, {event.date})")
            continue

        unique.append(event)
        seen_keys.add(key)

    return unique


def dedup_report(events: List[Event]) -> Tuple[List[Event], int]:
    """Deduplicate and return (unique events, number removed)."""
    unique = deduplicate(events)
    removed = len(events) - len(unique)
    logger.info(f"Deduplication: {len(unique)} unique, {removed} duplicate(s) removed")
    return unique, removed


def title_similarity(a: str, b: str) -> float:
    """(maxLen - editDistance) / maxLen over normalized titles."""
    na = normalize_text(a or "")
    nb = normalize_text(b or "")
    max_len = max(len(na), len(nb))
    if max_len == 0:
        return 1.0
    return (max_len - Levenshtein.distance(na, nb)) / max_len


def _is_duplicate(a: Event, b: Event) -> bool:
    if a.date != b.date:
        return False

    venue_a = normalize_text(a.venue or "")
    venue_b = normalize_text(b.venue or "")
    if venue_a and venue_a == venue_b:
        return True

    return title_similarity(a.title, b.title) >= TITLE_SIMILARITY_THRESHOLD
