"""Shared date utilities: provider date parsing and candidate date generation."""

import logging
import math
from datetime import date, datetime, timedelta
from typing import List, Optional

from .config import CANDIDATE_OFFSET_DAYS, CANDIDATE_SWEEP_STRIDE_DAYS
from .models import AnalysisParams, DateCandidate

logger = logging.getLogger("conflict-radar.dates")

ONE_DAY = timedelta(days=1)


def parse_date_text(text: str) -> Optional[date]:
    """Try to parse a date string from the formats providers send.

    Used by the Ticketmaster, PredictHQ and venue calendar sources.
    """
    if not text or not isinstance(text, str):
        return None
    text = text.strip()

    # ISO datetimes: "2024-06-15T19:00:00Z", "2024-06-15T19:00:00+02:00"
    if "T" in text:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            text = text.split("T", 1)[0]

    formats = [
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d.%m.%Y",     # "15.03.2024"
        "%d. %m. %Y",   # "15. 3. 2024"
        "%b %d, %Y",    # "Mar 15, 2024"
        "%B %d, %Y",    # "March 15, 2024"
        "%d %B %Y",     # "15 March 2024"
        "%m/%d/%Y",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse an ISO timestamp (created/updated fields), None if unparseable."""
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def event_duration_days(start: date, end: date) -> int:
    """Whole days between start and end, rounded up."""
    return math.ceil((end - start) / ONE_DAY)


def generate_candidates(params: AnalysisParams) -> List[DateCandidate]:
    """Produce the date ranges to evaluate for an analysis run.

    Two passes: every shift of the preferred dates by up to a week in either
    direction, then a sweep across the whole analysis window every few days.
    Both passes keep the preferred duration and only emit candidates that
    fit inside the window. Pairs are never repeated.
    """
    window_start, window_end = params.effective_window()
    duration = timedelta(days=event_duration_days(params.start_date, params.end_date))

    candidates: List[DateCandidate] = []
    seen = set()

    def add(start: date) -> None:
        end = start + duration
        if start < window_start or end > window_end:
            return
        key = (start, end)
        if key in seen:
            return
        seen.add(key)
        candidates.append(DateCandidate(start_date=start, end_date=end))

    for offset in range(-CANDIDATE_OFFSET_DAYS, CANDIDATE_OFFSET_DAYS + 1):
        add(params.start_date + timedelta(days=offset))
    near_count = len(candidates)

    stride = timedelta(days=CANDIDATE_SWEEP_STRIDE_DAYS)
    current = window_start
    while current + duration <= window_end:
        add(current)
        current += stride

    logger.debug(
        f"Generated {len(candidates)} candidates "
        f"({near_count} near preferred dates, {len(candidates) - near_count} from window sweep)"
    )
    return candidates
