"""Ticketmaster Discovery API source.

API docs: https://developer.ticketmaster.com/products-and-docs/apis/discovery-api/v2/
Requires: TICKETMASTER_API_KEY environment variable
Free tier: 5,000 API calls per day
"""

import logging
from datetime import date
from typing import List, Optional

import requests

from ..config import REQUEST_TIMEOUT, TICKETMASTER_API_KEY
from ..date_utils import parse_date_text
from ..errors import ProviderError
from ..models import Event

logger = logging.getLogger("conflict-radar.ticketmaster")

SOURCE_NAME = "ticketmaster"
BASE_URL = "https://app.ticketmaster.com/discovery/v2"

PAGE_SIZE = 199  # Discovery API rejects size >= 200
MAX_PAGES = 4

# Ticketmaster segment -> our category
SEGMENT_CATEGORIES = {
    "Music": "Entertainment",
    "Arts & Theatre": "Arts & Culture",
    "Sports": "Sports",
    "Film": "Entertainment",
}

# Our category -> classificationName filter. Missing means search all segments.
CATEGORY_SEGMENTS = {
    "Entertainment": "Music",
    "Music": "Music",
    "Arts & Culture": "Arts & Theatre",
    "Theatre": "Arts & Theatre",
    "Comedy": "Arts & Theatre",
    "Film": "Film",
    "Sports": "Sports",
}


class TicketmasterSource:
    name = "Ticketmaster"

    def __init__(self, api_key: Optional[str] = None, timeout: int = REQUEST_TIMEOUT):
        self.api_key = api_key if api_key is not None else TICKETMASTER_API_KEY
        self.timeout = timeout

    def fetch(self, city: str, start: date, end: date, category: Optional[str] = None) -> List[Event]:
        """Fetch events in a city between start and end (inclusive)."""
        if not self.api_key:
            raise ProviderError(self.name, "No API key configured (set TICKETMASTER_API_KEY)")

        params = {
            "apikey": self.api_key,
            "city": city,
            "startDateTime": f"{start.isoformat()}T00:00:00Z",
            "endDateTime": f"{end.isoformat()}T23:59:59Z",
            "size": PAGE_SIZE,
            "sort": "date,asc",
        }
        segment = CATEGORY_SEGMENTS.get(category) if category else None
        if segment:
            params["classificationName"] = segment

        events: List[Event] = []
        page = 0
        while page < MAX_PAGES:
            params["page"] = page
            data = self._get(params)

            raw_events = data.get("_embedded", {}).get("events", [])
            for item in raw_events:
                try:
                    event = parse_event(item)
                except (KeyError, TypeError, ValueError) as e:
                    logger.debug(f"Skipping Ticketmaster event: {e}")
                    continue
                if event:
                    events.append(event)

            total_pages = data.get("page", {}).get("totalPages", 1)
            if len(raw_events) < PAGE_SIZE or page + 1 >= total_pages:
                break
            page += 1

        logger.info(f"  Ticketmaster: {len(events)} events for {city} ({page + 1} page(s))")
        return events

    def _get(self, params: dict) -> dict:
        try:
            response = requests.get(f"{BASE_URL}/events.json", params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise ProviderError(self.name, f"API request failed: {str(e)[:100]}") from e
        except ValueError as e:
            raise ProviderError(self.name, f"Invalid JSON response: {e}") from e


def parse_event(data: dict) -> Optional[Event]:
    """Parse a single Ticketmaster event into our Event model."""
    name = (data.get("name") or "").strip()
    if not name:
        return None

    dates = data.get("dates", {})
    event_date = parse_date_text(dates.get("start", {}).get("localDate", ""))
    if not event_date:
        return None
    end_date = parse_date_text(dates.get("end", {}).get("localDate", ""))

    venues = data.get("_embedded", {}).get("venues", [])
    venue = venues[0] if venues else {}
    # Kept as reported, even when it is a country name
    city = (venue.get("city") or {}).get("name") or "Unknown"

    classifications = data.get("classifications") or [{}]
    classification = classifications[0]
    segment = (classification.get("segment") or {}).get("name", "")
    subcategory = (classification.get("genre") or {}).get("name") or \
        (classification.get("subGenre") or {}).get("name")

    image = best_image(data.get("images") or [])

    return Event(
        id=f"tm_{data.get('id', '')}",
        title=name,
        date=event_date,
        end_date=end_date,
        city=city,
        venue=venue.get("name"),
        category=SEGMENT_CATEGORIES.get(segment, "Other"),
        subcategory=subcategory,
        description=data.get("description") or data.get("pleaseNote") or None,
        source=SOURCE_NAME,
        url=data.get("url"),
        image_url=image.get("url") if image else None,
    )


def best_image(images: List[dict]) -> Optional[dict]:
    """Prefer a landscape image at least 640x480, then any 640 wide, then the first."""
    for img in images:
        width, height = img.get("width", 0), img.get("height", 0)
        if width >= 640 and height >= 480 and width >= height:
            return img
    for img in images:
        if img.get("width", 0) >= 640:
            return img
    return images[0] if images else None
