"""PredictHQ events API source.

API docs: https://docs.predicthq.com/api/events/search-events
Requires: PREDICTHQ_API_KEY environment variable (bearer token)
"""

import logging
from datetime import date
from typing import List, Optional

import requests

from ..config import PREDICTHQ_API_KEY, REQUEST_TIMEOUT
from ..date_utils import parse_date_text, parse_timestamp
from ..errors import ProviderError
from ..models import Event

logger = logging.getLogger("conflict-radar.predicthq")

SOURCE_NAME = "predicthq"
BASE_URL = "https://api.predicthq.com/v1"

PAGE_LIMIT = 500  # API maximum
MAX_OFFSET = 4500  # Stop after 10 pages
SEARCH_RADIUS = "15km"

# Our category -> PredictHQ category. Missing means search all categories.
CATEGORY_TO_PHQ = {
    "Technology": "conferences",
    "Business": "conferences",
    "Marketing": "conferences",
    "Finance": "conferences",
    "Professional Development": "conferences",
    "Networking": "conferences",
    "Healthcare": "conferences",
    "Conferences": "conferences",
    "Trade Shows": "expos",
    "Expos": "expos",
    "Education": "academic",
    "Academic": "academic",
    "Entertainment": "concerts",
    "Music": "concerts",
    "Arts & Culture": "festivals",
    "Film": "performing-arts",
    "Sports": "sports",
}

# PredictHQ category -> ours
PHQ_TO_CATEGORY = {
    "conferences": "Business",
    "expos": "Business",
    "concerts": "Entertainment",
    "nightlife": "Entertainment",
    "sports": "Sports",
    "festivals": "Arts & Culture",
    "performing-arts": "Arts & Culture",
    "academic": "Education",
    "school-holidays": "Education",
    "health-warnings": "Healthcare",
    "disease": "Healthcare",
}

# City -> (lat, lon, ISO country) for radius searches
CITY_COORDINATES = {
    "Prague": (50.0755, 14.4378, "CZ"),
    "Brno": (49.1951, 16.6068, "CZ"),
    "Ostrava": (49.8209, 18.2625, "CZ"),
    "London": (51.5074, -0.1278, "GB"),
    "Berlin": (52.5200, 13.4050, "DE"),
    "Paris": (48.8566, 2.3522, "FR"),
    "Amsterdam": (52.3676, 4.9041, "NL"),
    "Vienna": (48.2082, 16.3738, "AT"),
    "Warsaw": (52.2297, 21.0122, "PL"),
    "Budapest": (47.4979, 19.0402, "HU"),
    "Munich": (48.1351, 11.5820, "DE"),
}


class PredictHQSource:
    name = "PredictHQ"

    def __init__(self, api_key: Optional[str] = None, timeout: int = REQUEST_TIMEOUT):
        self.api_key = api_key if api_key is not None else PREDICTHQ_API_KEY
        self.timeout = timeout

    def fetch(self, city: str, start: date, end: date, category: Optional[str] = None) -> List[Event]:
        """Fetch events in a city between start and end, paging by offset."""
        if not self.api_key:
            raise ProviderError(self.name, "No API key configured (set PREDICTHQ_API_KEY)")

        params = location_params(city)
        params.update({
            "start.gte": f"{start.isoformat()}T00:00:00",
            "start.lte": f"{end.isoformat()}T23:59:59",
            "limit": PAGE_LIMIT,
            "sort": "start",
        })
        phq_category = CATEGORY_TO_PHQ.get(category) if category else None
        if phq_category:
            params["category"] = phq_category
        else:
            logger.debug(f"PredictHQ: no category mapping for {category!r}, searching all")

        events: List[Event] = []
        offset = 0
        total = 0
        while True:
            params["offset"] = offset
            data = self._get(params)

            results = data.get("results") or []
            total = data.get("count", 0)
            for item in results:
                try:
                    event = parse_event(item)
                except (KeyError, TypeError, ValueError) as e:
                    logger.debug(f"Skipping PredictHQ event: {e}")
                    continue
                if event:
                    events.append(event)

            offset += PAGE_LIMIT
            if len(results) < PAGE_LIMIT or offset >= total or offset > MAX_OFFSET:
                break

        logger.info(f"  PredictHQ: {len(events)} events for {city} ({total} available)")
        return events

    def _get(self, params: dict) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        try:
            response = requests.get(
                f"{BASE_URL}/events/", params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise ProviderError(self.name, f"API request failed: {str(e)[:100]}") from e
        except ValueError as e:
            raise ProviderError(self.name, f"Invalid JSON response: {e}") from e


def location_params(city: str) -> dict:
    coords = CITY_COORDINATES.get(city)
    if coords:
        lat, lon, country = coords
        return {"within": f"{SEARCH_RADIUS}@{lat},{lon}", "country": country}
    return {"q": city}


def parse_event(data: dict) -> Optional[Event]:
    """Parse a single PredictHQ event into our Event model."""
    title = (data.get("title") or "").strip()
    event_date = parse_date_text(data.get("start", ""))
    if not title or not event_date:
        return None

    # Newer responses carry the venue as an entity of type "venue"
    venue = None
    for entity in data.get("entities") or []:
        if entity.get("type") == "venue":
            venue = entity.get("name")
            break
    location = data.get("location") if isinstance(data.get("location"), dict) else {}
    venue = venue or location.get("name")

    city = location.get("city") or (data.get("geo") or {}).get("address", {}).get("locality")

    return Event(
        id=f"phq_{data['id']}",
        title=title,
        date=event_date,
        end_date=parse_date_text(data.get("end", "")),
        city=city or "Unknown",
        venue=venue,
        category=PHQ_TO_CATEGORY.get(data.get("category", ""), "Other"),
        subcategory=data.get("subcategory"),
        description=data.get("description") or None,
        expected_attendees=data.get("phq_attendance"),
        source=SOURCE_NAME,
        created_at=parse_timestamp(data.get("created", "")),
        updated_at=parse_timestamp(data.get("updated", "")),
    )
