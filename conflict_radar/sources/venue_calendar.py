"""Venue calendar scraper.

Reads schema.org Event markup (JSON-LD) from venue programme pages listed in
config.VENUE_CALENDARS. Falls back to common event-card HTML when a page
has no structured data. Each venue is scraped independently so one broken
page does not take the others down.
"""

import hashlib
import json
import logging
from datetime import date
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from ..config import REQUEST_TIMEOUT, VENUE_CALENDARS, city_name
from ..date_utils import parse_date_text
from ..errors import ProviderError
from ..models import Event

logger = logging.getLogger("conflict-radar.venue-calendar")

SOURCE_NAME = "venue_calendar"

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                  "AppleWebKit/537.36 (KHTML, like Gecko) "
                  "Chrome/120.0.0.0 Safari/537.36",
}

# schema.org Event subtypes -> our category
SCHEMA_CATEGORIES = {
    "MusicEvent": "Entertainment",
    "ComedyEvent": "Entertainment",
    "ScreeningEvent": "Entertainment",
    "TheaterEvent": "Arts & Culture",
    "DanceEvent": "Arts & Culture",
    "ExhibitionEvent": "Arts & Culture",
    "VisualArtsEvent": "Arts & Culture",
    "Festival": "Arts & Culture",
    "SportsEvent": "Sports",
    "BusinessEvent": "Business",
    "EducationEvent": "Education",
}
EVENT_TYPES = set(SCHEMA_CATEGORIES) | {"Event"}

CARD_SELECTORS = [
    ".event", ".event-item", ".event-card", ".event-listing",
    "article.event", "li.event", ".programme-item", ".program-item",
]


class VenueCalendarSource:
    name = "Venue calendars"

    def __init__(self, calendars: Optional[dict] = None, timeout: int = REQUEST_TIMEOUT):
        # venue name -> (calendar url, city key)
        self.calendars = calendars if calendars is not None else VENUE_CALENDARS
        self.timeout = timeout

    def fetch(self, city: str, start: date, end: date, category: Optional[str] = None) -> List[Event]:
        """Scrape every configured calendar in the city; fail only if all of them fail."""
        targets = {
            venue: (url, city_name(city_key))
            for venue, (url, city_key) in self.calendars.items()
            if city_name(city_key).lower() == city.strip().lower()
        }
        if not targets:
            logger.debug(f"No venue calendars configured for {city}")
            return []

        events: List[Event] = []
        failures = []
        for venue_name, (url, venue_city) in targets.items():
            try:
                venue_events = self.scrape(venue_name, url, venue_city)
            except Exception as e:
                logger.warning(f"  {venue_name}: scrape failed: {e}")
                failures.append(venue_name)
                continue
            in_range = [e for e in venue_events if start <= e.date <= end]
            logger.info(f"  {venue_name}: {len(in_range)} events")
            events.extend(in_range)

        if len(failures) == len(targets):
            raise ProviderError(self.name, f"All venue calendars failed: {', '.join(failures)}")
        return events

    def scrape(self, venue_name: str, url: str, city: str) -> List[Event]:
        response = requests.get(url, headers=HEADERS, timeout=self.timeout)
        response.raise_for_status()
        soup = BeautifulSoup(response.text, "html.parser")

        events = parse_jsonld_events(soup, venue_name, city, url)
        if events:
            return events
        return parse_event_cards(soup, venue_name, city, url)


def parse_jsonld_events(soup: BeautifulSoup, venue_name: str, city: str, page_url: str) -> List[Event]:
    """Events from <script type="application/ld+json"> blocks, including @graph and ItemList."""
    events = []
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        for item in _jsonld_items(data):
            try:
                event = _parse_jsonld_event(item, venue_name, city, page_url)
            except (AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed JSON-LD event on {page_url}: {e}")
                continue
            if event:
                events.append(event)
    return events


def _jsonld_items(data) -> List[dict]:
    items = data if isinstance(data, list) else [data]
    found = []
    for item in items:
        if not isinstance(item, dict):
            continue
        if "@graph" in item:
            found.extend(_jsonld_items(item["@graph"]))
            continue
        item_type = item.get("@type")
        if item_type == "ItemList":
            for list_item in item.get("itemListElement", []):
                inner = list_item.get("item", list_item) if isinstance(list_item, dict) else None
                if isinstance(inner, dict) and inner.get("@type") in EVENT_TYPES:
                    found.append(inner)
        elif item_type in EVENT_TYPES:
            found.append(item)
    return found


def _parse_jsonld_event(data: dict, venue_name: str, city: str, page_url: str) -> Optional[Event]:
    name = (data.get("name") or "").strip()
    event_date = parse_date_text(data.get("startDate", ""))
    if not name or not event_date:
        return None

    # Use the JSON-LD venue and locality if present, fall back to the configured ones
    location = data.get("location") if isinstance(data.get("location"), dict) else {}
    address = location.get("address") if isinstance(location.get("address"), dict) else {}
    image = data.get("image")
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")

    return Event(
        id=_event_id(venue_name, name, event_date),
        title=name,
        date=event_date,
        end_date=parse_date_text(data.get("endDate", "")),
        city=address.get("addressLocality") or city,
        venue=location.get("name") or venue_name,
        category=SCHEMA_CATEGORIES.get(data.get("@type"), "Other"),
        description=data.get("description") or None,
        source=SOURCE_NAME,
        url=data.get("url") or page_url,
        image_url=image,
    )


def parse_event_cards(soup: BeautifulSoup, venue_name: str, city: str, page_url: str) -> List[Event]:
    """Generic event-card fallback: a heading plus a <time> or date element."""
    for selector in CARD_SELECTORS:
        cards = soup.select(selector)
        events = [e for e in (_parse_card(card, venue_name, city, page_url) for card in cards) if e]
        if events:
            return events
    return []


def _parse_card(el, venue_name: str, city: str, page_url: str) -> Optional[Event]:
    title_el = el.select_one("h2, h3, h4, .title, .event-title")
    if not title_el:
        return None
    title = title_el.get_text(strip=True)
    if len(title) < 3:
        return None

    date_el = el.select_one("time, .date, .event-date, [datetime]")
    if not date_el:
        return None
    event_date = parse_date_text(date_el.get("datetime", "") or date_el.get_text(strip=True))
    if not event_date:
        return None

    link_el = el.select_one("a[href]")
    url = link_el.get("href", "") if link_el else ""
    if url and not url.startswith("http"):
        url = f"{page_url.rstrip('/')}/{url.lstrip('/')}"

    return Event(
        id=_event_id(venue_name, title, event_date),
        title=title,
        date=event_date,
        city=city,
        venue=venue_name,
        category="Other",
        source=SOURCE_NAME,
        url=url or page_url,
    )


def _event_id(venue_name: str, title: str, event_date: date) -> str:
    digest = hashlib.sha1(f"{venue_name}|{title}|{event_date}".encode("utf-8")).hexdigest()
    return f"venue_{digest[:12]}"
