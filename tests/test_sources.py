"""Unit tests for the event data providers."""
from datetime import date

import pytest
import responses

from conflict_radar.errors import ProviderError
from conflict_radar.models import Event
from conflict_radar.sources import PredictHQSource, TicketmasterSource, VenueCalendarSource
from conflict_radar.sources.ticketmaster import best_image

TM_URL = "https://app.ticketmaster.com/discovery/v2/events.json"
PHQ_URL = "https://api.predicthq.com/v1/events/"

START = date(2024, 3, 1)
END = date(2024, 3, 31)


def _tm_event(event_id="G5v", name="Rock Night", segment="Music", city="Praha", venue="O2 Arena"):
    return {
        "id": event_id,
        "name": name,
        "url": f"https://www.ticketmaster.cz/event/{event_id}",
        "dates": {"start": {"localDate": "2024-03-15", "localTime": "20:00:00"}},
        "classifications": [{"segment": {"name": segment}, "genre": {"name": "Rock"}}],
        "images": [
            {"url": "https://img/portrait.jpg", "width": 480, "height": 640},
            {"url": "https://img/landscape.jpg", "width": 1024, "height": 576},
        ],
        "_embedded": {"venues": [{"name": venue, "city": {"name": city}}]},
    }


class TestTicketmasterSource:
    """Test cases for TicketmasterSource."""

    @responses.activate
    def test_fetch_parses_events(self):
        """Events are normalized with mapped category, venue and best image."""
        responses.add(
            responses.GET,
            TM_URL,
            json={"_embedded": {"events": [_tm_event()]}, "page": {"totalPages": 1}},
            status=200,
        )

        events = TicketmasterSource(api_key="k").fetch("Prague", START, END, "Entertainment")

        assert len(events) == 1
        event = events[0]
        assert event.id == "tm_G5v"
        assert event.date == date(2024, 3, 15)
        assert event.city == "Praha"
        assert event.venue == "O2 Arena"
        assert event.category == "Entertainment"
        assert event.subcategory == "Rock"
        assert event.image_url == "https://img/landscape.jpg"
        assert event.source == "ticketmaster"

        request = responses.calls[0].request
        assert "classificationName=Music" in request.url
        assert "apikey=k" in request.url

    @responses.activate
    def test_segment_mapping(self):
        """Arts & Theatre becomes Arts & Culture; unknown segments become Other."""
        responses.add(
            responses.GET,
            TM_URL,
            json={"_embedded": {"events": [
                _tm_event("a", segment="Arts & Theatre"),
                _tm_event("b", segment="Miscellaneous"),
                _tm_event("c", segment="Film"),
            ]}},
            status=200,
        )
        events = TicketmasterSource(api_key="k").fetch("Prague", START, END)
        assert [e.category for e in events] == ["Arts & Culture", "Other", "Entertainment"]

    @responses.activate
    def test_empty_response(self):
        responses.add(responses.GET, TM_URL, json={"page": {"totalPages": 0}}, status=200)
        assert TicketmasterSource(api_key="k").fetch("Prague", START, END) == []

    @responses.activate
    def test_http_error_raises_provider_error(self):
        responses.add(responses.GET, TM_URL, body="Server Error", status=500)
        with pytest.raises(ProviderError) as exc:
            TicketmasterSource(api_key="k").fetch("Prague", START, END)
        assert exc.value.source_name == "Ticketmaster"

    def test_missing_api_key(self):
        with pytest.raises(ProviderError):
            TicketmasterSource(api_key="").fetch("Prague", START, END)

    @responses.activate
    def test_malformed_record_skipped(self):
        broken = {"id": "x", "name": "No Date", "dates": {"start": {}}}
        responses.add(
            responses.GET,
            TM_URL,
            json={"_embedded": {"events": [broken, _tm_event()]}},
            status=200,
        )
        events = TicketmasterSource(api_key="k").fetch("Prague", START, END)
        assert [e.title for e in events] == ["Rock Night"]

    def test_best_image_falls_back_to_first(self):
        images = [{"url": "a", "width": 100, "height": 100}]
        assert best_image(images)["url"] == "a"
        assert best_image([]) is None


class TestPredictHQSource:
    """Test cases for PredictHQSource."""

    def _result(self, event_id="e1", category="conferences"):
        return {
            "id": event_id,
            "title": "Prague Dev Summit",
            "category": category,
            "start": "2024-03-15T09:00:00Z",
            "end": "2024-03-16T17:00:00Z",
            "phq_attendance": 1200,
            "entities": [{"type": "venue", "name": "Prague Congress Centre"}],
            "location": {"city": "Prague"},
            "created": "2024-01-10T12:00:00Z",
        }

    @responses.activate
    def test_fetch_parses_events(self):
        responses.add(
            responses.GET,
            PHQ_URL,
            json={"count": 1, "results": [self._result()]},
            status=200,
        )

        events = PredictHQSource(api_key="token").fetch("Prague", START, END, "Technology")

        assert len(events) == 1
        event = events[0]
        assert event.id == "phq_e1"
        assert event.category == "Business"
        assert event.expected_attendees == 1200
        assert event.venue == "Prague Congress Centre"
        assert event.end_date == date(2024, 3, 16)
        assert event.created_at.year == 2024

        request = responses.calls[0].request
        assert request.headers["Authorization"] == "Bearer token"
        assert "category=conferences" in request.url

    @responses.activate
    def test_offset_pagination(self):
        """Pages are requested until the reported count is reached."""
        first_page = [self._result(f"a{i}") for i in range(500)]
        second_page = [self._result("last")]
        responses.add(responses.GET, PHQ_URL, json={"count": 501, "results": first_page}, status=200)
        responses.add(responses.GET, PHQ_URL, json={"count": 501, "results": second_page}, status=200)

        events = PredictHQSource(api_key="token").fetch("Prague", START, END)

        assert len(events) == 501
        assert len(responses.calls) == 2
        assert "offset=500" in responses.calls[1].request.url

    @responses.activate
    def test_unknown_category_maps_to_other(self):
        responses.add(
            responses.GET,
            PHQ_URL,
            json={"count": 1, "results": [self._result(category="severe-weather")]},
            status=200,
        )
        events = PredictHQSource(api_key="token").fetch("Prague", START, END)
        assert events[0].category == "Other"

    @responses.activate
    def test_http_error_raises_provider_error(self):
        responses.add(responses.GET, PHQ_URL, body="Unauthorized", status=401)
        with pytest.raises(ProviderError):
            PredictHQSource(api_key="bad").fetch("Prague", START, END)

    def test_missing_api_key(self):
        with pytest.raises(ProviderError):
            PredictHQSource(api_key="").fetch("Prague", START, END)


class TestVenueCalendarSource:
    """Test cases for VenueCalendarSource."""

    CALENDARS = {
        "Lucerna": ("https://lucerna.example/program/", "prague"),
        "Rudolfinum": ("https://rudolfinum.example/program/", "prague"),
        "Janacek Theatre": ("https://ndbrno.example/program/", "brno"),
    }

    JSONLD_PAGE = """
    <html><head>
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
        {"@type": "MusicEvent", "name": "Spring Jazz", "startDate": "2024-03-20T20:00:00+01:00",
         "location": {"@type": "Place", "name": "Lucerna Music Bar",
                      "address": {"addressLocality": "Praha"}},
         "image": ["https://img/jazz.jpg"]},
        {"@type": "TheaterEvent", "name": "Out Of Range", "startDate": "2024-05-01"}
    ]}
    </script>
    </head><body></body></html>
    """

    CARD_PAGE = """
    <html><body>
        <div class="event-item">
            <h3 class="event-title">Chamber Concert</h3>
            <time datetime="2024-03-22">22. 3.</time>
            <a href="/concert/1">Detail</a>
        </div>
    </body></html>
    """

    @responses.activate
    def test_jsonld_graph_and_card_fallback(self):
        responses.add(responses.GET, "https://lucerna.example/program/", body=self.JSONLD_PAGE, status=200)
        responses.add(responses.GET, "https://rudolfinum.example/program/", body=self.CARD_PAGE, status=200)

        events = VenueCalendarSource(calendars=self.CALENDARS).fetch("Prague", START, END)

        by_title = {e.title: e for e in events}
        assert set(by_title) == {"Spring Jazz", "Chamber Concert"}

        jazz = by_title["Spring Jazz"]
        assert jazz.category == "Entertainment"
        assert jazz.city == "Praha"
        assert jazz.venue == "Lucerna Music Bar"
        assert jazz.image_url == "https://img/jazz.jpg"

        chamber = by_title["Chamber Concert"]
        assert chamber.date == date(2024, 3, 22)
        assert chamber.city == "Prague"
        assert chamber.url == "https://rudolfinum.example/program/concert/1"
        # Brno calendar is never requested for Prague
        assert len(responses.calls) == 2

    @responses.activate
    def test_one_broken_page_does_not_fail_source(self):
        responses.add(responses.GET, "https://lucerna.example/program/", body=self.JSONLD_PAGE, status=200)
        responses.add(responses.GET, "https://rudolfinum.example/program/", body="down", status=503)
        events = VenueCalendarSource(calendars=self.CALENDARS).fetch("Prague", START, END)
        assert [e.title for e in events] == ["Spring Jazz"]

    @responses.activate
    def test_malformed_page_does_not_fail_source(self):
        """Odd JSON-LD on one page leaves the other venues' events intact."""
        malformed = """
        <script type="application/ld+json">
        [{"@type": "Event", "name": "List Date", "startDate": ["2024-03-15"]},
         {"@type": "Event", "name": ["Not", "A", "String"], "startDate": "2024-03-16"}]
        </script>
        """
        responses.add(responses.GET, "https://lucerna.example/program/", body=self.JSONLD_PAGE, status=200)
        responses.add(responses.GET, "https://rudolfinum.example/program/", body=malformed, status=200)
        events = VenueCalendarSource(calendars=self.CALENDARS).fetch("Prague", START, END)
        assert [e.title for e in events] == ["Spring Jazz"]

    def test_scrape_error_on_one_venue_is_contained(self, monkeypatch):
        """Any exception while scraping one venue only drops that venue."""
        source = VenueCalendarSource(calendars=self.CALENDARS)
        calls = []

        def fake_scrape(venue_name, url, city):
            calls.append(venue_name)
            if venue_name == "Rudolfinum":
                raise AttributeError("'list' object has no attribute 'strip'")
            return [Event(
                id="venue_1", title="Good", date=date(2024, 3, 15), city=city,
                venue=venue_name, category="Entertainment", source="venue_calendar",
            )]

        monkeypatch.setattr(source, "scrape", fake_scrape)
        events = source.fetch("Prague", START, END)
        assert [e.title for e in events] == ["Good"]
        assert calls == ["Lucerna", "Rudolfinum"]

    @responses.activate
    def test_all_pages_broken_raises(self):
        responses.add(responses.GET, "https://ndbrno.example/program/", body="down", status=503)
        with pytest.raises(ProviderError):
            VenueCalendarSource(calendars=self.CALENDARS).fetch("Brno", START, END)

    def test_city_without_calendars(self):
        assert VenueCalendarSource(calendars=self.CALENDARS).fetch("London", START, END) == []
