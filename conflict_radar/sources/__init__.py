"""Event data providers.

Every provider has a ``name`` and ``fetch(city, start, end, category=None)``
returning normalized Events, and raises ProviderError when it cannot answer.
"""

from .predicthq import PredictHQSource
from .ticketmaster import TicketmasterSource
from .venue_calendar import VenueCalendarSource


def default_sources():
    """All built-in providers, configured from the environment."""
    return [TicketmasterSource(), PredictHQSource(), VenueCalendarSource()]


__all__ = ["PredictHQSource", "TicketmasterSource", "VenueCalendarSource", "default_sources"]
