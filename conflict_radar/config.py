"""Configuration for conflict-radar.

Static lookup tables (cities, venues, category relationships) and the
scoring constants used by the conflict analysis engine.
"""

import os

# ---------------------------------------------------------------------------
# API keys: set as environment variables
# ---------------------------------------------------------------------------
TICKETMASTER_API_KEY = os.environ.get("TICKETMASTER_API_KEY", "")
PREDICTHQ_API_KEY = os.environ.get("PREDICTHQ_API_KEY", "")

# ---------------------------------------------------------------------------
# Network / collaborator timeouts (seconds)
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "15"))
OVERLAP_TIMEOUT_SECONDS = float(os.environ.get("OVERLAP_TIMEOUT_SECONDS", "5"))
# Whole-provider budget: several paged requests per fetch
PROVIDER_TIMEOUT_SECONDS = float(os.environ.get("PROVIDER_TIMEOUT_SECONDS", str(REQUEST_TIMEOUT * 4)))

LOG_LEVEL = os.environ.get("CONFLICT_RADAR_LOG_LEVEL", "INFO")

# ---------------------------------------------------------------------------
# Candidate date generation
# ---------------------------------------------------------------------------
CANDIDATE_OFFSET_DAYS = 7  # -7..+7 around the preferred start
CANDIDATE_SWEEP_STRIDE_DAYS = 3

# ---------------------------------------------------------------------------
# Conflict scoring
# ---------------------------------------------------------------------------
TOP_SIGNIFICANT_EVENTS = 5
REMAINING_EVENT_SCORE = 15

BASE_EVENT_SCORE = 20
SAME_CATEGORY_SCORE = 30
VENUE_SCORE = 15
IMAGE_SCORE = 10
DESCRIPTION_SCORE = 5
LONG_DESCRIPTION_LENGTH = 50

# Significance used to pick the events that get detailed scoring
SIGNIFICANCE_VENUE_WEIGHT = 2
SIGNIFICANCE_IMAGE_WEIGHT = 1
SIGNIFICANCE_DESCRIPTION_WEIGHT = 1

OVERLAP_WEIGHT = 0.5
FALLBACK_OVERLAP_WEIGHT = 0.3  # fallback estimate is trusted less
HIGH_OVERLAP_THRESHOLD = 0.6

# (min attendees exclusive, multiplier), checked top-down
ATTENDEE_MULTIPLIERS = [
    (1000, 1.2),
    (500, 1.1),
]

MIN_SCORE = 0.0
MAX_SCORE = 100.0

# ---------------------------------------------------------------------------
# Risk tiers and ranking
# ---------------------------------------------------------------------------
RISK_LOW = "Low"
RISK_MEDIUM = "Medium"
RISK_HIGH = "High"

LOW_RISK_MAX_SCORE = 30
MEDIUM_RISK_MAX_SCORE = 60

MAX_RESULT_DATES = 3
HIGH_RISK_BACKFILL_MIN_SCORE = 50

MAX_REASONS = 3
MAX_HIGH_PROFILE_REASONS = 2
HIGH_COMPETITION_SCORE = 70
MODERATE_COMPETITION_SCORE = 40

# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------
TITLE_SIMILARITY_THRESHOLD = 0.8

# ---------------------------------------------------------------------------
# Category relationships
# Deliberately narrow and not reciprocal: a key only lists the categories
# that compete with it, e.g. Arts & Culture lists Entertainment but not the
# other way round.
# ---------------------------------------------------------------------------
RELATED_CATEGORIES = {
    "Technology": ["Technology"],
    "Business": ["Business", "Finance", "Marketing"],
    "Finance": ["Finance", "Business"],
    "Marketing": ["Marketing", "Business"],
    "Entertainment": ["Entertainment", "Music"],
    "Music": ["Music", "Entertainment"],
    "Arts & Culture": ["Arts & Culture", "Entertainment"],
    "Sports": ["Sports"],
    "Education": ["Education"],
    "Healthcare": ["Healthcare"],
}

# ---------------------------------------------------------------------------
# City configuration
# Each city has: name (canonical), country, aliases (language/diacritic
# variants) and a regex used as a last resort to spot the city in free text.
# ---------------------------------------------------------------------------
CITIES = {
    "prague": {
        "name": "Prague",
        "country": "Czech Republic",
        "aliases": ["prague", "praha", "prag", "praga", "hlavni mesto praha", "hlavní město praha"],
        "pattern": r"\b(prague|praha|prag)\b",
    },
    "brno": {
        "name": "Brno",
        "country": "Czech Republic",
        "aliases": ["brno", "brünn", "brunn"],
        "pattern": r"\bbrno\b",
    },
    "ostrava": {
        "name": "Ostrava",
        "country": "Czech Republic",
        "aliases": ["ostrava"],
        "pattern": r"\bostrava\b",
    },
    "olomouc": {
        "name": "Olomouc",
        "country": "Czech Republic",
        "aliases": ["olomouc", "olmütz"],
        "pattern": r"\bolomouc\b",
    },
    "plzen": {
        "name": "Plzen",
        "country": "Czech Republic",
        "aliases": ["plzen", "plzeň", "pilsen"],
        "pattern": r"\b(plze[nň]|pilsen)\b",
    },
    "liberec": {
        "name": "Liberec",
        "country": "Czech Republic",
        "aliases": ["liberec", "reichenberg"],
        "pattern": r"\bliberec\b",
    },
    "ceske-budejovice": {
        "name": "Ceske Budejovice",
        "country": "Czech Republic",
        "aliases": ["ceske budejovice", "české budějovice", "budweis"],
        "pattern": r"\b([cč]esk[eé] bud[eě]jovice|budweis)\b",
    },
    "hradec-kralove": {
        "name": "Hradec Kralove",
        "country": "Czech Republic",
        "aliases": ["hradec kralove", "hradec králové", "königgrätz"],
        "pattern": r"\bhradec kr[aá]lov[eé]\b",
    },
    "pardubice": {
        "name": "Pardubice",
        "country": "Czech Republic",
        "aliases": ["pardubice"],
        "pattern": r"\bpardubice\b",
    },
    "zlin": {
        "name": "Zlin",
        "country": "Czech Republic",
        "aliases": ["zlin", "zlín", "gottwaldov"],
        "pattern": r"\b(zl[ií]n|gottwaldov)\b",
    },
    "karlovy-vary": {
        "name": "Karlovy Vary",
        "country": "Czech Republic",
        "aliases": ["karlovy vary", "karlsbad"],
        "pattern": r"\b(karlovy vary|karlsbad)\b",
    },
    "london": {
        "name": "London",
        "country": "United Kingdom",
        "aliases": ["london", "londýn", "londyn", "greater london"],
        "pattern": r"\blondon\b",
    },
    "berlin": {
        "name": "Berlin",
        "country": "Germany",
        "aliases": ["berlin", "berlín"],
        "pattern": r"\bberl[ií]n\b",
    },
    "paris": {
        "name": "Paris",
        "country": "France",
        "aliases": ["paris", "paříž", "pariz"],
        "pattern": r"\bparis\b",
    },
    "amsterdam": {
        "name": "Amsterdam",
        "country": "Netherlands",
        "aliases": ["amsterdam"],
        "pattern": r"\bamsterdam\b",
    },
    "vienna": {
        "name": "Vienna",
        "country": "Austria",
        "aliases": ["vienna", "wien", "vídeň", "viden"],
        "pattern": r"\b(vienna|wien)\b",
    },
    "munich": {
        "name": "Munich",
        "country": "Germany",
        "aliases": ["munich", "münchen", "munchen", "mnichov"],
        "pattern": r"\b(munich|m[uü]nchen)\b",
    },
}

# Strings providers sometimes put in the city field instead of a city
COUNTRY_NAMES = {
    "czech republic", "czechia", "česká republika", "ceska republika", "cz",
    "united kingdom", "uk", "great britain", "england",
    "germany", "deutschland", "de",
    "france", "fr",
    "netherlands", "the netherlands", "nl",
    "austria", "österreich", "at",
}

# ---------------------------------------------------------------------------
# Venue → city table
# (venue name, city key, confidence). Keys are matched lowercase, exact first
# and then as substrings in either direction.
# ---------------------------------------------------------------------------
_VENUES = [
    # Prague
    ("O2 Arena", "prague", "high"),
    ("O2 Arena Prague", "prague", "high"),
    ("O2 Universum", "prague", "high"),
    ("Forum Karlín", "prague", "high"),
    ("Forum Karlin", "prague", "high"),
    ("Rudolfinum", "prague", "high"),
    ("National Theatre", "prague", "medium"),
    ("State Opera", "prague", "medium"),
    ("Prague Castle", "prague", "high"),
    ("Lucerna", "prague", "high"),
    ("Roxy", "prague", "medium"),
    ("Charles University", "prague", "high"),
    ("Czech Technical University", "prague", "high"),
    ("Prague Congress Centre", "prague", "high"),
    ("Prague Conference Centre", "prague", "high"),
    ("Prague Exhibition Grounds", "prague", "high"),
    ("Výstaviště Praha", "prague", "high"),
    ("Hilton Prague", "prague", "high"),
    ("InterContinental Prague", "prague", "high"),
    ("Prague Marriott", "prague", "high"),
    ("Prague Hotel", "prague", "medium"),
    ("Prague University", "prague", "medium"),
    # Brno
    ("Brno Exhibition Centre", "brno", "high"),
    ("Výstaviště Brno", "brno", "high"),
    ("Brno Congress Centre", "brno", "high"),
    ("Masaryk University", "brno", "high"),
    ("Janáček Theatre", "brno", "high"),
    ("Hilton Brno", "brno", "high"),
    ("Brno Hotel", "brno", "medium"),
    # Ostrava
    ("Ostrava Arena", "ostrava", "high"),
    ("ČEZ Arena", "ostrava", "high"),
    ("CEZ Arena", "ostrava", "high"),
    ("Dolní Vítkovice", "ostrava", "high"),
    # Other Czech cities
    ("Olomouc Arena", "olomouc", "high"),
    ("Plzeň Arena", "plzen", "high"),
    ("Liberec Arena", "liberec", "high"),
    ("Budvar Arena", "ceske-budejovice", "high"),
    ("Klicperovo Divadlo", "hradec-kralove", "high"),
    ("Kulturní centrum Aldis", "hradec-kralove", "high"),
    ("Aldis", "hradec-kralove", "high"),
    ("Enteria Arena", "pardubice", "high"),
    ("Zlín Arena", "zlin", "high"),
    ("KV Arena", "karlovy-vary", "high"),
    # London
    ("O2 Arena London", "london", "high"),
    ("The O2 London", "london", "high"),
    ("ExCeL London", "london", "high"),
    ("Olympia London", "london", "high"),
    ("Barbican Centre", "london", "high"),
    ("Royal Festival Hall", "london", "high"),
    ("Southbank Centre", "london", "high"),
    ("Business Design Centre", "london", "high"),
    ("Wembley Stadium", "london", "high"),
    ("Imperial College", "london", "high"),
    ("London University", "london", "medium"),
    # Berlin
    ("Messe Berlin", "berlin", "high"),
    ("Mercedes-Benz Arena Berlin", "berlin", "high"),
    ("Humboldt University", "berlin", "high"),
    ("Berlin Congress Centre", "berlin", "high"),
    # Paris
    ("Paris Expo Porte de Versailles", "paris", "high"),
    ("Porte de Versailles", "paris", "high"),
    ("Palais des Congrès", "paris", "high"),
    ("Accor Arena", "paris", "high"),
    ("Sorbonne", "paris", "high"),
    # Amsterdam
    ("RAI Amsterdam", "amsterdam", "high"),
    ("Ziggo Dome", "amsterdam", "high"),
    ("Johan Cruijff ArenA", "amsterdam", "high"),
    # Vienna
    ("Wiener Stadthalle", "vienna", "high"),
    ("Austria Center Vienna", "vienna", "high"),
    ("Hilton Vienna", "vienna", "high"),
    # Munich
    ("Messe München", "munich", "high"),
    ("Olympiahalle", "munich", "high"),
    ("Hilton Munich", "munich", "high"),
]

# Venue strings made only of these words never match a longer venue key
GENERIC_VENUE_WORDS = {
    "the", "arena", "hall", "stadium", "theatre", "theater", "centre", "center",
    "club", "hotel", "university", "college", "congress", "conference",
    "exhibition", "grounds", "opera", "castle", "dome", "expo", "main", "city",
}
MIN_PARTIAL_VENUE_LENGTH = 5

# ---------------------------------------------------------------------------
# Venue calendars scraped for JSON-LD events
# (calendar url, city key)
# ---------------------------------------------------------------------------
VENUE_CALENDARS = {
    "Forum Karlín": ("https://www.forumkarlin.cz/program/", "prague"),
    "Lucerna": ("https://www.lucerna.cz/program/", "prague"),
    "Rudolfinum": ("https://www.rudolfinum.cz/en/programme/", "prague"),
    "Janáček Theatre": ("https://www.ndbrno.cz/en/programme/", "brno"),
}

# ---------------------------------------------------------------------------
# Lookup maps
# Populated from the tables above at import time
# ---------------------------------------------------------------------------
CITY_ALIASES = {}
CITY_PATTERNS = []
for _city_key, _city_info in CITIES.items():
    _canonical = _city_info["name"]
    CITY_ALIASES[_canonical.lower()] = _canonical
    for _alias in _city_info.get("aliases", []):
        CITY_ALIASES[_alias.lower()] = _canonical
    CITY_PATTERNS.append((_city_info["pattern"], _canonical))

VENUE_CITY_MAP = {}
for _venue, _city_key, _confidence in _VENUES:
    VENUE_CITY_MAP[_venue.lower()] = {
        "venue": _venue,
        "city": CITIES[_city_key]["name"],
        "country": CITIES[_city_key]["country"],
        "confidence": _confidence,
    }


def city_name(city_key: str) -> str:
    """Canonical display name for a key of CITIES."""
    return CITIES[city_key]["name"]
