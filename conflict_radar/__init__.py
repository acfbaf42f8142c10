"""conflict-radar: find event dates with the least competition."""

from .engine import ConflictAnalyzer
from .errors import (
    ComputationError,
    ConflictRadarError,
    OverlapTimeoutError,
    ProviderError,
    ValidationError,
)
from .logging_config import setup_logging
from .models import (
    AnalysisParams,
    AnalysisResult,
    AudienceOverlapSummary,
    DateCandidate,
    DateRecommendation,
    Event,
    SourceResult,
    VenueIntelligenceSummary,
)

__version__ = "0.1.0"


def analyze(params, providers=None, **kwargs) -> AnalysisResult:
    """Run one analysis with the built-in providers unless others are given."""
    if providers is None:
        from .sources import default_sources
        providers = default_sources()
    return ConflictAnalyzer(providers, **kwargs).analyze(params)


__all__ = [
    "AnalysisParams",
    "AnalysisResult",
    "AudienceOverlapSummary",
    "ComputationError",
    "ConflictAnalyzer",
    "ConflictRadarError",
    "DateCandidate",
    "DateRecommendation",
    "Event",
    "OverlapTimeoutError",
    "ProviderError",
    "SourceResult",
    "ValidationError",
    "VenueIntelligenceSummary",
    "analyze",
    "setup_logging",
]
