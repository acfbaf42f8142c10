"""Conflict analysis engine.

Fetches events from all configured providers, keeps the ones in the target
city, deduplicates, then scores every candidate date range and ranks them.

Usage:
    analyzer = ConflictAnalyzer([TicketmasterSource(), PredictHQSource()])
    result = analyzer.analyze(params)
"""

import inspect
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import List, Optional, Tuple

from .audience import AudienceOverlapPredictor, CategoryOverlapEstimator
from .config import OVERLAP_TIMEOUT_SECONDS, PROVIDER_TIMEOUT_SECONDS, TOP_SIGNIFICANT_EVENTS
from .date_utils import generate_candidates
from .dedup import dedup_report
from .errors import ProviderError
from .locations import LocationNormalizer
from .matching import match_competing_events
from .models import (
    AnalysisParams,
    AnalysisResult,
    DateCandidate,
    DateRecommendation,
    Event,
    SourceResult,
)
from .ranking import build_reasons, classify_risk, rank_recommendations
from .scoring import ConflictScorer
from .venues import VenueIntelligence

logger = logging.getLogger("conflict-radar.engine")


class ConflictAnalyzer:
    """Request-scoped analysis over a fixed set of collaborators.

    Holds no state between calls: every analyze() builds its own executor
    and result objects.
    """

    def __init__(
        self,
        providers,
        overlap_predictor=None,
        fallback_estimator=None,
        venue_intelligence=None,
        location_normalizer=None,
        overlap_timeout: float = OVERLAP_TIMEOUT_SECONDS,
        max_workers: Optional[int] = None,
        provider_timeout: float = PROVIDER_TIMEOUT_SECONDS,
    ):
        self.providers = list(providers)
        self.overlap_predictor = overlap_predictor or AudienceOverlapPredictor()
        self.fallback_estimator = fallback_estimator or CategoryOverlapEstimator()
        self.venue_intelligence = venue_intelligence or VenueIntelligence()
        # analyze(venue, date, attendees) is the contract; competing events are an optional extra
        self._venue_takes_competing = _accepts_keyword(self.venue_intelligence.analyze, "competing")
        self.location_normalizer = location_normalizer or LocationNormalizer()
        self.overlap_timeout = overlap_timeout
        self.max_workers = max_workers
        self.provider_timeout = provider_timeout

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def analyze(self, params: AnalysisParams) -> AnalysisResult:
        """Recommend low-conflict dates and flag the ones to avoid.

        Raises ValidationError for unusable params. Every other failure is
        recovered and reported in the result's warnings.
        """
        params.validate()
        logger.info(
            f"Analyzing {params.category} in {params.city}: "
            f"preferred {params.start_date} to {params.end_date}, "
            f"window {params.date_range_start} to {params.date_range_end}"
        )

        events, source_results, warnings = self._collect(params)
        return self._analyze(params, events, source_results, warnings)

    def fetch_events(self, params: AnalysisParams) -> List[Event]:
        """Filtered, deduplicated events for the params' city and window."""
        params.validate()
        events, _, _ = self._collect(params)
        return events

    def analyze_events(self, params: AnalysisParams, events: List[Event]) -> AnalysisResult:
        """Run the pipeline over events that were already fetched."""
        params.validate()
        filtered = self.location_normalizer.filter_events(events, params.city)
        unique, _ = dedup_report(filtered)
        return self._analyze(params, unique, [], [])

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _collect(self, params: AnalysisParams) -> Tuple[List[Event], List[SourceResult], List[str]]:
        source_results = self.fetch_all(params)

        raw_events: List[Event] = []
        warnings: List[str] = []
        for result in source_results:
            if result.success:
                raw_events.extend(result.events)
            else:
                warnings.append(result.status_line)

        logger.info(f"Raw events collected: {len(raw_events)}")
        filtered = self.location_normalizer.filter_events(raw_events, params.city)
        unique, _ = dedup_report(filtered)
        return unique, source_results, warnings

    def fetch_all(self, params: AnalysisParams) -> List[SourceResult]:
        """Query every provider concurrently; failed providers yield no events."""
        if not self.providers:
            logger.warning("No event providers configured")
            return []

        window_start, window_end = params.effective_window()
        workers = self.max_workers or len(self.providers)
        executor = ThreadPoolExecutor(max_workers=workers)
        deadline = time.monotonic() + self.provider_timeout
        try:
            futures = [
                (provider, executor.submit(
                    provider.fetch, params.city, window_start, window_end, params.category
                ))
                for provider in self.providers
            ]
            results = [
                self._source_result(provider, future, max(0.0, deadline - time.monotonic()))
                for provider, future in futures
            ]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for result in results:
            if result.success:
                logger.info(f"  {result.status_line}")
            else:
                logger.warning(f"  Degraded source {result.status_line}")
        return results

    def _source_result(self, provider, future, timeout: Optional[float] = None) -> SourceResult:
        name = _provider_name(provider)
        try:
            events = list(future.result(timeout=timeout))
        except FutureTimeoutError:
            future.cancel()
            return SourceResult(
                source_name=name,
                success=False,
                error_message=f"Timed out after {self.provider_timeout:g}s",
            )
        except ProviderError as e:
            return SourceResult(source_name=name, success=False, error_message=e.message)
        except Exception as e:
            return SourceResult(
                source_name=name,
                success=False,
                error_message=f"Unhandled exception: {str(e)[:100]}",
            )
        return SourceResult(source_name=name, events=events, events_found=len(events))

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _analyze(
        self,
        params: AnalysisParams,
        events: List[Event],
        source_results: List[SourceResult],
        warnings: List[str],
    ) -> AnalysisResult:
        candidates = generate_candidates(params)
        logger.info(f"Evaluating {len(candidates)} candidate date ranges against {len(events)} events")

        executor = None
        if params.enable_advanced_analysis:
            executor = ThreadPoolExecutor(max_workers=TOP_SIGNIFICANT_EVENTS)
        scorer = ConflictScorer(
            overlap_predictor=self.overlap_predictor,
            fallback_estimator=self.fallback_estimator,
            overlap_timeout=self.overlap_timeout,
            executor=executor,
        )

        try:
            recommendations = [
                self.evaluate_candidate(candidate, events, params, scorer)
                for candidate in candidates
            ]
        finally:
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)

        recommended, high_risk = rank_recommendations(recommendations)
        logger.info(
            f"Analysis complete: {len(recommended)} recommended, "
            f"{len(high_risk)} high-risk of {len(recommendations)} candidates"
        )

        return AnalysisResult(
            recommended_dates=recommended,
            high_risk_dates=high_risk,
            all_events=events,
            analyzed_at=datetime.now(),
            source_results=source_results,
            warnings=warnings,
        )

    def evaluate_candidate(
        self,
        candidate: DateCandidate,
        events: List[Event],
        params: AnalysisParams,
        scorer: ConflictScorer,
    ) -> DateRecommendation:
        competing = match_competing_events(candidate, events, params)
        result = scorer.evaluate(
            competing, params.expected_attendees, params.category, params, candidate
        )

        venue_summary = None
        if params.venue and params.enable_advanced_analysis:
            extra = {"competing": competing} if self._venue_takes_competing else {}
            try:
                venue_summary = self.venue_intelligence.analyze(
                    params.venue, candidate.start_date, params.expected_attendees, **extra
                )
            except Exception as e:
                logger.warning(f"Venue intelligence failed for {params.venue!r}: {e}")

        return DateRecommendation(
            start_date=candidate.start_date,
            end_date=candidate.end_date,
            conflict_score=result.score,
            risk_level=classify_risk(result.score),
            competing_events=competing,
            reasons=build_reasons(competing, result.score),
            audience_overlap=result.audience_overlap,
            venue_intelligence=venue_summary,
        )


def _provider_name(provider) -> str:
    return getattr(provider, "name", None) or type(provider).__name__


def _accepts_keyword(func, name: str) -> bool:
    try:
        parameters = inspect.signature(func).parameters
    except (TypeError, ValueError):
        return False
    return name in parameters
