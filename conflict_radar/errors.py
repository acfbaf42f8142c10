"""Exceptions raised by the conflict analysis engine and its collaborators."""


class ConflictRadarError(Exception):
    """Base class for all conflict-radar errors."""


class ValidationError(ConflictRadarError):
    """Analysis parameters are missing or inconsistent. Fatal to the call."""


class ProviderError(ConflictRadarError):
    """A single event data source failed or timed out."""

    def __init__(self, source_name: str, message: str):
        super().__init__(f"{source_name}: {message}")
        self.source_name = source_name
        self.message = message


class OverlapTimeoutError(ConflictRadarError):
    """The audience-overlap predictor did not answer before its deadline."""

    def __init__(self, timeout: float):
        super().__init__(f"Audience overlap prediction exceeded {timeout:g}s")
        self.timeout = timeout


class ComputationError(ConflictRadarError):
    """Scoring a single competing event failed unexpectedly."""
