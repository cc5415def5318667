# ABOUTME: Exception hierarchy for the enrichment pipeline.
# ABOUTME: Only configuration and upstream failures ever reach the caller.


class EnrichmentError(Exception):
    """Base class for failures surfaced by enrich()."""


class ConfigurationError(EnrichmentError):
    """Required configuration (e.g. the Gemini API key) is missing."""


class UpstreamError(EnrichmentError):
    """The generation backend failed with a non-retryable error."""


class UpstreamQuotaError(UpstreamError):
    """The backend kept returning quota/rate-limit errors until retries ran out."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts
