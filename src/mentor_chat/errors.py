"""Exception hierarchy for the mentor chat pipeline."""


class MentorError(Exception):
    """Base class for errors the pipeline knows how to report."""


class ConfigurationError(MentorError):
    """A required setting (usually a service credential) is missing."""


class EmbeddingUnavailable(MentorError):
    """The embedding service could not produce a vector for this request."""


class CompletionError(MentorError):
    """The text-generation service failed or returned an unusable body."""


class UpstreamStatusError(CompletionError):
    """The text-generation service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        """Keep the upstream status and a short body excerpt for diagnostics."""
        self.status_code = status_code
        self.body = body[:500]
        super().__init__(f"Text generation service error: HTTP {status_code}")
