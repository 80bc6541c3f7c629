"""Domain exceptions raised by services and translated to HTTP errors by routers."""


class UpstreamError(Exception):
    """A provider call failed or returned a payload we cannot decode."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"{source}: {message}")


class ContentGenerationError(Exception):
    """The LLM produced nothing usable for a debate."""


class LineupUnavailableError(Exception):
    """Lineup exists upstream but could not be assembled (e.g. squad fetch failed)."""


class ConflictError(Exception):
    """A write collided with a uniqueness rule (duplicate vote, concurrent debate insert)."""


class NotFoundError(LookupError):
    """The requested match or record does not exist."""
