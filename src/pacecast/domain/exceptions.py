"""Error taxonomy shared by every layer."""


class PacecastError(Exception):
    """Base class for all pacecast errors."""


class SourceUnavailableError(PacecastError):
    """The progress data source could not be reached or returned an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(PacecastError):
    """The data source rejected the supplied API token."""


class MalformedRecordError(PacecastError):
    """A record is missing a field the forecast cannot do without."""
