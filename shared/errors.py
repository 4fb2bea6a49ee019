"""Error hierarchy raised by the upstream clients and the aggregation services."""


class TrinityError(Exception):
    """Base class for every error raised by the backend services."""


class ConfigurationError(TrinityError):
    """Required configuration (such as the API token) is missing."""


class SourceUnavailable(TrinityError):
    """An upstream source (roster sheet or game API) is unreachable or malformed."""


class UpstreamError(SourceUnavailable):
    """The game API answered with a non-200 status or could not be reached."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ClanFetchError(UpstreamError):
    """One clan's live data could not be fetched."""

    def __init__(self, tag: str, status: int | None = None, message: str | None = None):
        if message is None:
            message = f"Failed to fetch clan {tag}"
            if status is not None:
                message += f" (HTTP {status})"
        super().__init__(message, status=status)
        self.tag = tag


class EmptyResult(TrinityError):
    """A source returned no usable rows, as opposed to failing outright."""
