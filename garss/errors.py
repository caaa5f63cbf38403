class GarssError(Exception):
    """Base class for every error raised by ga-rss."""


class ConfigurationError(GarssError):
    """The subscription list is malformed or missing required attributes."""


class FetchError(GarssError):
    """A channel could not be retrieved, even after the retry."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        super().__init__(f"{url}: {cause}")
        self.url = url
        self.cause = cause


class FeedFormatError(GarssError):
    """The payload is not a document of the attempted feed format."""


class OutputError(GarssError):
    """A digest file could not be written."""
