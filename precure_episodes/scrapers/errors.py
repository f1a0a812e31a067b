"""Exception types for episode page scraping.

Every failure that is local to one page derives from ScrapeError. The
aggregation loop turns these into failed PageResults and moves on; anything
else propagates.
"""

from typing import Optional


class ScrapeError(Exception):
    """Base class for per-page scraping failures."""

    def __init__(self, message: str, url: str = ""):
        self.message = message
        self.url = url
        super().__init__(message)


class PageFetchError(ScrapeError):
    """The page could not be fetched (network error or non-success status)."""

    def __init__(self, url: str, cause: Optional[BaseException] = None, status: Optional[int] = None):
        self.cause = cause
        self.status = status
        if status is not None:
            message = f"Failed to fetch {url}: {status}"
        else:
            message = f"Failed to fetch {url}: {cause}"
        super().__init__(message, url)


class StructureNotFoundError(ScrapeError):
    """An expected HTML element is absent from the page."""

    def __init__(self, selector: str, url: str = ""):
        self.selector = selector
        super().__init__(f"Element '{selector}' not found.", url)


class FieldMissingError(ScrapeError):
    """A required field could not be extracted."""

    def __init__(self, field: str, url: str = "", message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Field '{field}' not found.", url)


class LabelNotFoundError(FieldMissingError):
    """A staff credit label is absent from the caption markup."""

    def __init__(self, label: str, url: str = ""):
        self.label = label
        super().__init__(label, url, message=f"Text '{label}' not found.")
