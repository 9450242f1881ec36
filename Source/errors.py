"""
Error types for Tabshare

Structural problems with a model response stop the split pipeline and are
raised. Arithmetic corner cases (zero subtotal, nobody to split between) are
never raised, and a total mismatch is reported as data by the validator.
"""

from typing import Optional


class TabshareError(Exception):
    """Base class for all Tabshare errors"""


class ConfigurationError(TabshareError):
    """A required setting (such as the API key) is missing"""


class SplitResponseError(TabshareError, ValueError):
    """The split service returned something that is not a usable allocation"""

    kind = "SplitResponse"

    def __init__(self, detail: str, field: Optional[str] = None, excerpt: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field
        self.excerpt = excerpt

    def __str__(self) -> str:
        if self.field:
            return f"{self.detail} (at {self.field})"
        return self.detail

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'detail': self.detail,
            'field': self.field,
            'excerpt': self.excerpt,
        }


class MalformedResponseError(SplitResponseError):
    """Payload could not be read as a bill split"""

    kind = "MalformedResponse"


class EmptyAllocationError(SplitResponseError):
    """Payload parsed but assigned the bill to nobody"""

    kind = "EmptyAllocation"


class ExtractionServiceError(TabshareError):
    """The vision service could not be reached or answered with an error"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ExtractionServiceError):
    """The vision service rejected the request with HTTP 429"""


class InvalidImageError(TabshareError, ValueError):
    """The receipt image is missing, too large or not a readable image"""
