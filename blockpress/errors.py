"""
Error taxonomy for the content pipeline.

Controllers translate these into HTTP responses; MalformedDataError is
always recovered where it is raised and never reaches a client.
"""

from typing import Iterable, List, Optional


class ContentError(Exception):
    """Base class for expected, client-explainable failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ContentError):
    """User input is missing or invalid. Carries every violated rule."""

    def __init__(self, errors: Iterable[str], message: str = "Validation failed"):
        self.errors: List[str] = list(errors)
        super().__init__(message)


class NotFoundError(ContentError):
    pass


class ConflictError(ContentError):
    pass


class UpstreamError(ContentError):
    """Image provider failure or malformed provider response."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class MalformedDataError(ContentError):
    pass
