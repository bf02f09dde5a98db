"""Exception types shared across the analytics and transcription layers"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for errors raised inside webinar_analytics"""


class Unauthenticated(AnalyticsError):
    """No authenticated principal was supplied"""

    status = 401
    message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class NotFoundOrUnauthorized(AnalyticsError):
    """Webinar does not exist or is owned by another presenter.

    Both cases are reported identically so callers cannot probe for the
    existence of webinars they do not own.
    """

    status = 404
    message = "Webinar not found or access denied"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class UpstreamFailure(AnalyticsError):
    """Storage or vendor call failed"""

    status = 500


class TranscriptionError(UpstreamFailure):
    """The transcription vendor rejected or failed a request"""
