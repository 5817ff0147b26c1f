"""
Errors raised while building the activity calendar feed.

Every failure the feed can hit is a FeedError, so the HTTP layer can turn
any of them into the one-event error calendar.
"""

BODY_SNIPPET_LENGTH = 500


def _snippet(body):
    if not body:
        return ''
    body = str(body).strip()
    if len(body) > BODY_SNIPPET_LENGTH:
        return body[:BODY_SNIPPET_LENGTH] + '...'
    return body


class FeedError(Exception):
    """Base class for all calendar feed failures."""


class ConfigurationError(FeedError):
    """Missing or invalid Strava credentials. Raised before any network call."""


class UpstreamError(FeedError):
    """Strava answered with something other than what we asked for."""

    action = 'request'

    def __init__(self, status=None, body=''):
        self.status = status
        self.body = _snippet(body)
        super().__init__(self._message())

    def _message(self):
        status = self.status if self.status is not None else 'no response'
        message = f"Strava {self.action} failed ({status})"
        if self.body:
            message += f": {self.body}"
        return message


class UpstreamAuthError(UpstreamError):
    """The refresh-token exchange was rejected."""

    action = 'token exchange'


class UpstreamFetchError(UpstreamError):
    """An activity page request was rejected."""

    action = 'activity fetch'

    def __init__(self, status=None, body='', page=None):
        self.page = page
        super().__init__(status, body)

    def _message(self):
        message = super()._message()
        if self.page is not None:
            message += f" [page {self.page}]"
        return message


class MalformedUpstreamRecord(FeedError):
    """A single activity record is missing fields needed for the calendar."""

    def __init__(self, record_id, reason):
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"Activity {record_id}: {reason}")
