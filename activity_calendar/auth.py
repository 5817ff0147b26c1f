"""Exchange the long-lived Strava refresh token for a short-lived access token."""
import logging

import requests

from .errors import ConfigurationError, UpstreamAuthError
from .models import AccessToken

logger = logging.getLogger(__name__)

STRAVA_TOKEN_URL = 'https://www.strava.com/oauth/token'
DEFAULT_TIMEOUT = 15


def obtain_access_token(credentials, timeout=DEFAULT_TIMEOUT):
    """
    Request a fresh access token with the refresh_token grant.

    A new token is requested on every call; nothing is cached or written
    back. Strava may rotate the refresh token in the response, but the old
    one stays valid, so the rotated value is ignored.
    """
    missing = credentials.missing_fields()
    if missing:
        raise ConfigurationError(f"Missing Strava credentials: {', '.join(missing)}")

    logger.debug("Refreshing Strava access token")
    try:
        resp = requests.post(
            STRAVA_TOKEN_URL,
            data={
                'client_id': credentials.client_id,
                'client_secret': credentials.client_secret,
                'grant_type': 'refresh_token',
                'refresh_token': credentials.refresh_token,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise UpstreamAuthError(None, str(e)) from e

    if not resp.ok:
        raise UpstreamAuthError(resp.status_code, resp.text)

    try:
        access_token = resp.json().get('access_token')
    except (ValueError, AttributeError):
        access_token = None
    if not access_token:
        raise UpstreamAuthError(resp.status_code, 'response has no access_token')

    return AccessToken(access_token)
