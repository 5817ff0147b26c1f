"""
Startup configuration and per-request query parsing.

Environment variables (a .env file is loaded if present):
    STRAVA_CLIENT_ID, STRAVA_CLIENT_SECRET, STRAVA_REFRESH_TOKEN
    CALENDAR_NAME           calendar display name (default: Strava)
    STRAVA_TIMEOUT_SECONDS  per-request timeout for Strava calls (default: 15)
"""

import os
import time
from dataclasses import dataclass

from dotenv import load_dotenv

from .auth import DEFAULT_TIMEOUT
from .models import CalendarMetadata, Credentials, FetchConfig

DEFAULT_SINCE_DAYS = 90
MIN_SINCE_DAYS, MAX_SINCE_DAYS = 1, 365
DEFAULT_MAX_RESULTS = 300
MIN_MAX_RESULTS, MAX_MAX_RESULTS = 1, 600
SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class Settings:
    metadata: CalendarMetadata
    timeout: float = DEFAULT_TIMEOUT


def load_credentials(environ=None):
    """Read the Strava credentials once. Missing values stay empty strings."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    return Credentials(
        client_id=environ.get('STRAVA_CLIENT_ID', '').strip(),
        client_secret=environ.get('STRAVA_CLIENT_SECRET', '').strip(),
        refresh_token=environ.get('STRAVA_REFRESH_TOKEN', '').strip(),
    )


def load_settings(environ=None):
    if environ is None:
        load_dotenv()
        environ = os.environ
    try:
        timeout = float(environ.get('STRAVA_TIMEOUT_SECONDS', DEFAULT_TIMEOUT))
    except ValueError:
        timeout = DEFAULT_TIMEOUT
    return Settings(
        metadata=CalendarMetadata(name=environ.get('CALENDAR_NAME') or 'Strava'),
        timeout=timeout,
    )


def clamp_int(value, default, low, high):
    """Parse value as int and clamp to [low, high]; unparseable -> default."""
    if value is None or str(value).strip() == '':
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(low, min(high, number))


def parse_sport_filter(value):
    """'Run, ride' -> frozenset({'run', 'ride'}); empty or missing -> None."""
    if not value:
        return None
    sports = frozenset(s.strip().lower() for s in value.split(',') if s.strip())
    return sports or None


def fetch_config_from_query(args, now=None):
    """Build a FetchConfig from the `sport`, `sinceDays` and `max` query params."""
    now = time.time() if now is None else now
    since_days = clamp_int(args.get('sinceDays'), DEFAULT_SINCE_DAYS,
                           MIN_SINCE_DAYS, MAX_SINCE_DAYS)
    return FetchConfig(
        cutoff_epoch_seconds=int(now - since_days * SECONDS_PER_DAY),
        max_results=clamp_int(args.get('max'), DEFAULT_MAX_RESULTS,
                              MIN_MAX_RESULTS, MAX_MAX_RESULTS),
        type_allow_list=parse_sport_filter(args.get('sport')),
    )
