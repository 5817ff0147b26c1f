"""
Strava activity calendar feed.

This package provides:
- Refresh-token exchange against the Strava OAuth endpoint
- Paginated, filtered and capped retrieval of recent activities
- Activity -> VEVENT mapping and VCALENDAR assembly
- HTTP server for calendar subscription

Usage:
    # Start calendar server
    python3 -m activity_calendar.server

    # Write the feed to a file
    python3 export_calendar.py --sport run,ride -o strava.ics

    # Build a feed in code
    from activity_calendar import sync_from_strava
    ics = sync_from_strava(credentials, config)
"""

from .activity_sync import fetch_activities, sync_from_strava
from .auth import obtain_access_token
from .errors import (
    ConfigurationError,
    FeedError,
    MalformedUpstreamRecord,
    UpstreamAuthError,
    UpstreamFetchError,
)
from .event_mapper import to_event
from .generator import CalendarGenerator

__all__ = [
    'CalendarGenerator',
    'ConfigurationError',
    'FeedError',
    'MalformedUpstreamRecord',
    'UpstreamAuthError',
    'UpstreamFetchError',
    'fetch_activities',
    'obtain_access_token',
    'sync_from_strava',
    'to_event',
]
__version__ = '1.0.0'
