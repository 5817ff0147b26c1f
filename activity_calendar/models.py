"""Value objects passed between the fetch, mapping and assembly steps."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

import pytz

from .errors import MalformedUpstreamRecord

STRAVA_ACTIVITY_URL = 'https://www.strava.com/activities/{activity_id}'


@dataclass(frozen=True)
class Credentials:
    """Strava API application credentials plus the athlete's refresh token."""
    client_id: str = field(repr=False)
    client_secret: str = field(repr=False)
    refresh_token: str = field(repr=False)

    def missing_fields(self):
        return [name for name in ('client_id', 'client_secret', 'refresh_token')
                if not getattr(self, name)]


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer token, valid for one feed request only."""
    token: str = field(repr=False)


@dataclass(frozen=True)
class FetchConfig:
    """What to pull from Strava for one feed request."""
    cutoff_epoch_seconds: int
    max_results: int = 300
    type_allow_list: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class CalendarMetadata:
    """Envelope fields of the generated calendar."""
    name: str = 'Strava'
    prod_id: str = '-//Strava ICS//Activity Feed//EN'


def parse_start_date(value):
    """Parse a Strava ISO-8601 UTC timestamp like '2024-01-01T08:00:00Z'."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        return pytz.utc.localize(parsed)
    return parsed.astimezone(pytz.utc)


@dataclass(frozen=True)
class Activity:
    """The subset of a Strava SummaryActivity needed to render an event."""
    id: int
    name: str
    sport_type: str
    start_date: datetime
    elapsed_time: int = 0
    moving_time: int = 0
    distance: float = 0.0
    total_elevation_gain: Optional[float] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    location_country: Optional[str] = None

    @property
    def url(self):
        return STRAVA_ACTIVITY_URL.format(activity_id=self.id)

    @classmethod
    def from_strava(cls, record):
        """
        Build an Activity from one JSON record of /athlete/activities.

        Raises MalformedUpstreamRecord when the record is not an object, has
        no id, has no parseable start_date or has non-numeric times or
        distances.
        """
        if not isinstance(record, dict):
            raise MalformedUpstreamRecord(None, f'not an activity object: {record!r}')

        activity_id = record.get('id')
        if activity_id is None:
            raise MalformedUpstreamRecord(None, 'missing id')

        start_date = record.get('start_date')
        if not start_date:
            raise MalformedUpstreamRecord(activity_id, 'missing start_date')
        try:
            start = parse_start_date(start_date)
        except (TypeError, ValueError) as e:
            raise MalformedUpstreamRecord(activity_id, f'bad start_date {start_date!r}') from e

        try:
            elapsed_time = int(record.get('elapsed_time') or 0)
            moving_time = int(record.get('moving_time') or 0)
            distance = float(record.get('distance') or 0)
            elevation = record.get('total_elevation_gain')
            elevation = float(elevation) if elevation is not None else None
        except (TypeError, ValueError) as e:
            raise MalformedUpstreamRecord(activity_id, f'non-numeric field: {e}') from e

        return cls(
            id=activity_id,
            name=str(record.get('name') or ''),
            # sport_type supersedes the deprecated type field
            sport_type=str(record.get('sport_type') or record.get('type') or ''),
            start_date=start,
            elapsed_time=elapsed_time,
            moving_time=moving_time,
            distance=distance,
            total_elevation_gain=elevation,
            location_city=record.get('location_city'),
            location_state=record.get('location_state'),
            location_country=record.get('location_country'),
        )


@dataclass(frozen=True)
class CalendarEvent:
    """One VEVENT, with free-text fields still unescaped."""
    uid: str
    stamp: datetime
    start: datetime
    end: datetime
    summary: str
    description: str
    location: Optional[str] = None
    url: Optional[str] = None
