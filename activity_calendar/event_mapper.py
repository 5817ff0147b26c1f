"""
Turn a Strava activity into a VEVENT.

Property order is fixed and lines are never folded at 75 octets, so the
block is written directly instead of through icalendar.Event.
"""

import math
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

import pytz
from icalendar import vDatetime

from .models import CalendarEvent

SUMMARY_PREFIX = 'Strava'
UID_DOMAIN = 'strava-ics'
CRLF = '\r\n'


def escape_text(text):
    """Escape a TEXT value (RFC 5545 3.3.11). Backslashes go first.

    CRLF and lone CR count as newlines; a content line never carries a raw CR.
    """
    text = text.replace(CRLF, '\n').replace('\r', '\n')
    return (text
            .replace('\\', '\\\\')
            .replace('\n', '\\n')
            .replace(',', '\\,')
            .replace(';', '\\;'))


def format_utc(dt):
    """Render an aware datetime as 20240101T080000Z."""
    return vDatetime(dt.astimezone(pytz.utc)).to_ical().decode('ascii')


def seconds_to_hms(seconds):
    """Zero-padded H:M:S; hours keep counting past 24."""
    seconds = int(seconds or 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def meters_to_km(meters):
    """Kilometers to two places, halves rounded up (0.125 -> 0.13)."""
    km = Decimal((meters or 0) / 1000)
    return str(km.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def round_half_up(value):
    return int(math.floor(value + 0.5))


def format_location(activity):
    parts = [p for p in (activity.location_city, activity.location_state,
                         activity.location_country) if p]
    return ', '.join(parts) or None


def build_description(activity):
    desc_parts = [
        f"Sport: {activity.sport_type}",
        f"Distance: {meters_to_km(activity.distance)} km",
        f"Moving: {seconds_to_hms(activity.moving_time)}",
        f"Elapsed: {seconds_to_hms(activity.elapsed_time)}",
    ]
    if activity.total_elevation_gain:
        desc_parts.append(f"Elevation: {round_half_up(activity.total_elevation_gain)} m")
    desc_parts.append(activity.url)
    return '\n'.join(desc_parts)


def to_event(activity, now=None):
    """Map one Activity to a CalendarEvent. `now` becomes DTSTAMP."""
    stamp = now or datetime.now(pytz.utc)
    start = activity.start_date
    return CalendarEvent(
        uid=f"{activity.id}@{UID_DOMAIN}",
        stamp=stamp,
        start=start,
        # elapsed, not moving time: the event spans the whole outing
        end=start + timedelta(seconds=activity.elapsed_time),
        summary=f"{SUMMARY_PREFIX}: {activity.name or activity.sport_type}",
        description=build_description(activity),
        location=format_location(activity),
        url=activity.url,
    )


def event_lines(event):
    lines = [
        'BEGIN:VEVENT',
        f"UID:{event.uid}",
        f"DTSTAMP:{format_utc(event.stamp)}",
        f"DTSTART:{format_utc(event.start)}",
        f"DTEND:{format_utc(event.end)}",
        f"SUMMARY:{escape_text(event.summary)}",
    ]
    if event.location:
        lines.append(f"LOCATION:{escape_text(event.location)}")
    lines.append(f"DESCRIPTION:{escape_text(event.description)}")
    if event.url:
        lines.append(f"URL:{event.url}")
    lines.append('END:VEVENT')
    return lines


def serialize_event(event):
    """One VEVENT block, CRLF-separated, without a trailing line break."""
    return CRLF.join(event_lines(event))
