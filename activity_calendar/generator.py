#!/usr/bin/env python3
"""
Assemble the subscription calendar from activity events.
"""

import logging
from datetime import datetime, timedelta

import pytz

from .event_mapper import CRLF, serialize_event, to_event
from .models import CalendarEvent, CalendarMetadata

logger = logging.getLogger(__name__)

ERROR_SUMMARY = 'Strava ICS Error'
ERROR_EVENT_MINUTES = 10


class CalendarGenerator:
    def __init__(self, metadata=None):
        self.metadata = metadata or CalendarMetadata()

    def header_lines(self):
        return [
            'BEGIN:VCALENDAR',
            'VERSION:2.0',
            f"PRODID:{self.metadata.prod_id}",
            f"NAME:{self.metadata.name}",
            f"X-WR-CALNAME:{self.metadata.name}",
            'CALSCALE:GREGORIAN',
            'METHOD:PUBLISH',
            'X-WR-TIMEZONE:UTC',
        ]

    def assemble(self, events):
        """
        Wrap events, in the order given, in a VCALENDAR.

        Every line, including the last, ends with CRLF. With no events the
        document is just the envelope.
        """
        blocks = self.header_lines()
        blocks.extend(serialize_event(event) for event in events)
        blocks.append('END:VCALENDAR')
        return CRLF.join(blocks) + CRLF

    def generate_calendar(self, activities, now=None):
        """Map activities to events and assemble the feed."""
        now = now or datetime.now(pytz.utc)
        events = [to_event(activity, now=now) for activity in activities]
        logger.info("Calendar generated with %s events", len(events))
        return self.assemble(events)

    def build_error_calendar(self, error, now=None):
        """
        A calendar with a single event describing `error`.

        Calendar clients tend to drop a subscription that returns garbage,
        so failures still produce a document they can parse.
        """
        now = now or datetime.now(pytz.utc)
        event = CalendarEvent(
            uid=f"error-{now.strftime('%Y%m%dT%H%M%S')}@strava-ics",
            stamp=now,
            start=now,
            end=now + timedelta(minutes=ERROR_EVENT_MINUTES),
            summary=ERROR_SUMMARY,
            description=str(error) or error.__class__.__name__,
        )
        return self.assemble([event])
