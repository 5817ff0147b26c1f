#!/usr/bin/env python3
"""
Pull recent Strava activities for the calendar feed.

Pages are read lazily: iter_activities() only requests page n+1 once page n
has been consumed, so filter_by_sport() and take() applied on top of it
stop the network calls as soon as enough activities have been kept.
"""

import logging
from itertools import islice

import requests

from .auth import DEFAULT_TIMEOUT, obtain_access_token
from .config import Settings
from .errors import MalformedUpstreamRecord, UpstreamFetchError
from .generator import CalendarGenerator
from .models import Activity, CalendarMetadata

logger = logging.getLogger(__name__)

STRAVA_ACTIVITIES_URL = 'https://www.strava.com/api/v3/athlete/activities'
PAGE_SIZE = 200  # Strava max per page


def fetch_page(token, after, page, per_page=PAGE_SIZE, timeout=DEFAULT_TIMEOUT):
    """Fetch one page of /athlete/activities and return the raw JSON list."""
    try:
        resp = requests.get(
            STRAVA_ACTIVITIES_URL,
            headers={'Authorization': f'Bearer {token.token}'},
            params={'after': after, 'page': page, 'per_page': per_page},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise UpstreamFetchError(None, str(e), page=page) from e

    if not resp.ok:
        raise UpstreamFetchError(resp.status_code, resp.text, page=page)

    try:
        batch = resp.json()
    except ValueError:
        batch = None
    if not isinstance(batch, list):
        raise UpstreamFetchError(resp.status_code, 'expected a JSON array of activities', page=page)
    return batch


def iter_activities(token, after, per_page=PAGE_SIZE, timeout=DEFAULT_TIMEOUT):
    """
    Yield activities newest first, page by page, until Strava returns an
    empty page. Records that cannot be rendered are logged and skipped.
    """
    page = 1
    while True:
        batch = fetch_page(token, after, page, per_page=per_page, timeout=timeout)
        logger.debug("Page %s: %s activities", page, len(batch))
        if not batch:
            return
        for record in batch:
            try:
                yield Activity.from_strava(record)
            except MalformedUpstreamRecord as e:
                logger.warning("Skipping activity: %s", e)
        page += 1


def filter_by_sport(activities, allow_list=None):
    """Keep activities whose lowercased sport type is in allow_list (None keeps all)."""
    if not allow_list:
        return iter(activities)
    return (a for a in activities if a.sport_type.lower() in allow_list)


def take(activities, count):
    return islice(activities, count)


def fetch_activities(token, config, timeout=DEFAULT_TIMEOUT):
    """
    Return up to config.max_results activities after config.cutoff_epoch_seconds.

    The cutoff is enforced by Strava through the `after` parameter and is
    not re-checked here. Any failed page aborts the whole fetch.
    """
    activities = iter_activities(token, config.cutoff_epoch_seconds, timeout=timeout)
    selected = take(filter_by_sport(activities, config.type_allow_list), config.max_results)
    result = list(selected)
    logger.info("Fetched %s activities for calendar", len(result))
    return result


def sync_from_strava(credentials, config, settings=None, now=None):
    """
    Run the whole pipeline for one feed request and return the calendar text.

    Errors propagate unchanged; turning them into the error calendar is the
    caller's job.
    """
    settings = settings or Settings(metadata=CalendarMetadata())
    token = obtain_access_token(credentials, timeout=settings.timeout)
    activities = fetch_activities(token, config, timeout=settings.timeout)
    return CalendarGenerator(settings.metadata).generate_calendar(activities, now=now)
