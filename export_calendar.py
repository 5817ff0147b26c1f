#!/usr/bin/env python3
"""
Command-line tool to write recent Strava activities to an .ics file.

Usage:
    python export_calendar.py                      # last 90 days to stdout
    python export_calendar.py --days 30 -o strava.ics
    python export_calendar.py --sport run,ride --max 50
"""

import argparse
import logging
import sys

from activity_calendar.activity_sync import sync_from_strava
from activity_calendar.config import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_SINCE_DAYS,
    fetch_config_from_query,
    load_credentials,
    load_settings,
)
from activity_calendar.errors import FeedError


def debug_environment(credentials):
    """Print which credentials are present, never their values."""
    print("\n==== Environment Debug ====", file=sys.stderr)
    print("STRAVA_CLIENT_ID present:", bool(credentials.client_id), file=sys.stderr)
    print("STRAVA_CLIENT_SECRET present:", bool(credentials.client_secret), file=sys.stderr)
    print("STRAVA_REFRESH_TOKEN present:", bool(credentials.refresh_token), file=sys.stderr)


def export_calendar(output=None, sport=None, days=DEFAULT_SINCE_DAYS, count=DEFAULT_MAX_RESULTS):
    """Build the feed and write it to `output` (stdout when None).

    Returns:
        int: process exit code
    """
    credentials = load_credentials()
    config = fetch_config_from_query({'sport': sport, 'sinceDays': days, 'max': count})

    try:
        ics = sync_from_strava(credentials, config, load_settings())
    except FeedError as e:
        print(f"✗ {e}", file=sys.stderr)
        debug_environment(credentials)
        return 1

    if output:
        # newline='' keeps the CRLF line endings intact
        with open(output, 'w', encoding='utf-8', newline='') as f:
            f.write(ics)
        print(f"✓ Calendar written: {output}", file=sys.stderr)
    else:
        sys.stdout.write(ics)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description='Export Strava activities as an iCalendar file')
    parser.add_argument('-o', '--output',
                        help='File to write (default: stdout)')
    parser.add_argument('--sport',
                        help='Comma-separated sport types to include, e.g. run,ride')
    parser.add_argument('--days', type=int, default=DEFAULT_SINCE_DAYS,
                        help=f'Number of days to look back (default: {DEFAULT_SINCE_DAYS})')
    parser.add_argument('--max', type=int, default=DEFAULT_MAX_RESULTS, dest='count',
                        help=f'Maximum number of activities (default: {DEFAULT_MAX_RESULTS})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log Strava requests')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    return export_calendar(output=args.output, sport=args.sport, days=args.days, count=args.count)


if __name__ == "__main__":
    sys.exit(main())
