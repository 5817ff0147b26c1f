#!/usr/bin/env python3
"""
Run the Strava calendar feed for subscription.

Usage:
    python3 -m activity_calendar.server [PORT] [--host HOST]

Default port: 8080
"""

import argparse
import errno
import logging
import socket
import sys

DEFAULT_PORT = 8080
FEED_PATH = '/strava.ics'


def subscription_host(probe_address=('192.0.2.1', 9)):
    """
    LAN address other devices can reach the feed on.

    Connecting a UDP socket sends nothing; it only makes the OS choose the
    outbound interface, whose address is then read back.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(probe_address)
            return sock.getsockname()[0]
    except OSError:
        return socket.gethostname() or 'localhost'


def feed_urls(host, port):
    base = f"http://{host}:{port}{FEED_PATH}"
    return {
        'all activities': base,
        'runs and rides only': f"{base}?sport=run,ride",
        'last 30 days': f"{base}?sinceDays=30",
    }


def run_server(host='0.0.0.0', port=DEFAULT_PORT):
    """Run the calendar HTTP server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    from strava_ics import app

    missing = app.config['STRAVA_CREDENTIALS'].missing_fields()
    if missing:
        print(f"⚠️  Warning: Strava credentials not set: {', '.join(missing)}")
        print("   The feed will serve an error calendar until they are.")
        print()

    print("✓ Strava Calendar Server")
    print(f"  Listening on {host}:{port}")
    print()
    print("📱 Subscribe in your calendar app:")
    for label, url in feed_urls(subscription_host(), port).items():
        print(f"   {label}: {url}")
    print()
    print(f"🔗 Test in browser: http://localhost:{port}{FEED_PATH}")
    print("-" * 60)

    try:
        app.run(host=host, port=port)
    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            print(f"✗ Port {port} is already in use.")
            sys.exit(1)
        raise


def main(argv=None):
    parser = argparse.ArgumentParser(description='Serve Strava activities as a calendar feed')
    parser.add_argument('port', type=int, nargs='?', default=DEFAULT_PORT,
                        help=f'Port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Interface to bind (default: all)')
    args = parser.parse_args(argv)
    run_server(host=args.host, port=args.port)


if __name__ == '__main__':
    main()
