import logging

from flask import Flask, request, jsonify, make_response
from markupsafe import escape

from activity_calendar.activity_sync import sync_from_strava
from activity_calendar.config import fetch_config_from_query, load_credentials, load_settings
from activity_calendar.errors import FeedError
from activity_calendar.generator import CalendarGenerator

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Read once at startup; request handlers only ever see these values.
app.config['STRAVA_CREDENTIALS'] = load_credentials()
app.config['FEED_SETTINGS'] = load_settings()

CALENDAR_CONTENT_TYPE = 'text/calendar; charset=utf-8'
FEED_CACHE_CONTROL = 'public, max-age=300, s-maxage=300, stale-while-revalidate=60'


def calendar_response(body, status=200, cache_control=FEED_CACHE_CONTROL):
    resp = make_response(body, status)
    resp.headers['Content-Type'] = CALENDAR_CONTENT_TYPE
    resp.headers['Content-Disposition'] = 'inline; filename="strava.ics"'
    resp.headers['Access-Control-Allow-Origin'] = '*'
    resp.headers['Cache-Control'] = cache_control
    return resp


# --- Calendar feed ---
@app.route('/strava.ics')
@app.route('/api/strava-ics')
def strava_feed():
    settings = app.config['FEED_SETTINGS']
    try:
        config = fetch_config_from_query(request.args)
        ics = sync_from_strava(app.config['STRAVA_CREDENTIALS'], config, settings)
    except FeedError as e:
        logger.error("Calendar feed failed: %s", e)
        return error_response(e, settings)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("Unexpected error building calendar feed")
        return error_response(e, settings)
    return calendar_response(ics)


def error_response(error, settings):
    ics = CalendarGenerator(settings.metadata).build_error_calendar(error)
    return calendar_response(ics, status=500, cache_control='no-store')


# --- OAuth code capture ---
@app.route('/oauth-catch')
def oauth_catch():
    """Show the authorization code so it can be exchanged by hand for a refresh token."""
    error = request.args.get('error')
    if error:
        html = f"<h2>OAuth Error</h2><pre>{escape(error)}</pre>"
        return html, 400, {'Content-Type': 'text/html; charset=utf-8'}

    fields = '\n'.join(
        f"{name}={escape(request.args.get(name) or '(none)')}"
        for name in ('code', 'scope', 'state')
    )
    html = (
        "<h2>Strava OAuth – Code Received</h2>\n"
        "<p>Copy this code and use it in the token exchange step:</p>\n"
        '<pre style="padding:12px;border:1px solid #ccc;border-radius:8px;display:inline-block;">\n'
        f"{fields}\n"
        "</pre>\n"
    )
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


@app.route('/health')
def health():
    return jsonify({"status": "ok"})
