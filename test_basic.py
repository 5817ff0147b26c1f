# test_basic.py
# Check that the Flask app loads and the calendar endpoints respond.

import pytest
from icalendar import Calendar

from activity_calendar.models import Credentials
from conftest import FakeResponse, make_record
from strava_ics import app


@pytest.fixture
def client(monkeypatch, credentials):
    monkeypatch.setitem(app.config, 'STRAVA_CREDENTIALS', credentials)
    return app.test_client()


def test_feed(client, strava):
    strava.pages = [[make_record(1, 'Run'), make_record(2, 'Ride'), make_record(3, 'Run')]]

    resp = client.get('/strava.ics?sport=run&sinceDays=30&max=10')

    assert resp.status_code == 200
    assert resp.headers['Content-Type'] == 'text/calendar; charset=utf-8'
    assert 'stale-while-revalidate' in resp.headers['Cache-Control']
    assert 'max-age=300' in resp.headers['Cache-Control']

    cal = Calendar.from_ical(resp.get_data(as_text=True))
    assert [str(e['UID']) for e in cal.walk('VEVENT')] == ['1@strava-ics', '3@strava-ics']
    assert strava.gets[0]['params']['per_page'] == 200


def test_feed_alias_route(client, strava):
    resp = client.get('/api/strava-ics')
    assert resp.status_code == 200
    assert resp.get_data(as_text=True).startswith('BEGIN:VCALENDAR\r\n')


def test_feed_missing_credentials_returns_error_calendar(monkeypatch, strava):
    monkeypatch.setitem(app.config, 'STRAVA_CREDENTIALS', Credentials('id', 'secret', ''))

    resp = app.test_client().get('/strava.ics')

    assert resp.status_code == 500
    assert resp.headers['Content-Type'] == 'text/calendar; charset=utf-8'
    assert resp.headers['Cache-Control'] == 'no-store'
    events = list(Calendar.from_ical(resp.get_data(as_text=True)).walk('VEVENT'))
    assert len(events) == 1
    assert str(events[0]['SUMMARY']) == 'Strava ICS Error'
    assert 'refresh_token' in str(events[0]['DESCRIPTION'])
    assert strava.posts == []
    assert strava.gets == []


def test_feed_upstream_failure_returns_error_calendar(client, strava):
    strava.page_errors[1] = FakeResponse(401, text='Authorization Error')

    resp = client.get('/strava.ics')

    assert resp.status_code == 500
    body = resp.get_data(as_text=True)
    assert body.count('BEGIN:VEVENT') == 1
    assert 'Authorization Error' in body


def test_feed_unexpected_error_returns_error_calendar(client, monkeypatch):
    import strava_ics

    def broken(*args, **kwargs):
        raise KeyError('boom')

    monkeypatch.setattr(strava_ics, 'sync_from_strava', broken)

    resp = client.get('/strava.ics')
    assert resp.status_code == 500
    assert 'BEGIN:VEVENT' in resp.get_data(as_text=True)


def test_oauth_catch_echoes_code():
    resp = app.test_client().get('/oauth-catch?code=abc123&scope=read,activity:read_all')
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert 'code=abc123' in body
    assert 'scope=read,activity:read_all' in body
    assert 'state=(none)' in body


def test_oauth_catch_escapes_html():
    resp = app.test_client().get('/oauth-catch?code=<script>')
    assert '<script>' not in resp.get_data(as_text=True)


def test_oauth_catch_error():
    resp = app.test_client().get('/oauth-catch?error=access_denied')
    assert resp.status_code == 400
    assert 'access_denied' in resp.get_data(as_text=True)


def test_health():
    resp = app.test_client().get('/health')
    assert resp.status_code == 200
    assert resp.json == {'status': 'ok'}
