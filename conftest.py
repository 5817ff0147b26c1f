from datetime import datetime

import pytest
import pytz
import requests

from activity_calendar.models import Activity, Credentials

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=pytz.utc)

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code=200, payload=_NO_JSON, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeStrava:
    """Stands in for requests.post/requests.get against the Strava API."""

    def __init__(self, pages=None):
        self.pages = pages or []
        self.token_response = FakeResponse(200, {'access_token': 'access-123'})
        self.page_errors = {}
        self.posts = []
        self.gets = []

    def post(self, url, data=None, timeout=None, **kwargs):
        self.posts.append({'url': url, 'data': data, 'timeout': timeout})
        return self.token_response

    def get(self, url, headers=None, params=None, timeout=None, **kwargs):
        self.gets.append({'url': url, 'headers': headers, 'params': params})
        page = params['page']
        if page in self.page_errors:
            return self.page_errors[page]
        if page <= len(self.pages):
            return FakeResponse(200, self.pages[page - 1])
        return FakeResponse(200, [])

    @property
    def requested_pages(self):
        return [call['params']['page'] for call in self.gets]


def make_record(activity_id, sport_type='Run', **overrides):
    record = {
        'id': activity_id,
        'name': f'Activity {activity_id}',
        'type': sport_type,
        'sport_type': sport_type,
        'start_date': '2024-01-01T08:00:00Z',
        'elapsed_time': 1830,
        'moving_time': 1800,
        'distance': 5000.0,
        'total_elevation_gain': 30.0,
    }
    record.update(overrides)
    return record


@pytest.fixture
def strava(monkeypatch):
    fake = FakeStrava()
    monkeypatch.setattr(requests, 'post', fake.post)
    monkeypatch.setattr(requests, 'get', fake.get)
    return fake


@pytest.fixture
def credentials():
    return Credentials('client-1', 'secret-1', 'refresh-1')


@pytest.fixture
def morning_run():
    return Activity.from_strava({
        'id': 42,
        'name': 'Morning Run',
        'sport_type': 'Run',
        'start_date': '2024-01-01T08:00:00Z',
        'elapsed_time': 1830,
        'moving_time': 1800,
        'distance': 5000,
        'total_elevation_gain': 30,
        'location_city': 'Vienna',
    })
