import export_calendar
from activity_calendar.models import Credentials
from conftest import make_record


def test_writes_calendar_file(tmp_path, monkeypatch, strava, credentials):
    monkeypatch.setattr(export_calendar, 'load_credentials', lambda: credentials)
    strava.pages = [[make_record(1, 'Run'), make_record(2, 'Ride')]]
    output = tmp_path / 'strava.ics'

    code = export_calendar.main(['-o', str(output), '--sport', 'ride', '--days', '14'])

    assert code == 0
    data = output.read_bytes()
    assert data.startswith(b'BEGIN:VCALENDAR\r\n')
    assert b'UID:2@strava-ics' in data
    assert b'UID:1@strava-ics' not in data


def test_writes_to_stdout(monkeypatch, strava, credentials, capsys):
    monkeypatch.setattr(export_calendar, 'load_credentials', lambda: credentials)

    assert export_calendar.main([]) == 0
    assert 'END:VCALENDAR' in capsys.readouterr().out


def test_missing_credentials_exit_code(monkeypatch, strava, capsys):
    monkeypatch.setattr(export_calendar, 'load_credentials',
                        lambda: Credentials('', '', ''))

    assert export_calendar.main([]) == 1
    err = capsys.readouterr().err
    assert 'Missing Strava credentials' in err
    assert 'STRAVA_REFRESH_TOKEN present: False' in err
    assert strava.posts == []
