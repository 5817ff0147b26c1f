from activity_calendar import server


def test_feed_urls():
    urls = server.feed_urls('192.168.1.20', 9000)
    assert urls['all activities'] == 'http://192.168.1.20:9000/strava.ics'
    assert urls['runs and rides only'] == 'http://192.168.1.20:9000/strava.ics?sport=run,ride'
    assert urls['last 30 days'] == 'http://192.168.1.20:9000/strava.ics?sinceDays=30'


def test_subscription_host_falls_back_to_hostname(monkeypatch):
    def no_network(*args, **kwargs):
        raise OSError('Network is unreachable')

    monkeypatch.setattr(server.socket, 'socket', no_network)
    monkeypatch.setattr(server.socket, 'gethostname', lambda: 'raspberrypi')

    assert server.subscription_host() == 'raspberrypi'


def test_main_parses_port_and_host(monkeypatch):
    calls = []
    monkeypatch.setattr(server, 'run_server', lambda host, port: calls.append((host, port)))

    server.main(['9090', '--host', '127.0.0.1'])
    server.main([])

    assert calls == [('127.0.0.1', 9090), ('0.0.0.0', server.DEFAULT_PORT)]