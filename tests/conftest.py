import json
import pytest
from unittest.mock import Mock

from src.jira_session import JiraSession, JiraTransport, SessionRegistry


def make_response(status_code=200, body=None, reason=None):
    """Build a fake requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason or {200: 'OK', 401: 'Unauthorized', 404: 'Not Found', 500: 'Internal Server Error'}.get(status_code, '')
    if body is None:
        response.text = ''
    elif isinstance(body, str):
        response.text = body
    else:
        response.text = json.dumps(body)
    response.json.side_effect = lambda: json.loads(response.text)
    return response


@pytest.fixture
def http():
    """Mock requests session; set `http.request.return_value` or `side_effect`"""
    return Mock()


@pytest.fixture
def session(http):
    return JiraSession(JiraTransport(http=http))


@pytest.fixture
def registry(http):
    """Session registry whose sessions all talk to the mocked requests session"""
    return SessionRegistry(http=http)


@pytest.fixture
def connected_session(session, http):
    http.request.return_value = make_response(200, {'accountId': 'abc'})
    assert session.connect('https://test.atlassian.net', 'qa@example.com', 'test-token')
    http.request.reset_mock()
    http.request.return_value = None
    return session
