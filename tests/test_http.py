# SPDX-FileCopyrightText: 2023-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest
import requests

from lockstep_tools.errors import FetchingError
from lockstep_tools.http import get_json, join_url, user_agent


def test_join_url():
    assert join_url('https://example.com/', 'specs.json') == 'https://example.com/specs.json'
    assert join_url('https://example.com', 'api/', 'x') == 'https://example.com/api/x'


def test_get_json(requests_mock):
    requests_mock.get('https://example.com/specs.json', json={'specs': []})

    assert get_json('https://example.com/specs.json') == {'specs': []}
    assert requests_mock.last_request.headers['User-Agent'] == user_agent()


def test_timeout_from_environment(requests_mock, monkeypatch):
    monkeypatch.setenv('LOCKSTEP_API_TIMEOUT', '5')
    requests_mock.get('https://example.com/specs.json', json=[])

    get_json('https://example.com/specs.json')

    assert requests_mock.last_request.timeout == 5.0


@pytest.mark.parametrize(
    'kwargs, message',
    [
        ({'status_code': 500}, 'HTTP status code 500'),
        ({'status_code': 404}, 'was not found'),
        ({'text': 'not json'}, 'expected JSON'),
        ({'exc': requests.exceptions.ConnectionError}, 'Cannot connect'),
        ({'exc': requests.exceptions.Timeout}, 'HTTP request error'),
    ],
)
def test_get_json_errors(requests_mock, kwargs, message):
    requests_mock.get('https://example.com/specs.json', **kwargs)

    with pytest.raises(FetchingError, match=message):
        get_json('https://example.com/specs.json')
