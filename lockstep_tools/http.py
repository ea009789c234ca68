# SPDX-FileCopyrightText: 2023-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""HTTP session shared by the registry sources"""

import platform
import typing as t
from functools import lru_cache
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from requests_file import FileAdapter

from lockstep_tools import LockstepSettings, debug
from lockstep_tools.__version__ import __version__
from lockstep_tools.errors import FetchingError

MAX_RETRIES = 3

DEFAULT_REQUEST_TIMEOUT = (
    10.05,  # Connect timeout
    60.1,  #  Read timeout
)


@lru_cache(maxsize=None)
def create_session() -> requests.Session:
    api_adapter = HTTPAdapter(max_retries=MAX_RETRIES)

    session = requests.Session()
    session.headers['User-Agent'] = user_agent()

    session.mount('http://', api_adapter)
    session.mount('https://', api_adapter)
    session.mount('file://', FileAdapter())

    return session


def user_agent() -> str:
    """
    Returns user agent string.
    """

    environment_info = [
        f'{platform.system()}/{platform.release()} {platform.machine()}',
        f'python/{platform.python_version()}',
    ]

    return 'lockstep/{version} ({env})'.format(
        version=__version__,
        env='; '.join(environment_info),
    )


def join_url(*args) -> str:
    """
    Joins given arguments into an url
    """
    parts = [part[:-1] if part and part[-1] == '/' else part for part in args]
    return '/'.join(parts)


def get_json(url: str) -> t.Any:
    """GET the url and decode the JSON body"""
    timeout: t.Union[float, t.Tuple[float, float]] = (
        LockstepSettings().API_TIMEOUT or DEFAULT_REQUEST_TIMEOUT
    )

    try:
        debug(f'HTTP request: GET {url}')
        response = create_session().get(url, timeout=timeout, allow_redirects=True)
    except requests.exceptions.ConnectionError as e:
        raise FetchingError(f'Cannot connect to {url}\n{e}')
    except requests.exceptions.RequestException as e:
        raise FetchingError(f'HTTP request error {e}')

    debug(f'HTTP response: {response.status_code} total: {response.elapsed.total_seconds()}s')

    if response.status_code == HTTPStatus.NOT_FOUND:
        raise FetchingError(f'Package index was not found at {url}')

    if response.status_code >= 400:
        raise FetchingError(
            f'Error while fetching {url}: HTTP status code {response.status_code}'
        )

    try:
        return response.json()
    except ValueError:
        raise FetchingError(f'Unexpected response from {url}, expected JSON')
