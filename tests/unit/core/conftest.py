"""Shared fixtures for core unit tests"""

import pytest

from hpal.core.parse import parse_markdown


SAMPLE_API = """\
# API

Intro to the API.

## Server

### `server.route(route)`

Adds a route. See [route options][route-options].

- `route` - the route configuration object:
    - `path` - the absolute path.
    - `method` - the HTTP method.
- `options` - optional settings.

### <a name="server.options" /> `server.options`

Server configuration.

- `port` - the TCP port.
- `host` - the public hostname.

## Request

### `request.params`

An object of path parameters.

[route-options]: https://hapi.dev/api/#route-options "Route options"
"""


@pytest.fixture(name="api_text")
def api_text_fixture():
    return SAMPLE_API


@pytest.fixture(name="api_doc")
def api_doc_fixture():
    return parse_markdown(SAMPLE_API)
