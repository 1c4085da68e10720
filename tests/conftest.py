import json
from unittest.mock import MagicMock

import pytest
import requests

from lightkit.api.http_client import HttpClient
from lightkit.lamps.hue import Hue
from lightkit.lamps.nanoleaf import Nanoleaf


def make_response(text: str = "", status: int = 200) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.put.return_value = make_response()
    session.get.return_value = make_response("{}")
    return session


def attach(lamp, session):
    lamp._client = HttpClient(lamp.address(), session=session)
    return lamp


@pytest.fixture
def nanoleaf(session) -> Nanoleaf:
    return attach(Nanoleaf("10.0.0.5", "token"), session)


@pytest.fixture
def hue(session) -> Hue:
    return attach(Hue("10.0.0.2", "user", 1), session)
