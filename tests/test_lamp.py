"""Tests for sending signals and queries through a lamp."""

import logging

import pytest
import requests

from lightkit.api.http_client import HEADERS, HttpClient
from lightkit.commands.base import Brightness, GetSignal, On, Scene
from lightkit.errors import LampRequestError
from lightkit.lamps.hue import Hue

from conftest import make_response


class TestApply:
    def test_put_goes_to_endpoint_with_json(self, nanoleaf, session):
        assert nanoleaf.apply(Brightness(value=10)) is True

        session.put.assert_called_once_with(
            "http://10.0.0.5:16021/api/v1/token/state",
            data='{"brightness":{"value":10}}',
            headers=HEADERS,
            timeout=5,
        )
        assert HEADERS["Content-Type"] == "application/json"

    def test_unsupported_signal_sends_nothing(self, hue, session):
        assert hue.apply(Scene(name="Relax")) is True
        session.put.assert_not_called()

    def test_http_error_is_logged_not_raised(self, hue, session, caplog):
        session.put.return_value = make_response("boom", status=500)

        with caplog.at_level(logging.WARNING):
            assert hue.apply(On(state=True)) is False

        assert "hue1" in caplog.text

    def test_connection_error_is_logged_not_raised(self, hue, session):
        session.put.side_effect = requests.ConnectionError("unreachable")
        assert hue.apply(On(state=False)) is False

    def test_bridge_error_body_counts_as_failure(self, hue, session):
        session.put.return_value = make_response('[{"error": {"type": 3, "description": "resource not available"}}]')
        assert hue.apply(On(state=True)) is False

    def test_bridge_success_body(self, hue, session):
        session.put.return_value = make_response('[{"success": {"/lights/1/state/on": true}}]')
        assert hue.apply(On(state=True)) is True

    def test_send_raises(self, nanoleaf, session):
        session.put.side_effect = requests.Timeout("slow")
        with pytest.raises(LampRequestError, match="slow"):
            nanoleaf.send(On(state=True))

    def test_convenience_wrappers(self, nanoleaf, session):
        nanoleaf.off()
        nanoleaf.colour(120, 50, 50)
        nanoleaf.palette(370.0, 1.0, 1.0)

        bodies = [c.kwargs["data"] for c in session.put.call_args_list]
        assert bodies == [
            '{"on":{"value":false}}',
            '{"hue":{"value":120},"sat":{"value":50},"brightness":{"value":50}}',
            '{"hue":{"value":10},"sat":{"value":100},"brightness":{"value":100}}',
        ]


class TestQuery:
    def test_scene_list(self, nanoleaf, session):
        session.get.return_value = make_response('["Flames", "Forest"]')

        assert nanoleaf.query(GetSignal.SCENES) == '["Flames", "Forest"]'
        session.get.assert_called_once_with(
            "http://10.0.0.5:16021/api/v1/token/effects/effectsList", timeout=5
        )

    def test_hue_state_uses_base_url(self, hue, session):
        hue.query(GetSignal.STATE)
        session.get.assert_called_once_with("http://10.0.0.2/api/user/lights/1", timeout=5)

    def test_unsupported_query(self, hue, session):
        assert hue.query(GetSignal.SCENES) is None
        session.get.assert_not_called()

    def test_query_error_propagates(self, nanoleaf, session):
        session.get.return_value = make_response("forbidden", status=403)

        with pytest.raises(LampRequestError) as exc:
            nanoleaf.query(GetSignal.STATE)
        assert exc.value.status == 403


def test_client_creates_its_own_session():
    client = HttpClient("http://lamp", timeout=2)
    assert isinstance(client.session, requests.Session)
    assert client.url("state") == "http://lamp/state"
    assert client.url("") == "http://lamp"


class TestClose:
    def test_closes_the_session(self, nanoleaf, session):
        nanoleaf.close()
        session.close.assert_called_once_with()

    def test_new_session_after_close(self, nanoleaf, session):
        nanoleaf.close()
        assert nanoleaf.client.session is not session

    def test_without_requests_is_a_no_op(self):
        Hue("ip", "key", 1).close()
