"""Shared fakes: a requests.Session stand-in that replays canned Ezlo bodies."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from slackbot.config import BotConfig
from slackbot.ezlo import EzloClient
from slackbot.pipeline import DevicePipeline


ALLOWED = "C-ALLOWED"


def login_ok(token: str = "tok-1") -> dict:
    return {
        "status": 1,
        "complete": 1,
        "data": {"token": token, "legacy_token": "legacy-1", "expires": 1760000000},
    }


def mapping_ok(serial: str, uuid: str) -> dict:
    return {
        "status": 1,
        "complete": 1,
        "data": {"map": {"controller": {"ids_to_uuids": {serial: uuid}}}},
    }


def features_ok(features: dict) -> dict:
    return {
        "status": 1,
        "complete": 1,
        "data": {"controller_response": {"result": {"features": features}}},
    }


def fake_session(*bodies) -> MagicMock:
    """Session whose post() returns the given JSON bodies in order."""
    responses = []
    for body in bodies:
        resp = MagicMock()
        resp.json.return_value = body
        responses.append(resp)
    session = MagicMock()
    session.post.side_effect = responses
    return session


def posted_calls(session: MagicMock) -> list:
    return [c.kwargs["json"]["call"] for c in session.post.call_args_list]


@pytest.fixture
def config():
    return BotConfig(
        bot_token="xoxb-test",
        allowed_channels=frozenset({ALLOWED}),
        metabase_base_url="https://metabase.example.com/dashboard/7",
        ezlo_api_url="https://ezlo.example.com/v1/request",
        ezlo_user_id="bot-user",
        ezlo_user_password="secret",
        ezlo_oem_id="1",
        http_timeout=5,
    )


@pytest.fixture
def make_pipeline(config):
    def _make(*bodies):
        session = fake_session(*bodies)
        return DevicePipeline(config, EzloClient(config, session=session)), session
    return _make
