# -*- coding: utf-8 -*-
"""
Ezlo cloud API client.

All calls are JSON POSTs to one endpoint with {"call": ..., "params": ...}.
A call succeeded when the body carries status == 1 and complete == 1.

Per lookup:
    token = client.login()
    uuid = client.serial_to_uuid(serial, token)
    state = client.webrtc_state(uuid, token)

Tokens are returned to the caller and never kept on the client.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Type

import requests

from .config import BotConfig
from .errors import AuthError, BotError, ResolutionError, TranslationError, TranslationKind


log = logging.getLogger(__name__)

WEBRTC_FEATURE = "mqttwebrtc.v2"
FEATURE_OFF = "off"


class CapabilityState(Enum):
    ABSENT = "absent"
    PRESENT_OFF = "present_off"
    PRESENT_ON = "present_on"


@dataclass(frozen=True)
class AuthToken:
    token: str
    legacy_token: Optional[str] = None
    expires: Optional[int] = None


def is_flag(value: Any, expected: int) -> bool:
    # JSON true/false must not pass for 1/0
    return type(value) is int and value == expected


def is_success(body: Any) -> bool:
    return isinstance(body, dict) and is_flag(body.get("status"), 1) and is_flag(body.get("complete"), 1)


def dig(body: Any, *path: str) -> Any:
    """body["a"]["b"]... or None as soon as a level is missing or not a dict."""
    cur = body
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def feature_state(features: Dict[str, Any], key: str = WEBRTC_FEATURE) -> CapabilityState:
    if key not in features:
        return CapabilityState.ABSENT
    entry = features[key]
    status = entry.get("status") if isinstance(entry, dict) else None
    if status == FEATURE_OFF:
        return CapabilityState.PRESENT_OFF
    # missing / null status counts as on
    return CapabilityState.PRESENT_ON


class EzloClient:
    def __init__(self, config: BotConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.api_url = config.ezlo_api_url
        self.timeout = config.http_timeout
        self.session = session or requests.Session()

    def _post(
        self,
        call: str,
        params: Dict[str, Any],
        error_cls: Type[BotError],
        prefix: Optional[str] = None,
        token: Optional[str] = None,
        version: Optional[str] = None,
    ) -> Any:
        """
        POST one API call and return the decoded JSON body.

        Transport problems (connection, timeout, HTTP status, bad JSON) are
        raised as error_cls("<prefix>: <reason>"), or the bare reason when
        there is no prefix. The envelope is not checked here; callers decide
        what a failure means for them.
        """
        payload: Dict[str, Any] = {"call": call, "params": params}
        if version:
            payload["version"] = version

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            log.error("Ezlo call %s failed: %s", call, e)
            raise error_cls(f"{prefix}: {e}" if prefix else str(e)) from e

    def login(self) -> AuthToken:
        body = self._post(
            "login_with_id_and_password",
            {
                "user_id": self.config.ezlo_user_id,
                "user_password": self.config.ezlo_user_password,
                "oem_id": self.config.ezlo_oem_id,
            },
            AuthError,
            "Login failed",
        )

        token = dig(body, "data", "token")
        if is_success(body) and token:
            log.info("Ezlo API login successful")
            return AuthToken(
                token=token,
                legacy_token=dig(body, "data", "legacy_token"),
                expires=dig(body, "data", "expires"),
            )

        log.error("Login failed: invalid response structure or status: %s", body)
        if is_flag(dig(body, "status"), 0):
            raise AuthError("Login failed: Authentication rejected by server")
        raise AuthError("Login failed: Invalid response from API")

    def serial_to_uuid(self, serial: str, token: AuthToken) -> str:
        body = self._post(
            "legacy_id_mapping",
            {"map": {"controller": {"ids_to_uuids": [serial]}}},
            TranslationError,
            "UUID conversion failed",
            token=token.token,
            version="1",
        )

        if not is_success(body):
            status = dig(body, "status")
            complete = dig(body, "complete")
            log.error("legacy_id_mapping failed: status=%s complete=%s", status, complete)
            raise TranslationError(
                f"API request failed: status={status}, complete={complete}",
                TranslationKind.REQUEST_FAILED,
            )

        mapping = dig(body, "data", "map", "controller", "ids_to_uuids")
        log.info("Controller mapping received: %s", mapping)
        if not isinstance(mapping, dict):
            raise TranslationError(
                "Invalid response: controller mapping not found",
                TranslationKind.MALFORMED_RESPONSE,
            )

        uuid = mapping.get(str(serial))
        if not uuid:
            log.error("Serial %s not found in controller mapping (have: %s)", serial, list(mapping))
            raise TranslationError(
                f"Device with serial {serial} not found or not accessible. "
                "Please check the serial number and try again.",
                TranslationKind.NOT_FOUND,
            )

        log.info("Serial %s converted to UUID: %s", serial, uuid)
        return uuid

    def webrtc_state(self, uuid: str, token: AuthToken) -> CapabilityState:
        body = self._post(
            "controller_raw_command",
            {
                "controller_uuid": uuid,
                "instant": 1,
                "queued": 0,
                "instant_timeout": 10,
                "command": {"method": "hub.features.list", "id": "_ID_", "params": {}},
            },
            ResolutionError,
            token=token.token,
        )

        if not is_success(body):
            log.error("hub.features.list failed for %s: %s", uuid, body)
            if is_flag(dig(body, "status"), 0):
                raise ResolutionError("Device not found or not accessible")
            raise ResolutionError("Invalid response from API")

        features = dig(body, "data", "controller_response", "result", "features")
        if not isinstance(features, dict):
            log.error("hub.features.list returned no feature map for %s: %s", uuid, body)
            raise ResolutionError("Invalid response from API")

        state = feature_state(features)
        log.info("WebRTC v2 state for UUID %s: %s", uuid, state.value)
        return state
