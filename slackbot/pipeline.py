# -*- coding: utf-8 -*-
"""
Command pipelines.

dashboard_lookup:  channel check -> serial -> Metabase link (no remote call)
webrtc_status:     channel check -> serial -> login -> serial->UUID
                   -> hub.features.list -> verdict

Each step either returns the input for the next one or raises a BotError.
The first error ends the run and becomes a failed PipelineResult; nothing is
retried and nothing is kept between runs.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import BotConfig
from .errors import AuthError, BotError, ResolutionError
from .ezlo import EzloClient
from .messages import dashboard_message, dashboard_url, render_verdict
from .validation import authorize_channel, normalize_serial


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    ok: bool
    text: str

    @classmethod
    def success(cls, text: str) -> "PipelineResult":
        return cls(True, text)

    @classmethod
    def failure(cls, text: str) -> "PipelineResult":
        return cls(False, text)


def user_message(err: BotError) -> str:
    if isinstance(err, AuthError):
        return f"❌ Authentication failed: {err.user_message}"
    if isinstance(err, ResolutionError):
        return f"❌ Snapshot request failed: {err.user_message}"
    msg = err.user_message
    return msg if msg.startswith("❌") else f"❌ {msg}"


class DevicePipeline:
    def __init__(self, config: BotConfig, client: Optional[EzloClient] = None):
        self.config = config
        self.client = client or EzloClient(config)

    def precheck(self, channel_id: str, text: str) -> str:
        """Allow-list and serial checks shared by both commands; no remote call."""
        authorize_channel(channel_id, self.config.allowed_channels)
        return normalize_serial(text)

    def dashboard_lookup(self, channel_id: str, text: str) -> PipelineResult:
        try:
            serial = self.precheck(channel_id, text)
        except BotError as e:
            log.info("Device lookup rejected (channel=%s): %s", channel_id, e.user_message)
            return PipelineResult.failure(user_message(e))

        log.info("Generated URL for serial %s: %s", serial, dashboard_url(self.config.metabase_base_url, serial))
        return PipelineResult.success(dashboard_message(self.config.metabase_base_url, serial))

    def webrtc_status(self, channel_id: str, text: str) -> PipelineResult:
        try:
            serial = self.precheck(channel_id, text)

            token = self.client.login()
            uuid = self.client.serial_to_uuid(serial, token)
            log.info("Processing WebRTC status request for serial %s, UUID %s", serial, uuid)

            state = self.client.webrtc_state(uuid, token)
        except BotError as e:
            log.info("WebRTC status request failed (channel=%s): %s", channel_id, e.user_message)
            return PipelineResult.failure(user_message(e))

        return PipelineResult.success(render_verdict(serial, state))
