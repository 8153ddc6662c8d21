# -*- coding: utf-8 -*-
"""
Environment configuration for the Ezlo Slack bot.

Everything is read once by load_config() and passed around as a BotConfig;
nothing below reads os.environ after startup.
"""

import os
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional


DEFAULT_EZLO_API_URL = "https://api-cloud-bh247.ezlo.com/v1/request"


@dataclass(frozen=True)
class BotConfig:
    bot_token: str
    app_token: str = ""
    signing_secret: str = ""
    port: int = 3000

    dashboard_cmd: str = "/device"
    webrtc_cmd: str = "/webrtc"

    allowed_channels: FrozenSet[str] = frozenset()
    metabase_base_url: str = ""

    ezlo_api_url: str = DEFAULT_EZLO_API_URL
    ezlo_user_id: str = ""
    ezlo_user_password: str = ""
    ezlo_oem_id: str = ""
    http_timeout: int = 30


def parse_channels(value: Optional[str]) -> FrozenSet[str]:
    return frozenset(c.strip() for c in (value or "").split(",") if c.strip())


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, str(default)))
    except ValueError:
        return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> BotConfig:
    """Build a BotConfig from the environment. SLACK_BOT_TOKEN is required."""
    env = os.environ if environ is None else environ

    return BotConfig(
        bot_token=env["SLACK_BOT_TOKEN"],
        app_token=env.get("SLACK_APP_TOKEN", "").strip(),
        signing_secret=env.get("SLACK_SIGNING_SECRET", "").strip(),
        port=_int_env(env, "PORT", 3000),
        dashboard_cmd=env.get("DASHBOARD_CMD", "/device").strip(),
        webrtc_cmd=env.get("WEBRTC_CMD", "/webrtc").strip(),
        allowed_channels=parse_channels(env.get("ALLOWED_CHANNELS")),
        metabase_base_url=env.get("METABASE_BASE_URL", "").strip(),
        ezlo_api_url=env.get("EZLO_API_URL", DEFAULT_EZLO_API_URL).strip(),
        ezlo_user_id=env.get("EZLO_USER_ID", ""),
        ezlo_user_password=env.get("EZLO_USER_PASSWORD", ""),
        ezlo_oem_id=env.get("EZLO_OEM_ID", ""),
        http_timeout=_int_env(env, "EZLO_HTTP_TIMEOUT", 30),
    )
