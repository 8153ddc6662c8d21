# -*- coding: utf-8 -*-
"""
Ezlo device lookup Slack bot (Socket Mode or HTTP + two slash commands)

Commands:
- /device <SERIAL>  -> Metabase dashboard link for the controller (in_channel).
- /webrtc <SERIAL>  -> checks whether the controller runs the FW/packages the
                       doorbell needs (mqttwebrtc.v2 feature on the hub).
    - if the payload carries thread_ts, the verdict is posted in that thread
    - otherwise it is an ephemeral reply

Errors are always ephemeral. Only channels listed in ALLOWED_CHANNELS may use
either command.

Transport:
- SLACK_APP_TOKEN set -> Socket Mode.
- otherwise           -> Bolt HTTP server on PORT (needs SLACK_SIGNING_SECRET).
"""

import logging
from typing import Any, Callable, Dict

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from .config import BotConfig, load_config
from .errors import BotError
from .messages import MSG_INTERNAL_ERROR, MSG_SNAPSHOT_INTERNAL_ERROR, checking_message
from .pipeline import DevicePipeline, user_message


log = logging.getLogger("ezlo-slack")


def handle_dashboard(pipeline: DevicePipeline, respond: Callable[..., Any], command: Dict[str, Any]) -> None:
    channel_id = command.get("channel_id", "")
    user_text = (command.get("text") or "").strip()
    log.info("Device lookup from channel=%s text=%r", channel_id, user_text)

    try:
        result = pipeline.dashboard_lookup(channel_id, user_text)
    except Exception:
        log.exception("Error processing device lookup")
        respond(text=MSG_INTERNAL_ERROR, response_type="ephemeral")
        return

    respond(text=result.text, response_type="in_channel" if result.ok else "ephemeral")


def start_webrtc(pipeline: DevicePipeline, respond: Callable[..., Any], command: Dict[str, Any]) -> bool:
    """
    Tell the user a check is running, but only once the channel and serial
    pass. Otherwise reply with the error and return False.
    """
    try:
        serial = pipeline.precheck(command.get("channel_id", ""), (command.get("text") or "").strip())
    except BotError as e:
        log.info("WebRTC status request rejected: %s", e.user_message)
        respond(text=user_message(e), response_type="ephemeral")
        return False

    # the Ezlo round trip takes a few seconds
    respond(text=checking_message(serial), response_type="ephemeral")
    return True


def handle_webrtc(
    pipeline: DevicePipeline,
    respond: Callable[..., Any],
    command: Dict[str, Any],
    client: Any,
) -> None:
    channel_id = command.get("channel_id", "")
    user_text = (command.get("text") or "").strip()
    thread_ts = command.get("thread_ts")
    log.info("WebRTC status request from channel=%s text=%r thread_ts=%s", channel_id, user_text, thread_ts)

    try:
        result = pipeline.webrtc_status(channel_id, user_text)
        if not result.ok:
            respond(text=result.text, response_type="ephemeral")
            return

        log.info("WebRTC status processed: %s", result.text)
        if thread_ts:
            log.info("Responding in thread %s", thread_ts)
            client.chat_postMessage(channel=channel_id, thread_ts=thread_ts, text=result.text)
        else:
            respond(text=result.text, response_type="ephemeral")
    except Exception:
        log.exception("Error processing WebRTC status request")
        respond(text=MSG_SNAPSHOT_INTERNAL_ERROR, response_type="ephemeral")


def register_commands(app: App, pipeline: DevicePipeline, config: BotConfig) -> None:
    @app.command(config.dashboard_cmd)
    def on_dashboard(ack, respond, command):
        ack()
        handle_dashboard(pipeline, respond, command)

    @app.command(config.webrtc_cmd)
    def on_webrtc(ack, respond, command, client):
        ack()
        if not start_webrtc(pipeline, respond, command):
            return
        handle_webrtc(pipeline, respond, command, client)


def build_app(config: BotConfig) -> App:
    if config.app_token:
        app = App(token=config.bot_token)
    else:
        app = App(token=config.bot_token, signing_secret=config.signing_secret)
    register_commands(app, DevicePipeline(config), config)
    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    config = load_config()

    log.info("Starting Ezlo Slack bot...")
    log.info("DASHBOARD_CMD=%s", config.dashboard_cmd)
    log.info("WEBRTC_CMD=%s", config.webrtc_cmd)
    log.info("ALLOWED_CHANNELS=%s", ",".join(sorted(config.allowed_channels)))
    log.info("EZLO_API_URL=%s", config.ezlo_api_url)
    log.info("EZLO_HTTP_TIMEOUT=%s", config.http_timeout)

    app = build_app(config)
    if config.app_token:
        SocketModeHandler(app, config.app_token).start()
    else:
        log.info("PORT=%s", config.port)
        app.start(port=config.port)


if __name__ == "__main__":
    main()
