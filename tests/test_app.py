"""Tests for the Slack command handlers (no Bolt App is started)."""

from __future__ import annotations

from unittest.mock import MagicMock

from slackbot.app import handle_dashboard, handle_webrtc, register_commands
from slackbot.messages import MSG_INTERNAL_ERROR, MSG_SNAPSHOT_INTERNAL_ERROR
from slackbot.pipeline import PipelineResult
from tests.conftest import ALLOWED, features_ok, login_ok, mapping_ok


def _command(text="92000000", channel_id=ALLOWED, **extra):
    cmd = {"channel_id": channel_id, "text": text}
    cmd.update(extra)
    return cmd


# ---------------------------------------------------------------------------
# Dashboard command
# ---------------------------------------------------------------------------

def test_dashboard_success_is_in_channel(make_pipeline):
    pipeline, _ = make_pipeline()
    respond = MagicMock()

    handle_dashboard(pipeline, respond, _command())

    kwargs = respond.call_args.kwargs
    assert kwargs["response_type"] == "in_channel"
    assert "View dashboard for 92000000" in kwargs["text"]


def test_dashboard_error_is_ephemeral(make_pipeline):
    pipeline, _ = make_pipeline()
    respond = MagicMock()

    handle_dashboard(pipeline, respond, _command(text=""))

    respond.assert_called_once_with(text="❌ Please provide a serial number.", response_type="ephemeral")


def test_dashboard_unexpected_exception():
    pipeline = MagicMock()
    pipeline.dashboard_lookup.side_effect = RuntimeError("kaboom")
    respond = MagicMock()

    handle_dashboard(pipeline, respond, _command())

    respond.assert_called_once_with(text=MSG_INTERNAL_ERROR, response_type="ephemeral")


# ---------------------------------------------------------------------------
# WebRTC command
# ---------------------------------------------------------------------------

def test_webrtc_without_thread_responds_ephemeral(make_pipeline):
    pipeline, _ = make_pipeline(login_ok(), mapping_ok("92000000", "u-123"), features_ok({}))
    respond, client = MagicMock(), MagicMock()

    handle_webrtc(pipeline, respond, _command(), client)

    kwargs = respond.call_args.kwargs
    assert kwargs["response_type"] == "ephemeral"
    assert "WebRTC v2 is not installed" in kwargs["text"]
    client.chat_postMessage.assert_not_called()


def test_webrtc_with_thread_posts_in_thread(make_pipeline):
    pipeline, _ = make_pipeline(
        login_ok(), mapping_ok("92000000", "u-123"), features_ok({"mqttwebrtc.v2": {"status": "on"}})
    )
    respond, client = MagicMock(), MagicMock()

    handle_webrtc(pipeline, respond, _command(thread_ts="1700000000.000100"), client)

    client.chat_postMessage.assert_called_once()
    kwargs = client.chat_postMessage.call_args.kwargs
    assert kwargs["channel"] == ALLOWED
    assert kwargs["thread_ts"] == "1700000000.000100"
    assert kwargs["text"].endswith("WebRTC v2 is installed and on")
    respond.assert_not_called()


def test_webrtc_error_stays_ephemeral_even_in_thread(make_pipeline):
    pipeline, session = make_pipeline()
    respond, client = MagicMock(), MagicMock()

    handle_webrtc(pipeline, respond, _command(channel_id="C-OTHER", thread_ts="1.2"), client)

    respond.assert_called_once_with(
        text="❌ This command is not allowed in this channel.", response_type="ephemeral"
    )
    client.chat_postMessage.assert_not_called()
    assert session.post.call_count == 0


def test_webrtc_unexpected_exception():
    pipeline = MagicMock()
    pipeline.webrtc_status.return_value = PipelineResult.success("ok")
    respond, client = MagicMock(), MagicMock()
    client.chat_postMessage.side_effect = RuntimeError("slack down")

    handle_webrtc(pipeline, respond, _command(thread_ts="1.2"), client)

    respond.assert_called_once_with(text=MSG_SNAPSHOT_INTERNAL_ERROR, response_type="ephemeral")


# ---------------------------------------------------------------------------
# Registered Bolt listeners
# ---------------------------------------------------------------------------

def _registered(config, pipeline):
    listeners = {}
    app = MagicMock()

    def command(name):
        def decorator(fn):
            listeners[name] = fn
            return fn
        return decorator

    app.command.side_effect = command
    register_commands(app, pipeline, config)
    return listeners


def test_both_commands_registered(config, make_pipeline):
    pipeline, _ = make_pipeline()
    assert set(_registered(config, pipeline)) == {"/device", "/webrtc"}


def test_dashboard_listener_acks_then_responds(config, make_pipeline):
    pipeline, _ = make_pipeline()
    on_dashboard = _registered(config, pipeline)["/device"]
    ack, respond = MagicMock(), MagicMock()

    on_dashboard(ack=ack, respond=respond, command=_command())

    ack.assert_called_once_with()
    assert respond.call_args.kwargs["response_type"] == "in_channel"


def test_webrtc_listener_forbidden_channel_gets_only_the_error(config, make_pipeline):
    pipeline, session = make_pipeline()
    on_webrtc = _registered(config, pipeline)["/webrtc"]
    ack, respond, client = MagicMock(), MagicMock(), MagicMock()

    on_webrtc(ack=ack, respond=respond, command=_command(channel_id="C-OTHER", text="anything `x`"), client=client)

    ack.assert_called_once_with()
    assert [c.kwargs["text"] for c in respond.call_args_list] == [
        "❌ This command is not allowed in this channel."
    ]
    assert session.post.call_count == 0


def test_webrtc_listener_invalid_serial_gets_only_the_error(config, make_pipeline):
    pipeline, session = make_pipeline()
    on_webrtc = _registered(config, pipeline)["/webrtc"]
    respond = MagicMock()

    on_webrtc(ack=MagicMock(), respond=respond, command=_command(text="12`34"), client=MagicMock())

    assert respond.call_count == 1
    assert respond.call_args.kwargs["text"].startswith("❌ Invalid serial number format")
    assert session.post.call_count == 0


def test_webrtc_listener_allowed_channel_sends_progress_then_verdict(config, make_pipeline):
    pipeline, _ = make_pipeline(login_ok(), mapping_ok("92000000", "u-123"), features_ok({}))
    on_webrtc = _registered(config, pipeline)["/webrtc"]
    ack, respond = MagicMock(), MagicMock()

    on_webrtc(ack=ack, respond=respond, command=_command(text="**92000000**"), client=MagicMock())

    ack.assert_called_once_with()
    texts = [c.kwargs["text"] for c in respond.call_args_list]
    assert texts[0] == "🔄 Checking controller `92000000`..."
    assert texts[1].endswith("WebRTC v2 is not installed")
    assert len(texts) == 2
