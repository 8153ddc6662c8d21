# -*- coding: utf-8 -*-
"""User-facing text for both commands."""

from urllib.parse import quote

from .ezlo import CapabilityState


MSG_INTERNAL_ERROR = "❌ An error occurred while processing your request."
MSG_SNAPSHOT_INTERNAL_ERROR = "❌ An error occurred while processing your snapshot request."

_NOT_READY = "Controller with serial number {serial} is NOT running correct FW and packages to work with doorbell. Reason: {reason}"
_READY = "Controller with serial number {serial} is running correct FW and packages to work with doorbell. Reason: {reason}"

VERDICTS = {
    CapabilityState.ABSENT: (_NOT_READY, "WebRTC v2 is not installed"),
    CapabilityState.PRESENT_OFF: (_NOT_READY, "WebRTC v2 is off"),
    CapabilityState.PRESENT_ON: (_READY, "WebRTC v2 is installed and on"),
}


def render_verdict(serial: str, state: CapabilityState) -> str:
    template, reason = VERDICTS[state]
    return template.format(serial=serial, reason=reason)


def dashboard_url(base_url: str, serial: str) -> str:
    return f"{base_url}?serial_number={quote(serial, safe='')}"


def dashboard_message(base_url: str, serial: str) -> str:
    return f"🔗 <{dashboard_url(base_url, serial)}|View dashboard for {serial}>"


def checking_message(serial: str) -> str:
    return f"🔄 Checking controller `{serial}`..."
