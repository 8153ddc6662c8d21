# -*- coding: utf-8 -*-
"""
Input checks that run before anything talks to Ezlo.

- authorize_channel(): channel allow-list.
- normalize_serial(): strip Slack formatting, require exactly one
  8-digit serial starting with 92.
"""

import re
from typing import AbstractSet

from .errors import Forbidden, ValidationError, ValidationKind


SERIAL_RE = re.compile(r"^92[0-9]{6}$")

# Slack mrkdwn delimiters left behind by formatted pastes
MARKUP_CHARS_RE = re.compile(r"[*_`~]")
MARKUP_WRAPPERS = [
    re.compile(r"\*\*(.*?)\*\*"),
    re.compile(r"\*(.*?)\*"),
    re.compile(r"_(.*?)_"),
    re.compile(r"`(.*?)`"),
]

MSG_FORBIDDEN = "❌ This command is not allowed in this channel."
MSG_EMPTY = "❌ Please provide a serial number."
MSG_MULTIPLE = "❌ Please provide only a single serial number (e.g., 92000000)."
MSG_INVALID = (
    "❌ Invalid serial number format. "
    "Please provide an 8-digit serial starting with 92 (e.g., 92000000)."
)


def authorize_channel(channel_id: str, allowed_channels: AbstractSet[str]) -> None:
    if channel_id not in allowed_channels:
        raise Forbidden(MSG_FORBIDDEN)


def strip_markup(text: str) -> str:
    cleaned = MARKUP_CHARS_RE.sub("", text.strip())
    # second pass for wrapper pairs; normally a no-op after the character sweep
    for rx in MARKUP_WRAPPERS:
        cleaned = rx.sub(r"\1", cleaned)
    return cleaned.strip()


def normalize_serial(raw_text: str) -> str:
    """
    Return the single serial contained in raw_text, unchanged.

    Raises ValidationError with kind EMPTY_INPUT, MULTIPLE_VALUES or
    INVALID_FORMAT.
    """
    if not raw_text or not raw_text.strip():
        raise ValidationError(ValidationKind.EMPTY_INPUT, MSG_EMPTY)

    # "**" alone cleans down to "", which is one empty token, not zero
    tokens = strip_markup(raw_text).split() or [""]
    if len(tokens) > 1:
        raise ValidationError(ValidationKind.MULTIPLE_VALUES, MSG_MULTIPLE)

    serial = tokens[0]
    if not SERIAL_RE.match(serial):
        raise ValidationError(ValidationKind.INVALID_FORMAT, MSG_INVALID)
    return serial
