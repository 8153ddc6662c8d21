# -*- coding: utf-8 -*-
"""
Error taxonomy for the lookup commands.

Every stage raises one of these; the pipeline turns the first one it sees
into the single line shown to the user. `user_message` never contains raw
API payloads.
"""

from enum import Enum


class BotError(Exception):
    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class ValidationKind(Enum):
    EMPTY_INPUT = "empty_input"
    MULTIPLE_VALUES = "multiple_values"
    INVALID_FORMAT = "invalid_format"


class ValidationError(BotError):
    def __init__(self, kind: ValidationKind, user_message: str):
        super().__init__(user_message)
        self.kind = kind


class Forbidden(BotError):
    pass


class AuthError(BotError):
    pass


class TranslationKind(Enum):
    NOT_FOUND = "not_found"
    MALFORMED_RESPONSE = "malformed_response"
    REQUEST_FAILED = "request_failed"
    TRANSPORT = "transport"


class TranslationError(BotError):
    def __init__(self, user_message: str, kind: TranslationKind = TranslationKind.TRANSPORT):
        super().__init__(user_message)
        self.kind = kind


class ResolutionError(BotError):
    pass
