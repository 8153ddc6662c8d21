# -*- coding: utf-8 -*-
"""Ezlo device lookup Slack bot."""

__version__ = "0.1.0"
