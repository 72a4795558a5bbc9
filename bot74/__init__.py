"""
bot74 is the message-reaction core of an IRC bot.

It turns inbound IRC messages into outbound protocol lines: it dispatches
commands, checks who may run them, and wraps replies so they fit IRC's
512-byte line limit.
"""
#
# Licensed under the Eiffel Forum License 2.

from __future__ import annotations

import importlib.metadata


__all__ = [
    'bot',
    'commands',
    'config',
    'core',
    'exceptions',
    'handshake',
    'irc',
    'loader',
    'logger',
    'reaction',
    'state',
    'tools',
]


__version__ = importlib.metadata.version('bot74')
