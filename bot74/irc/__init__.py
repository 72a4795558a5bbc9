""":mod:`bot74.irc` is the IRC protocol layer of bot74.

This sub-package contains everything related to the IRC protocol itself:
the message model (:mod:`~bot74.irc.message`), the bot's own prefix
(:mod:`~bot74.irc.prefix`), line wrapping (:mod:`~bot74.irc.utils`), and
the connection backends (:mod:`~bot74.irc.backends`).

.. important::

    When working on core IRC protocol related features, consult protocol
    documentation at https://modern.ircdocs.horse/

"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations


__all__ = [
    'abstract_backends',
    'backends',
    'message',
    'prefix',
    'utils',
]
