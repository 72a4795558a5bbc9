""":mod:`bot74.irc.prefix` tracks the bot's own message prefix.

The server echoes every ``PRIVMSG`` the bot sends with the bot's full prefix
(``:nick!user@host``) in front of it. The bot needs that prefix to know how
many bytes are left for text in each line, but only the server knows the
``user@host`` part for sure. It is learned through a self-addressed message
(see :mod:`bot74.handshake`), and stored in a :class:`PrefixTracker`.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import logging

from bot74.tools.locks import ReadWriteLock
from .message import MsgPrefix


LOGGER = logging.getLogger(__name__)

MAX_HOSTNAME_LENGTH = 63
"""Maximum length of a hostname label, used until the real one is known."""


def estimate_prefix_length(nick: str, user: str) -> int:
    """Estimate the maximum length of the bot's prefix.

    :param nick: the bot's nick
    :param user: the bot's user/ident
    :return: the largest prefix length the server may use

    Until the server tells the bot its prefix, assume the worst::

        nick!~user@<63 characters hostname>

    """
    return (
        len(nick.encode('utf-8'))  # own nick length
        + 1  # (! separator)
        + 1  # (for the optional ~ in user)
        + len(user.encode('utf-8'))  # own ident length
        + 1  # (@ separator)
        + MAX_HOSTNAME_LENGTH
    )


class PrefixTracker:
    """The bot's last known prefix, safe to share between threads.

    Reading the prefix (to compute the overhead of each outgoing line) is
    frequent and happens concurrently; updating it only happens when the
    self-addressed prefix update message comes back from the server. Both
    go through a :class:`~bot74.tools.locks.ReadWriteLock`.

    The tracker starts empty::

        >>> tracker = PrefixTracker()
        >>> tracker.is_known
        False
        >>> tracker.update_from(MsgPrefix('bot74', '~bot', 'example.com'))
        >>> tracker.get()
        MsgPrefix(nick='bot74', user='~bot', host='example.com')

    """
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._prefix = MsgPrefix()

    def get(self) -> MsgPrefix:
        """Get the current prefix (an empty prefix until one is learned)."""
        with self._lock.read():
            return self._prefix

    @property
    def is_known(self) -> bool:
        """Whether the server told the bot its prefix yet."""
        with self._lock.read():
            return not self._prefix.is_empty

    def length(self) -> int:
        """Length in bytes of the current prefix (``0`` if unknown)."""
        with self._lock.read():
            return self._prefix.byte_length()

    def update_from(self, prefix: MsgPrefix) -> None:
        """Replace the stored prefix with the one observed from the server."""
        with self._lock.write():
            previous, self._prefix = self._prefix, prefix
        LOGGER.debug('Message prefix updated from %r to %r', previous, prefix)
