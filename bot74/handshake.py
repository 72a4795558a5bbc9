"""Connection handshake stages.

Once connected, the bot registers its identity (``NICK`` then ``USER``) and
waits for the server's welcome burst. When the burst is over (numeric
``004``), the bot sends a ``PRIVMSG`` to itself with :data:`UPDATE_MSG_PREFIX_STR`
as text: the server echoes it back with the bot's full ``nick!user@host``
prefix, which is the only reliable way for the bot to learn it.

The :class:`Handshake` keeps track of where the bot is in this sequence.
The messages themselves are built and handled in :mod:`bot74.core`.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import enum
import logging
import threading


LOGGER = logging.getLogger(__name__)

UPDATE_MSG_PREFIX_STR = '!!! UPDATE MESSAGE PREFIX !!!'
"""Text of the self-addressed message used to learn the bot's prefix."""


class Stage(enum.IntEnum):
    """Stages of the connection handshake, in order."""
    CONNECTING = 0
    IDENTITY_SENT = 1
    AWAITING_WELCOME = 2
    WELCOME_RECEIVED = 3
    PREFIX_UPDATE_REQUESTED = 4
    PREFIX_KNOWN = 5


class Handshake:
    """Current stage of the connection handshake.

    The stage only moves forward, except for the prefix update round trip,
    which can be requested again at any time once the welcome burst is over::

        >>> handshake = Handshake()
        >>> handshake.advance(Stage.AWAITING_WELCOME)
        >>> handshake.stage
        <Stage.AWAITING_WELCOME: 2>

    """
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stage = Stage.CONNECTING

    @property
    def stage(self) -> Stage:
        """The current stage."""
        with self._lock:
            return self._stage

    @property
    def is_complete(self) -> bool:
        """Whether the bot's prefix has been learned at least once."""
        return self.stage is Stage.PREFIX_KNOWN

    def advance(self, stage: Stage) -> None:
        """Move to ``stage``.

        Going back is only allowed from :attr:`Stage.PREFIX_KNOWN` to
        :attr:`Stage.PREFIX_UPDATE_REQUESTED`, to refresh the prefix.
        Other backward moves are logged and ignored.
        """
        with self._lock:
            previous = self._stage
            refresh = (
                previous is Stage.PREFIX_KNOWN
                and stage is Stage.PREFIX_UPDATE_REQUESTED
            )
            if stage < previous and not refresh:
                LOGGER.warning(
                    'Ignoring handshake transition from %s to %s',
                    previous.name, stage.name)
                return
            self._stage = stage
        LOGGER.debug('Handshake stage: %s -> %s', previous.name, stage.name)

    def reset(self) -> None:
        """Go back to :attr:`Stage.CONNECTING`, e.g. after a disconnection."""
        with self._lock:
            self._stage = Stage.CONNECTING
