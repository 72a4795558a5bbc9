"""Long-lived state shared by every message the bot handles."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import enum
import fnmatch
import logging
from typing import Callable, Optional, TYPE_CHECKING

from bot74 import __version__
from bot74.exceptions import AdminCheckError
from bot74.handshake import Handshake
from bot74.irc.message import MsgPrefix
from bot74.irc.prefix import estimate_prefix_length, PrefixTracker
from bot74.tools.identifiers import Identifier, rfc1459_lower


if TYPE_CHECKING:
    from bot74.commands import CommandRegistry
    from bot74.config import Config


__all__ = [
    'ErrorHandler',
    'ErrorReaction',
    'State',
    'log_error_and_proceed',
]

LOGGER = logging.getLogger(__name__)


class ErrorReaction(enum.Enum):
    """What the bot should do after an error it couldn't handle."""
    PROCEED = 'proceed'
    """Keep handling messages."""
    QUIT = 'quit'
    """Quit the server and stop."""


ErrorHandler = Callable[[Exception], ErrorReaction]
"""Error-handling strategy: decide what to do after ``error``."""


def log_error_and_proceed(error: Exception) -> ErrorReaction:
    """Default error-handling strategy: log ``error`` and keep going."""
    LOGGER.error('%s', error)
    return ErrorReaction.PROCEED


def _match_mask(prefix: MsgPrefix, mask: str) -> bool:
    mask_prefix = MsgPrefix.parse(mask)
    if not mask_prefix.nick or not prefix.nick:
        return False
    # nicks follow the IRC casemapping; user and host don't
    return (
        fnmatch.fnmatchcase(
            rfc1459_lower(prefix.nick), rfc1459_lower(mask_prefix.nick))
        and fnmatch.fnmatchcase(prefix.user or '', mask_prefix.user or '*')
        and fnmatch.fnmatchcase(prefix.host or '', mask_prefix.host or '*')
    )


class State:
    """Everything the bot knows while handling messages.

    :param settings: the bot's configuration
    :param commands: every command the bot can run
    :param error_handler: strategy called with errors the bot can't handle
                          by itself (defaults to
                          :func:`log_error_and_proceed`)

    Apart from :attr:`msg_prefix` (and the :attr:`handshake` stage), nothing
    here changes once the bot is running.
    """
    def __init__(
        self,
        settings: Config,
        commands: CommandRegistry,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = settings
        self.commands = commands
        self.error_handler: ErrorHandler = (
            error_handler or log_error_and_proceed)
        self.msg_prefix = PrefixTracker()
        """The bot's own prefix, as seen by the server."""
        self.handshake = Handshake()
        """Where the bot is in the connection handshake."""

    @property
    def nick(self) -> Identifier:
        """The bot's nick."""
        return Identifier(self.settings.core.nick)

    @property
    def user(self) -> str:
        """The bot's user (ident)."""
        return self.settings.core.user

    @property
    def name(self) -> str:
        """The bot's "real name"."""
        return self.settings.core.name

    @property
    def addressee_suffix(self) -> str:
        """Text between a nick and a reply addressed to it, e.g. ``": "``."""
        return self.settings.core.addressee_suffix

    @property
    def default_quit_message(self) -> str:
        """Quit message used when a module doesn't provide one."""
        return self.settings.core.quit_message or 'bot74 v%s' % __version__

    def prefix_len(self) -> int:
        """Length in bytes of the bot's prefix.

        Until the server tells the bot its prefix, this is the largest
        length the prefix could have.
        """
        if self.msg_prefix.is_known:
            return self.msg_prefix.length()
        return estimate_prefix_length(self.nick, self.user)

    def have_admin(self, prefix: MsgPrefix) -> bool:
        """Tell if the sender with ``prefix`` is one of the bot's admins.

        :param prefix: the sender's prefix
        :raise AdminCheckError: when ``prefix`` has no nick

        Each entry of ``core.admins`` is a ``nick!user@host`` mask, with
        ``*`` and ``?`` wildcards; a missing ``user`` or ``host`` part
        matches anything. Nicks are compared case-insensitively.
        """
        if not prefix.nick:
            raise AdminCheckError(
                'Cannot check admin rights of a sender without a nick: %r'
                % (prefix,))
        return any(
            _match_mask(prefix, mask)
            for mask in self.settings.core.admins
        )
