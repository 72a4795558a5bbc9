"""The bot itself: connection callbacks and the message loop.

:class:`Bot` glues the pieces together: it receives raw lines from its
connection backend, hands each parsed message to :mod:`bot74.core`, and sends
back whatever messages the core produced. It is also the only place where a
request to quit (:exc:`~bot74.exceptions.ModuleRequestedQuit`) is caught.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from bot74 import core
from bot74.commands import CommandRegistry
from bot74.exceptions import ModuleRequestedQuit
from bot74.handshake import Stage
from bot74.irc import message as ircmsg
from bot74.irc.backends import AsyncioBackend, UninitializedBackend
from bot74.irc.message import Message, MessageError
from bot74.state import ErrorReaction, State


if TYPE_CHECKING:
    from bot74.commands import Module
    from bot74.config import Config
    from bot74.irc.abstract_backends import AbstractIRCBackend
    from bot74.state import ErrorHandler


__all__ = ['Bot']

LOGGER = logging.getLogger(__name__)


class Bot:
    """An IRC bot reacting to the commands of its modules.

    :param settings: the bot's configuration
    :param modules: the bot modules providing its commands
    :param error_handler: strategy deciding what to do after an error the
                          bot couldn't handle (see
                          :func:`bot74.state.log_error_and_proceed`)
    :raise DuplicateCommandError: when two modules provide the same command
    """
    def __init__(
        self,
        settings: Config,
        modules: Iterable[Module] = (),
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = settings
        self.state = State(
            settings,
            CommandRegistry.from_modules(modules),
            error_handler,
        )
        self.backend: AbstractIRCBackend = UninitializedBackend(self)
        """IRC Connection Backend."""
        self.hasquit = False
        """Whether the bot has quit, or is quitting."""

    @property
    def config(self) -> Config:
        """The :class:`bot74.config.Config` for the current bot."""
        return self.settings

    @property
    def nick(self):
        """The bot's nickname."""
        return self.state.nick

    # Connection

    def get_irc_backend(
        self,
        host: str,
        port: int,
        source_address: Optional[tuple[str, int]],
    ) -> AbstractIRCBackend:
        """Set up the IRC backend based on the bot's settings.

        :return: the initialized IRC backend object
        """
        timeout = int(self.settings.core.timeout)
        ping_interval = int(self.settings.core.timeout_ping_interval)
        return AsyncioBackend(
            self,
            # connection
            host=host,
            port=port,
            source_address=source_address,
            # timeout
            server_timeout=timeout,
            ping_interval=ping_interval,
            # ssl
            use_ssl=self.settings.core.use_ssl,
            verify_ssl=self.settings.core.verify_ssl,
        )

    def run(self, host: str, port: int = 6667) -> None:
        """Connect to IRC server and run the bot forever.

        :param host: the IRC server hostname
        :param port: the IRC server port
        """
        source_address = ((self.settings.core.bind_host, 0)
                          if self.settings.core.bind_host else None)

        self.backend = self.get_irc_backend(host, port, source_address)
        try:
            self.backend.run_forever()
        except KeyboardInterrupt:
            # raised only when the bot is not connected
            LOGGER.warning('Keyboard Interrupt')
            raise

    def on_connect(self) -> None:
        """Handle successful establishment of IRC connection."""
        LOGGER.info('Connected, initiating setup sequence')
        for message in core.connection_sequence(self.state):
            LOGGER.debug('Sending %s', message.command)
            self.send(message)
        self.state.handshake.advance(Stage.AWAITING_WELCOME)

    def on_message(self, line: str) -> None:
        """Handle an incoming IRC line.

        :param line: the received raw IRC line

        ``PING`` is answered right away, and ``ERROR`` is logged. Then the
        message goes through :func:`bot74.core.handle_msg`, and every message
        it returns is sent.

        If a module asked the bot to quit, the bot sends its ``QUIT`` line
        and stops. Any other error goes to the error-handling strategy,
        which tells whether the bot should quit too.
        """
        try:
            message = Message.parse(line)
        except MessageError as error:
            self.handle_error(error)
            return

        if message.command == 'PING':
            self.send(ircmsg.pong(message.params[-1] if message.params else ''))
        elif message.command == 'ERROR':
            LOGGER.error('ERROR received from server: %s', message.text)
            self.backend.on_irc_error(message)

        try:
            for outgoing in core.handle_msg(self.state, message):
                self.send(outgoing)
        except ModuleRequestedQuit as quit_request:
            self.quit(quit_request.message)
        except Exception as error:
            self.handle_error(error)

    def handle_error(self, error: Exception) -> None:
        """Hand ``error`` to the error-handling strategy, and obey it."""
        decision = self.state.error_handler(error)
        if decision is ErrorReaction.QUIT:
            LOGGER.warning('Quitting after error: %s', error)
            self.quit()

    def on_message_sent(self, raw: str) -> None:
        """Handle any message sent through the connection.

        :param raw: raw text message sent through the connection
        """
        self.log_raw(raw, '>>')

    def on_close(self) -> None:
        """Handle the end of the connection."""
        LOGGER.info('Connection closed.')
        self.state.handshake.reset()

    def log_raw(self, line: str, prefix: str) -> None:
        """Log raw line to the raw log.

        :param line: the raw line
        :param prefix: additional information to prepend to the log line

        The ``prefix`` is usually either ``>>`` for an outgoing ``line`` or
        ``<<`` for a received one.
        """
        if not self.settings.core.log_raw:
            return
        logger = logging.getLogger('bot74.raw')
        logger.info("%s\t%r", prefix, line)

    # Output

    def send(self, message: Message) -> None:
        """Send one ``message`` through the connection backend."""
        self.backend.send_message(message)

    def quit(self, quit_message: Optional[str] = None) -> None:
        """Leave the server, with an optional farewell ``quit_message``.

        If the ``QUIT`` line can't be built, nothing is sent, but the bot
        stops all the same.
        """
        message = core.quit(self.state, quit_message)
        if message is not None and self.backend.is_connected():
            self.send(message)
        self.hasquit = True
