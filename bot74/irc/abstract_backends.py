""":mod:`bot74.irc.abstract_backends` defines the IRC backend interface.

.. warning::

    This is all internal code, not intended for direct use by bot modules.
    Modules never talk to the connection: they return reactions, and the bot
    sends the resulting messages.

"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from .message import Message
from .utils import MAX_LINE_LENGTH, safe


if TYPE_CHECKING:
    from bot74.bot import Bot


class AbstractIRCBackend(abc.ABC):
    """Abstract class defining the interface and basic logic of an IRC backend.

    :param bot: the bot using this backend
    :type bot: :class:`bot74.bot.Bot`

    Some methods of this class **MUST** be overridden by a subclass, or the
    backend implementation will not function correctly.
    """
    def __init__(self, bot: Bot):
        self.bot: Bot = bot

    @abc.abstractmethod
    def is_connected(self) -> bool:
        """Tell if the backend is connected or not."""

    def log_exception(self) -> None:
        """Log an exception to ``bot74.exceptions``.

        The IRC backend must use this method to log any exception that isn't
        caught by the bot itself (i.e. while handling messages), such as
        connection errors, SSL errors, etc.
        """
        err_log = logging.getLogger('bot74.exceptions')
        err_log.exception('Exception in core')
        err_log.error('----------------------------------------')

    @abc.abstractmethod
    def on_irc_error(self, message: Message) -> None:
        """Action to perform when the server sends an ``ERROR`` message.

        :param message: the ``ERROR`` message

        On IRC error, if ``bot.hasquit`` is set, the backend should close the
        connection so the bot can stop.
        """

    @abc.abstractmethod
    def irc_send(self, data: bytes) -> None:
        """Send an IRC line as raw ``data``.

        :param bytes data: raw line to send

        This method must be thread-safe.
        """

    @abc.abstractmethod
    def run_forever(self) -> None:
        """Run the backend forever (blocking call).

        This method is responsible for initiating the connection to the
        server, and it must call ``bot.on_connect`` once connected, and
        ``bot.on_close`` when the connection is over.
        """

    def decode_line(self, line: bytes) -> str:
        """Decode a raw IRC line from ``bytes`` to ``str``."""
        # We can't trust clients to pass valid Unicode.
        try:
            data = str(line, encoding='utf-8')
        except UnicodeDecodeError:
            # not Unicode; let's try CP-1252
            try:
                data = str(line, encoding='cp1252')
            except UnicodeDecodeError:
                raise ValueError('Unable to decode data from server.')

        return data

    def send_message(self, message: Message) -> None:
        """Send a :class:`~bot74.irc.message.Message` through the connection.

        :param message: the message to send

        .. note::

            This will call the :meth:`bot74.bot.Bot.on_message_sent`
            callback on the bot instance with the raw line sent.
        """
        raw_line = self.prepare_line(str(message))
        self.irc_send(raw_line.encode('utf-8'))
        self.bot.on_message_sent(raw_line)

    def prepare_line(self, line: str) -> str:
        """Prepare a raw IRC ``line`` to be sent.

        :param line: the serialized message, without its CR-LF terminator
        :return: the raw line to send through the connection

        From the IRC Client Protocol specification, :rfc:`2812#section-2.3`:

            IRC messages are always lines of characters terminated with a
            CR-LF (Carriage Return - Line Feed) pair, and these messages SHALL
            NOT exceed 512 characters in length, counting all characters
            including the trailing CR-LF. Thus, there are 510 characters
            maximum allowed for the command and its parameters. There is no
            provision for continuation of message lines.

        The length in the RFC refers to the length in *bytes*, which can be
        bigger than the length of the Unicode string. This method cuts the
        line until its length fits within this limit of 510 bytes.

        The returned line contains the CR-LF pair required at the end,
        and can be sent as-is.
        """
        max_length = unicode_max_length = MAX_LINE_LENGTH - 2
        raw_line = safe(line)

        # The max length of 512 is in bytes, not Unicode characters:
        # we can't split the line on bytes, or we may cut in the middle of a
        # multi-byte character.
        while len(raw_line.encode('utf-8')) > max_length:
            raw_line = raw_line[:unicode_max_length]
            unicode_max_length = unicode_max_length - 1

        # Ends the line with CR-LF
        return raw_line + '\r\n'

    def send_ping(self, host: str) -> None:
        """Send a ``PING`` command to the server.

        :param host: IRC server host

        A ``PING`` command should be sent at a regular interval to make sure
        the server knows the IRC connection is still active.
        """
        self.send_message(Message('PING', host))
