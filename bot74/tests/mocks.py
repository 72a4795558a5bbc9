"""Test mocks: they fake objects for testing."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from typing import NoReturn, Optional, TYPE_CHECKING

from typing_extensions import override

from bot74.handshake import UPDATE_MSG_PREFIX_STR
from bot74.irc.abstract_backends import AbstractIRCBackend


if TYPE_CHECKING:
    from bot74.bot import Bot
    from bot74.irc.message import Message


class MockIRCBackend(AbstractIRCBackend):
    """Fake IRC connection backend for testing purpose.

    :param bot: a bot instance
    :type bot: :class:`bot74.bot.Bot`

    This backend doesn't require an actual connection. Instead, it stores every
    message sent in the :attr:`message_sent` list.

    You can use the :func:`~bot74.tests.rawlist` function to compare the
    messages easily, and the :meth:`clear_message_sent` method to clear
    previous messages::

        >>> from bot74.tests import rawlist
        >>> bot.backend.irc_send(b'PRIVMSG #channel :Hi!\\r\\n')
        >>> bot.backend.message_sent == rawlist('PRIVMSG #channel :Hi!')
        True
        >>> bot.backend.clear_message_sent()
        [b'PRIVMSG #channel :Hi!\\r\\n']
        >>> bot.backend.message_sent
        []

    """
    def __init__(self, bot: Bot) -> None:
        super().__init__(bot)
        self.message_sent: list[bytes] = []
        """List of raw messages sent by the bot."""
        self.connected: bool = True
        """Convenient status flag.

        Set to ``False`` to make the bot think it is disconnected.
        """
        self.irc_errors: list[Message] = []
        """``ERROR`` messages received from the server."""

    @override
    def run_forever(self) -> NoReturn:
        raise RuntimeError('MockIRCBackend cannot be used to run the client.')

    @override
    def is_connected(self) -> bool:
        return self.connected

    @override
    def irc_send(self, data: bytes) -> None:
        """Store ``data`` into :attr:`message_sent`."""
        self.message_sent.append(data)

    def clear_message_sent(self) -> list[bytes]:
        """Clear and return previous messages sent.

        :return: a copy of the cleared messages sent
        :rtype: :class:`list`
        """
        # make a copy
        sent = list(self.message_sent)
        # clear the message sent
        self.message_sent = []
        return sent

    @override
    def on_irc_error(self, message: Message) -> None:
        self.irc_errors.append(message)


class MockIRCServer:
    """Fake IRC Server that can send messages to a test bot.

    :param bot: test bot instance to send messages to

    This mock object helps developers when they want to simulate an IRC server
    sending messages to the :attr:`bot` (e.g., using its :meth:`message` method
    or its more specific methods).

    .. important::

        This fake IRC server does not generate any network activity, and it
        does not react to anything the :attr:`bot` may send, as it is **not**
        an actual IRC server implementation.

    """
    def __init__(self, bot: Bot) -> None:
        self.bot: Bot = bot

    @property
    def hostname(self) -> str:
        """Name of the fake server, used as prefix of its numerics."""
        return 'irc.example.com'

    def message(self, raw: str) -> None:
        """Send a ``raw`` message as if the bot received it.

        :param raw: an IRC event from the server as seen by the bot
        """
        self.bot.on_message(raw)

    def welcome(self) -> None:
        """Send the end of the welcome burst (``004``) to the bot."""
        self.message(
            ':{server} 004 {bot} {server} test-1.0 iow ntk'.format(
                server=self.hostname,
                bot=self.bot.nick,
            ))

    def echo_prefix_update(self, user: str = '~bot', host: str = 'example.com') -> None:
        """Echo the bot's prefix update message back, with its full prefix.

        :param user: the bot's user, as the server sees it
        :param host: the bot's host, as the server sees it
        """
        self.message(
            ':{nick}!{user}@{host} PRIVMSG {nick} :{text}'.format(
                nick=self.bot.nick,
                user=user,
                host=host,
                text=UPDATE_MSG_PREFIX_STR,
            ))

    def ping(self, token: Optional[str] = None) -> None:
        """Send a ``PING`` with ``token`` (defaults to the server's name)."""
        self.message('PING :%s' % (token or self.hostname))

    def say(self, user: MockUser, channel: str, text: str) -> None:
        """Send a ``PRIVMSG`` to ``channel`` by ``user``.

        :param user: factory for the user who sends a message to ``channel``
        :param channel: recipient of the ``user``'s ``PRIVMSG``
        :param text: content of the message sent to the ``channel``
        """
        self.message(user.privmsg(channel, text))

    def pm(self, user: MockUser, text: str) -> None:
        """Send a ``PRIVMSG`` to the bot by a ``user``.

        :param user: factory for the user object who sends a message
        :param text: content of the message sent to the bot
        """
        self.message(user.privmsg(self.bot.nick, text))


class MockUser:
    """Fake user that can generate messages to send to a bot.

    :param str nick: nickname
    :param str user: IRC username
    :param str host: user's host
    """
    def __init__(
        self,
        nick: Optional[str] = None,
        user: Optional[str] = None,
        host: Optional[str] = None,
    ) -> None:
        self.nick = nick or 'Test'
        self.user = user or self.nick.lower()
        self.host = host or 'example.com'

    @property
    def prefix(self) -> str:
        """User's hostmask as seen by other users on the server."""
        return '{nick}!{user}@{host}'.format(
            nick=self.nick, user=self.user, host=self.host)

    def privmsg(self, recipient: str, text: str) -> str:
        """Generate a ``PRIVMSG`` command forwarded by a server for the user.

        :param recipient: a channel name or the bot's nick
        :param text: content of the message
        :return: a ``PRIVMSG`` command forwarded by the server as if it
                 originated from the user's hostmask
        """
        message = ':{prefix} PRIVMSG {recipient} :{text}\r\n'.format(
            prefix=self.prefix,
            recipient=recipient,
            text=text,
        )

        assert len(message.encode('utf-8')) <= 512, (
            'PRIVMSG command must NOT exceed the 512 bytes limit '
            '(\\r\\n included). Trying to send this command:\n`%r`' % message
        )

        return message
