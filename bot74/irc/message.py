""":mod:`bot74.irc.message` parses and builds IRC protocol messages.

A :class:`Message` is one IRC line, without its CR-LF terminator. It can be
parsed from a raw line with :meth:`Message.parse`, and serialized back with
``str(message)``::

    >>> message = Message.parse(':bot74!~bot@example.com PRIVMSG #chan :hi all')
    >>> message.prefix
    MsgPrefix(nick='bot74', user='~bot', host='example.com')
    >>> message.params
    ['#chan', 'hi all']
    >>> str(message)
    ':bot74!~bot@example.com PRIVMSG #chan :hi all'

The client-side constructors (:func:`privmsg`, :func:`nick`, :func:`user`,
:func:`quit`, and :func:`pong`) validate their arguments and raise
:exc:`MessageError` for anything that can't be sent as a single line.

.. important::

    When working on IRC protocol related features, consult protocol
    documentation at https://modern.ircdocs.horse/

"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import re
from typing import NamedTuple, Optional, cast

from bot74.exceptions import Bot74Error


__all__ = [
    'Message',
    'MessageError',
    'MsgMetadata',
    'MsgPrefix',
    'MsgTarget',
    'PrivMsg',
    'nick',
    'parse_privmsg',
    'pong',
    'privmsg',
    'quit',
    'user',
]

RPL_WELCOME = '001'
RPL_MYINFO = '004'
"""Last numeric of the protocol-mandated welcome burst."""

FORBIDDEN_CHARS = frozenset('\r\n\x00')
"""Parameters can **never** contain NUL, CR, or LF octets."""

COMMAND_REGEX = re.compile(r'^(?:[A-Za-z]+|\d{3})$')


class MessageError(Bot74Error):
    """Raised when a message can't be parsed or built."""


class MsgPrefix(NamedTuple):
    """Sender identity of a message: ``nick!user@host``.

    Every part is optional: a server prefix only has a "nick" (the server
    name), and a prefix the bot hasn't learned yet has no part at all.
    """
    nick: Optional[str] = None
    user: Optional[str] = None
    host: Optional[str] = None

    component_regex = re.compile(r'([^!@]*)(?:!([^@]*))?(?:@(.*))?')

    @classmethod
    def parse(cls, hostmask: str) -> 'MsgPrefix':
        """Parse a ``nick!user@host`` string into a prefix."""
        # the regex will always match any string, even an empty one
        match = cast(re.Match, cls.component_regex.match(hostmask))
        nick, user, host = match.groups()
        return cls(nick or None, user or None, host or None)

    def __str__(self) -> str:
        prefix = self.nick or ''
        if self.user:
            prefix += '!' + self.user
        if self.host:
            prefix += '@' + self.host
        return prefix

    @property
    def is_empty(self) -> bool:
        """Whether no part of the prefix is known."""
        return not (self.nick or self.user or self.host)

    def byte_length(self) -> int:
        """Length in bytes of the prefix as the server writes it."""
        return len(str(self).encode('utf-8'))


class MsgTarget(NamedTuple):
    """Channel name or nick a message is addressed to."""
    name: str

    def __str__(self) -> str:
        return self.name


class MsgMetadata(NamedTuple):
    """Where an addressed message was sent, and who sent it."""
    target: MsgTarget
    prefix: MsgPrefix


class PrivMsg(NamedTuple):
    """An addressed-text message: its metadata and its text."""
    metadata: MsgMetadata
    text: str


def _has_forbidden_chars(value: str) -> bool:
    return any(char in FORBIDDEN_CHARS for char in value)


def _check_middle(value: str, what: str) -> str:
    if not value:
        raise MessageError('%s must not be empty' % what)
    if ' ' in value or value.startswith(':') or _has_forbidden_chars(value):
        raise MessageError('Invalid %s: %r' % (what, value))
    return value


def _check_text(value: str, what: str = 'text') -> str:
    if _has_forbidden_chars(value):
        raise MessageError(
            'Invalid %s (contains CR, LF, or NUL): %r' % (what, value))
    return value


class Message:
    """One IRC protocol message.

    :param command: IRC command or three-digit numeric
    :param args: middle parameters (no space allowed)
    :param text: optional trailing parameter (may contain spaces)
    :param prefix: optional source of the message
    :param tags: optional IRCv3 message tags

    Constructing a :class:`Message` directly doesn't validate anything; use
    :meth:`parse` or the module-level constructors for that.
    """
    def __init__(
        self,
        command: str,
        *args: str,
        text: Optional[str] = None,
        prefix: Optional[MsgPrefix] = None,
        tags: Optional[dict[str, Optional[str]]] = None,
    ):
        self.command: str = command
        self.args: tuple[str, ...] = args
        self.text: Optional[str] = text
        self.prefix: Optional[MsgPrefix] = prefix
        self.tags: dict[str, Optional[str]] = dict(tags or {})

    @classmethod
    def parse(cls, line: str) -> 'Message':
        """Parse a raw IRC ``line`` into a :class:`Message`.

        :param line: the raw line, with or without its CR-LF terminator
        :raise MessageError: when ``line`` isn't a valid IRC message
        """
        line = line.rstrip('\r\n')
        if _has_forbidden_chars(line):
            raise MessageError('Line contains CR, LF, or NUL: %r' % line)
        if not line.strip():
            raise MessageError('Empty line')
        raw = line

        # Break off IRCv3 message tags, if present
        tags: dict[str, Optional[str]] = {}
        if line.startswith('@'):
            try:
                tagstring, line = line.split(' ', 1)
            except ValueError:
                raise MessageError('Missing command: %r' % raw)
            for raw_tag in tagstring[1:].split(';'):
                if not raw_tag:
                    continue
                tag = raw_tag.split('=', 1)
                if len(tag) > 1:
                    tags[tag[0]] = tag[1]
                else:
                    tags[tag[0]] = None
            line = line.lstrip(' ')

        prefix: Optional[MsgPrefix] = None
        if line.startswith(':'):
            try:
                hostmask, line = line[1:].split(' ', 1)
            except ValueError:
                raise MessageError('Missing command: %r' % raw)
            if not hostmask:
                raise MessageError('Empty prefix: %r' % raw)
            prefix = MsgPrefix.parse(hostmask)
            line = line.lstrip(' ')

        # Example: line = 'PRIVMSG #chan :foo bar!'
        #          argstr = 'PRIVMSG #chan', text = 'foo bar!'
        text: Optional[str] = None
        if line.startswith(':'):
            raise MessageError('Missing command: %r' % raw)
        if ' :' in line:
            argstr, text = line.split(' :', 1)
        else:
            argstr = line

        args = [arg for arg in argstr.split(' ') if arg]
        if not args:
            raise MessageError('Missing command: %r' % raw)

        command, args = args[0], args[1:]
        if not COMMAND_REGEX.match(command):
            raise MessageError('Invalid command %r: %r' % (command, raw))

        return cls(command.upper(), *args, text=text, prefix=prefix, tags=tags)

    @property
    def params(self) -> list[str]:
        """All parameters, the trailing ``text`` included."""
        params = list(self.args)
        if self.text is not None:
            params.append(self.text)
        return params

    def __str__(self) -> str:
        parts = []
        if self.tags:
            parts.append('@' + ';'.join(
                key if value is None else '%s=%s' % (key, value)
                for key, value in self.tags.items()))
        if self.prefix is not None and not self.prefix.is_empty:
            parts.append(':%s' % self.prefix)
        parts.append(self.command)
        parts.extend(self.args)
        if self.text is not None:
            parts.append(':' + self.text)
        return ' '.join(parts)

    def __repr__(self) -> str:
        return '<%s %r>' % (self.__class__.__name__, str(self))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return (
            self.command == other.command
            and self.args == other.args
            and self.text == other.text
            and self.prefix == other.prefix
            and self.tags == other.tags
        )

    def __hash__(self) -> int:
        return hash(str(self))


def parse_privmsg(message: Message) -> Optional[PrivMsg]:
    """Get the addressed-text view of a ``PRIVMSG``.

    :param message: any parsed message
    :return: the message's metadata and text, or ``None`` if ``message``
             isn't a ``PRIVMSG`` with a target and a text
    """
    params = message.params
    if message.command != 'PRIVMSG' or len(params) < 2:
        return None

    prefix = message.prefix or MsgPrefix()
    metadata = MsgMetadata(MsgTarget(params[0]), prefix)
    return PrivMsg(metadata, params[-1])


# Client messages

def privmsg(target: str, text: str) -> Message:
    """Build a ``PRIVMSG`` to ``target`` (nick or channel) with ``text``."""
    return Message(
        'PRIVMSG',
        _check_middle(target, 'target'),
        text=_check_text(text))


def nick(nickname: str) -> Message:
    """Build a ``NICK`` message requesting ``nickname``."""
    return Message('NICK', _check_middle(nickname, 'nickname'))


def user(username: str, realname: str) -> Message:
    """Build a ``USER`` message with ``username`` and ``realname``."""
    return Message(
        'USER',
        _check_middle(username, 'username'),
        '0',
        '*',
        text=_check_text(realname, 'real name'))


def quit(reason: Optional[str] = None) -> Message:
    """Build a ``QUIT`` message with an optional ``reason``."""
    if reason is None:
        return Message('QUIT')
    return Message('QUIT', text=_check_text(reason, 'quit message'))


def pong(server: str) -> Message:
    """Build the ``PONG`` answering a server's ``PING``."""
    return Message('PONG', text=_check_text(server, 'server'))
