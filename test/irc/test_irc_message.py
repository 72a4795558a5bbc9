"""Tests for ``bot74.irc.message``"""
from __future__ import annotations

import pytest

from bot74.irc import message
from bot74.irc.message import Message, MessageError, MsgPrefix


def test_prefix_parse():
    prefix = MsgPrefix.parse('bot74!~bot@example.com')
    assert prefix == MsgPrefix('bot74', '~bot', 'example.com')
    assert str(prefix) == 'bot74!~bot@example.com'
    assert not prefix.is_empty


def test_prefix_parse_server():
    prefix = MsgPrefix.parse('irc.example.com')
    assert prefix == MsgPrefix('irc.example.com', None, None)
    assert str(prefix) == 'irc.example.com'


def test_prefix_parse_nick_host():
    prefix = MsgPrefix.parse('alice@example.com')
    assert prefix == MsgPrefix('alice', None, 'example.com')
    assert str(prefix) == 'alice@example.com'


def test_prefix_parse_wildcard_host():
    assert MsgPrefix.parse('*@example.com') == MsgPrefix('*', None, 'example.com')


def test_prefix_parse_nick_user():
    assert MsgPrefix.parse('alice!~a') == MsgPrefix('alice', '~a', None)


def test_prefix_empty():
    prefix = MsgPrefix()
    assert prefix.is_empty
    assert str(prefix) == ''
    assert prefix.byte_length() == 0


def test_prefix_byte_length():
    assert MsgPrefix('bot74', '~bot', 'example.com').byte_length() == 22
    assert MsgPrefix('café', 'u', 'h').byte_length() == 9


def test_message_parse():
    msg = Message.parse(':alice!~a@example.com PRIVMSG #chan :hello world')

    assert msg.prefix == MsgPrefix('alice', '~a', 'example.com')
    assert msg.command == 'PRIVMSG'
    assert msg.args == ('#chan',)
    assert msg.text == 'hello world'
    assert msg.params == ['#chan', 'hello world']


def test_message_parse_crlf():
    msg = Message.parse('PING :irc.example.com\r\n')

    assert msg.prefix is None
    assert msg.command == 'PING'
    assert msg.params == ['irc.example.com']


def test_message_parse_numeric():
    msg = Message.parse(':irc.example.com 004 bot74 irc.example.com v1 iow ntk')

    assert msg.command == '004'
    assert msg.args == ('bot74', 'irc.example.com', 'v1', 'iow', 'ntk')
    assert msg.text is None


def test_message_parse_tags():
    msg = Message.parse('@time=2020-01-01T00:00:00Z;bot :a!b@c PRIVMSG #x :hi')

    assert msg.tags == {'time': '2020-01-01T00:00:00Z', 'bot': None}
    assert msg.command == 'PRIVMSG'
    assert msg.text == 'hi'


def test_message_parse_empty_text():
    msg = Message.parse(':a!b@c PRIVMSG #chan :')

    assert msg.text == ''
    assert msg.params == ['#chan', '']


def test_message_parse_lowercase_command():
    assert Message.parse('privmsg #chan :hi').command == 'PRIVMSG'


@pytest.mark.parametrize('line', [
    '',
    '   ',
    '\r\n',
    ':prefix-only',
    ': PRIVMSG #chan :hi',
    ':a!b@c :text only',
    'PRIV$MSG #chan :hi',
    '12 #chan',
    'PRIVMSG #chan :bad\x00text',
])
def test_message_parse_invalid(line):
    with pytest.raises(MessageError):
        Message.parse(line)


def test_message_str():
    msg = Message('PRIVMSG', '#chan', text='hello world')
    assert str(msg) == 'PRIVMSG #chan :hello world'

    msg = Message('NICK', 'bot74')
    assert str(msg) == 'NICK bot74'

    msg = Message('PRIVMSG', '#chan', text='hi', prefix=MsgPrefix('a', 'b', 'c'))
    assert str(msg) == ':a!b@c PRIVMSG #chan :hi'


def test_message_str_parse():
    line = '@id=123 :alice!~a@example.com PRIVMSG #chan :hello: world'
    assert str(Message.parse(line)) == line


def test_message_eq():
    assert Message('NICK', 'bot74') == Message.parse('NICK bot74')
    assert Message('NICK', 'bot74') != Message('NICK', 'other')
    assert Message('QUIT') != 'QUIT'


def test_parse_privmsg():
    msg = Message.parse(':alice!~a@example.com PRIVMSG #chan :hello')
    privmsg = message.parse_privmsg(msg)

    assert privmsg is not None
    assert privmsg.metadata.target == message.MsgTarget('#chan')
    assert privmsg.metadata.prefix == MsgPrefix('alice', '~a', 'example.com')
    assert privmsg.text == 'hello'


def test_parse_privmsg_no_prefix():
    privmsg = message.parse_privmsg(Message.parse('PRIVMSG #chan :hello'))

    assert privmsg is not None
    assert privmsg.metadata.prefix.is_empty


def test_parse_privmsg_not_privmsg():
    assert message.parse_privmsg(Message.parse('NOTICE #chan :hello')) is None
    assert message.parse_privmsg(Message.parse('PRIVMSG #chan')) is None


def test_privmsg():
    assert str(message.privmsg('#chan', 'hi there')) == 'PRIVMSG #chan :hi there'
    assert str(message.privmsg('alice', '')) == 'PRIVMSG alice :'


@pytest.mark.parametrize('target', ['', 'two words', ':colon', 'a\r\nb'])
def test_privmsg_invalid_target(target):
    with pytest.raises(MessageError):
        message.privmsg(target, 'text')


def test_privmsg_invalid_text():
    with pytest.raises(MessageError):
        message.privmsg('#chan', 'line\r\nQUIT :injected')


def test_nick():
    assert str(message.nick('bot74')) == 'NICK bot74'

    with pytest.raises(MessageError):
        message.nick('bot 74')


def test_user():
    assert str(message.user('bot', 'My Bot')) == 'USER bot 0 * :My Bot'

    with pytest.raises(MessageError):
        message.user('', 'My Bot')


def test_quit():
    assert str(message.quit()) == 'QUIT'
    assert str(message.quit('Bye all')) == 'QUIT :Bye all'

    with pytest.raises(MessageError):
        message.quit('Bye\nall')


def test_pong():
    assert str(message.pong('irc.example.com')) == 'PONG :irc.example.com'
