"""Tests for core ``bot74.bot`` module"""
from __future__ import annotations

import logging
import typing

import pytest

from bot74 import __version__, bot, reaction
from bot74.commands import AuthLevel, Module
from bot74.exceptions import DuplicateCommandError
from bot74.handshake import Stage, UPDATE_MSG_PREFIX_STR
from bot74.irc.backends import AsyncioBackend, UninitializedBackend
from bot74.irc.message import MessageError, MsgPrefix
from bot74.state import ErrorReaction
from bot74.tests import rawlist


if typing.TYPE_CHECKING:
    from bot74.tests.factories import (
        BotFactory,
        ConfigFactory,
        IRCFactory,
        UserFactory,
    )


TMP_CONFIG = """
[core]
nick = TestBot
admins = Admin!*@example.com
"""

test_module = Module('test')


@test_module.command('echo')
def echo(state, metadata, args):
    return reaction.Ok(reaction.Reply(args))


@test_module.command('raw')
def raw(state, metadata, args):
    return reaction.Ok(reaction.RawMsg(args))


@test_module.command('quit', auth_lvl=AuthLevel.ADMIN)
def quit_(state, metadata, args):
    return reaction.Ok(reaction.Quit(args or None))


class ErrorCollector:
    def __init__(self, decision=ErrorReaction.PROCEED):
        self.errors = []
        self.decision = decision

    def __call__(self, error):
        self.errors.append(error)
        return self.decision


@pytest.fixture
def tmpconfig(configfactory: ConfigFactory):
    return configfactory('test.cfg', TMP_CONFIG)


@pytest.fixture
def mockbot(tmpconfig, botfactory: BotFactory):
    return botfactory(tmpconfig, [test_module])


@pytest.fixture
def irc(mockbot, ircfactory: IRCFactory):
    return ircfactory(mockbot)


@pytest.fixture
def admin(userfactory: UserFactory):
    return userfactory('Admin', '~admin', 'example.com')


@pytest.fixture
def user(userfactory: UserFactory):
    return userfactory('User', '~user', 'example.net')


def test_bot_init(tmpconfig):
    test_bot = bot.Bot(tmpconfig)

    assert test_bot.config is tmpconfig
    assert test_bot.nick == 'TestBot'
    assert isinstance(test_bot.backend, UninitializedBackend)
    assert not test_bot.hasquit
    assert len(test_bot.state.commands) == 0


def test_bot_init_duplicate_commands(tmpconfig):
    other = Module('other')
    other.command('echo')(echo)

    with pytest.raises(DuplicateCommandError):
        bot.Bot(tmpconfig, [test_module, other])


def test_get_irc_backend(tmpconfig):
    test_bot = bot.Bot(tmpconfig)

    backend = test_bot.get_irc_backend('irc.example.com', 6697, None)

    assert isinstance(backend, AsyncioBackend)
    assert backend.get_connection_kwargs() == {
        'host': 'irc.example.com',
        'port': 6697,
        'ssl': None,
        'local_addr': None,
    }


def test_uninitialized_backend_cannot_send(tmpconfig):
    test_bot = bot.Bot(tmpconfig)

    with pytest.raises(RuntimeError):
        test_bot.on_connect()


def test_on_connect(mockbot):
    mockbot.on_connect()

    assert mockbot.backend.message_sent == rawlist(
        'NICK TestBot',
        'USER bot74 0 * :bot74',
    )
    assert mockbot.state.handshake.stage is Stage.AWAITING_WELCOME


def test_handshake(mockbot, irc):
    mockbot.on_connect()
    irc.welcome()

    assert mockbot.backend.message_sent == rawlist(
        'NICK TestBot',
        'USER bot74 0 * :bot74',
        'PRIVMSG TestBot :%s' % UPDATE_MSG_PREFIX_STR,
    )
    assert mockbot.state.handshake.stage is Stage.PREFIX_UPDATE_REQUESTED
    assert not mockbot.state.msg_prefix.is_known

    irc.echo_prefix_update(user='~bot74', host='host.example.com')

    assert mockbot.state.msg_prefix.get() == MsgPrefix(
        'TestBot', '~bot74', 'host.example.com')
    assert mockbot.state.handshake.is_complete
    # nothing more was sent
    assert len(mockbot.backend.message_sent) == 3


def test_ping(mockbot, irc):
    irc.ping()

    assert mockbot.backend.message_sent == rawlist('PONG :irc.example.com')


def test_ping_no_colon(mockbot, irc):
    irc.message('PING irc.example.com')

    assert mockbot.backend.message_sent == rawlist('PONG :irc.example.com')


def test_irc_error(mockbot, irc, caplog):
    irc.message('ERROR :Closing link: (bot74@example.com) [Quit]')

    assert mockbot.backend.message_sent == []
    assert len(mockbot.backend.irc_errors) == 1
    assert 'Closing link' in caplog.text


def test_command_in_channel(mockbot, irc, user):
    irc.say(user, '#chan', 'TestBot: echo hello')

    assert mockbot.backend.message_sent == rawlist(
        'PRIVMSG #chan :User: hello',
    )


def test_command_in_private(mockbot, irc, user):
    irc.pm(user, 'echo hello')

    assert mockbot.backend.message_sent == rawlist('PRIVMSG User :hello')


def test_message_not_for_bot(mockbot, irc, user):
    irc.say(user, '#chan', 'hello everyone')

    assert mockbot.backend.message_sent == []


def test_quit_command(mockbot, irc, admin):
    irc.say(admin, '#chan', 'TestBot: quit See you later')

    assert mockbot.backend.message_sent == rawlist('QUIT :See you later')
    assert mockbot.hasquit


def test_quit_command_default_message(mockbot, irc, admin):
    irc.pm(admin, 'quit')

    assert mockbot.backend.message_sent == rawlist('QUIT :bot74 v%s' % __version__)
    assert mockbot.hasquit


def test_quit_command_unauthorized(mockbot, irc, user):
    irc.say(user, '#chan', 'TestBot: quit')

    assert mockbot.backend.message_sent == rawlist(
        'PRIVMSG #chan :User: My apologies, but you do not appear to have '
        'sufficient authority to use my "quit" command.',
    )
    assert not mockbot.hasquit


def test_quit(mockbot):
    mockbot.quit('Bye!')

    assert mockbot.backend.message_sent == rawlist('QUIT :Bye!')
    assert mockbot.hasquit


def test_quit_signal(mockbot):
    backend = AsyncioBackend(mockbot, 'irc.example.com', 6667)

    backend._signal_quit()

    assert mockbot.backend.message_sent == rawlist('QUIT :Quit')
    assert mockbot.hasquit


def test_quit_disconnected(mockbot):
    mockbot.backend.connected = False
    mockbot.quit('Bye!')

    assert mockbot.backend.message_sent == []
    assert mockbot.hasquit


def test_quit_invalid_message(tmpconfig, botfactory):
    errors = ErrorCollector()
    mockbot = botfactory(tmpconfig, [test_module], errors)

    mockbot.quit('Bye\nall')

    assert mockbot.backend.message_sent == []
    assert mockbot.hasquit
    assert len(errors.errors) == 1
    assert isinstance(errors.errors[0], MessageError)


def test_error_strategy_proceed(tmpconfig, botfactory, ircfactory, user):
    errors = ErrorCollector(ErrorReaction.PROCEED)
    mockbot = botfactory(tmpconfig, [test_module], errors)
    irc = ircfactory(mockbot)

    irc.say(user, '#chan', 'TestBot: raw :not-a-command')

    assert mockbot.backend.message_sent == []
    assert not mockbot.hasquit
    assert len(errors.errors) == 1
    assert isinstance(errors.errors[0], MessageError)


def test_error_strategy_quit(tmpconfig, botfactory, ircfactory, user):
    errors = ErrorCollector(ErrorReaction.QUIT)
    mockbot = botfactory(tmpconfig, [test_module], errors)
    irc = ircfactory(mockbot)

    irc.say(user, '#chan', 'TestBot: raw :not-a-command')

    assert mockbot.backend.message_sent == rawlist(
        'QUIT :bot74 v%s' % __version__,
    )
    assert mockbot.hasquit
    assert len(errors.errors) == 1


def test_invalid_line(tmpconfig, botfactory, ircfactory):
    errors = ErrorCollector()
    mockbot = botfactory(tmpconfig, [test_module], errors)
    irc = ircfactory(mockbot)

    irc.message(':irc.example.com')

    assert mockbot.backend.message_sent == []
    assert len(errors.errors) == 1
    assert isinstance(errors.errors[0], MessageError)


def test_log_raw(tmpconfig, botfactory, caplog):
    tmpconfig.core.log_raw = True
    mockbot = botfactory(tmpconfig)

    with caplog.at_level(logging.INFO, logger='bot74.raw'):
        mockbot.quit('Bye!')

    records = [r for r in caplog.records if r.name == 'bot74.raw']
    assert len(records) == 1
    assert records[0].getMessage() == ">>\t'QUIT :Bye!\\r\\n'"


def test_log_raw_disabled(mockbot, caplog):
    with caplog.at_level(logging.INFO, logger='bot74.raw'):
        mockbot.quit('Bye!')

    assert not [r for r in caplog.records if r.name == 'bot74.raw']


def test_on_close(mockbot, irc):
    mockbot.on_connect()
    irc.welcome()
    mockbot.on_close()

    assert mockbot.state.handshake.stage is Stage.CONNECTING
