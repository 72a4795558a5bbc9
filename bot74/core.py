"""Core message handling: from an inbound message to outbound messages.

Everything here is a plain function of the bot's :class:`~bot74.state.State`
and a message. Nothing is sent from here: every function returns the
messages to send, and the :class:`~bot74.bot.Bot` sends them.

The flow for an addressed message is:

1. :func:`handle_msg` recognizes a ``PRIVMSG`` (or the end of the welcome
   burst, for the handshake);
2. :func:`handle_privmsg` checks that the bot is addressed, and extracts
   the command line;
3. :func:`handle_bot_command` looks the command up, checks that the sender
   may use it (:func:`run_bot_command`), runs it, and turns its result into
   a :data:`~bot74.reaction.Reaction` (:func:`bot_command_reaction`);
4. :func:`handle_reaction` turns the reaction into messages, wrapping long
   text with :func:`~bot74.irc.utils.wrap_msg`.

A :class:`~bot74.reaction.Quit` reaction raises
:exc:`~bot74.exceptions.ModuleRequestedQuit`, for the bot's run loop to
catch.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from typing_extensions import assert_never

from bot74 import reaction
from bot74.commands import AuthLevel
from bot74.exceptions import ModuleRequestedQuit
from bot74.handshake import Stage, UPDATE_MSG_PREFIX_STR
from bot74.irc import message as ircmsg
from bot74.irc.message import (
    Message,
    MessageError,
    MsgPrefix,
    MsgTarget,
    parse_privmsg,
    PrivMsg,
    RPL_MYINFO,
)
from bot74.irc.utils import wrap_msg
from bot74.tools.identifiers import Identifier


if TYPE_CHECKING:
    from bot74.commands import BotCommand
    from bot74.state import State


LOGGER = logging.getLogger(__name__)

ADDRESS_SEPARATORS = (':', ',')
"""Characters allowed right after the bot's nick to address it."""


# Output

def say(
    state: State,
    target: MsgTarget,
    addressee: str,
    text: str,
) -> list[Message]:
    """Build the ``PRIVMSG`` messages to say ``text`` to ``target``.

    :param state: the bot's state
    :param target: where to send the text
    :param addressee: nick to address the text to; empty for none
    :param text: the text to say
    :return: one message per line of wrapped text

    When there is an ``addressee``, the text is prefixed with it and with
    the configured ``core.addressee_suffix``, e.g. ``"alice: hello"``.
    """
    final_text = '%s%s%s' % (
        addressee,
        state.addressee_suffix if addressee else '',
        text,
    )
    LOGGER.info('Sending message to %r: %r', target.name, final_text)
    return [
        ircmsg.privmsg(target.name, line)
        for line in wrap_msg(state.prefix_len(), target.name, final_text)
    ]


def handle_reaction(
    state: State,
    msg: PrivMsg,
    bot_reaction: reaction.Reaction,
) -> list[Message]:
    """Turn ``bot_reaction`` to the message ``msg`` into messages to send.

    :param state: the bot's state
    :param msg: the message the bot reacts to
    :param bot_reaction: what the bot should do
    :return: the messages to send
    :raise MessageError: when a :class:`~bot74.reaction.RawMsg` isn't a
                         valid IRC line, or when text can't be sent
    :raise ModuleRequestedQuit: for a :class:`~bot74.reaction.Quit`

    A private message gets its answer privately, without addressee. A
    channel message gets its answer in the channel, where replies are
    addressed to the sender.
    """
    target = msg.metadata.target
    sender_nick = msg.metadata.prefix.nick

    if Identifier(target.name) == state.nick:
        if not sender_nick:
            raise MessageError(
                'Cannot answer a private message without a sender nick')
        reply_target, reply_addressee = MsgTarget(sender_nick), ''
    else:
        reply_target, reply_addressee = target, sender_nick or ''

    if isinstance(bot_reaction, reaction.NoReaction):
        return []
    elif isinstance(bot_reaction, reaction.Msg):
        return say(state, reply_target, '', bot_reaction.text)
    elif isinstance(bot_reaction, reaction.Msgs):
        return [
            message
            for text in bot_reaction.texts
            for message in say(state, reply_target, '', text)
        ]
    elif isinstance(bot_reaction, reaction.Reply):
        return say(state, reply_target, reply_addressee, bot_reaction.text)
    elif isinstance(bot_reaction, reaction.Replies):
        return [
            message
            for text in bot_reaction.texts
            for message in say(state, reply_target, reply_addressee, text)
        ]
    elif isinstance(bot_reaction, reaction.RawMsg):
        return [Message.parse(bot_reaction.line)]
    elif isinstance(bot_reaction, reaction.BotCmd):
        return handle_bot_command(state, msg, bot_reaction.command_line)
    elif isinstance(bot_reaction, reaction.Quit):
        raise ModuleRequestedQuit(bot_reaction.message)
    else:
        assert_never(bot_reaction)


# Commands

def handle_bot_command(
    state: State,
    msg: PrivMsg,
    command_line: str,
) -> list[Message]:
    """Run ``command_line`` on behalf of the sender of ``msg``.

    The command name is everything up to the first whitespace; the rest of
    the line, whitespace excluded, is given to the command as arguments.
    """
    parts = command_line.split(None, 1)
    command_name = parts[0] if parts else ''
    command_args = parts[1] if len(parts) > 1 else ''

    return handle_reaction(
        state,
        msg,
        bot_command_reaction(state, msg, command_name, command_args),
    )


def run_bot_command(
    state: State,
    msg: PrivMsg,
    command: BotCommand,
    command_args: str,
) -> reaction.BotCmdResult:
    """Check that the sender of ``msg`` may use ``command``, then run it.

    :return: the command's result, or the reason it didn't run

    A command that isn't :attr:`~bot74.commands.AuthLevel.ADMIN` can't make
    the bot quit: its :class:`~bot74.reaction.Quit` reaction is turned into
    a :class:`~bot74.reaction.BotErrMsg`.
    """
    metadata = msg.metadata

    try:
        if command.auth_lvl is AuthLevel.PUBLIC:
            authorized = True
        elif command.auth_lvl is AuthLevel.ADMIN:
            authorized = state.have_admin(metadata.prefix)
        else:
            assert_never(command.auth_lvl)
    except Exception as error:
        LOGGER.warning(
            'Unable to check authorization of %s for command "%s": %s',
            metadata.prefix, command.name, error)
        return reaction.LibErr(error)

    if not authorized:
        LOGGER.info(
            '%s is not authorized to use command "%s"',
            metadata.prefix, command.name)
        return reaction.Unauthorized()

    try:
        result = command.handler(state, metadata, command_args)
    except Exception as error:
        LOGGER.exception(
            'Error in command "%s" from module "%s"',
            command.name, command.provider.name)
        return reaction.LibErr(error)

    if (isinstance(result, reaction.Ok)
            and isinstance(result.reaction, reaction.Quit)
            and command.auth_lvl is not AuthLevel.ADMIN):
        quit_message = result.reaction.message
        LOGGER.warning(
            'Command "%s" from module "%s" tried to make the bot quit',
            command.name, command.provider.name)
        return reaction.BotErrMsg(
            'Only commands at authorization level %s may tell the bot to '
            'quit, but the command "%s" from module "%s", at authorization '
            'level %s, has told the bot to quit with quit message %s.'
            % (
                AuthLevel.ADMIN,
                command.name,
                command.provider.name,
                command.auth_lvl,
                'none' if quit_message is None else '"%s"' % quit_message,
            )
        )

    return result


def bot_command_reaction(
    state: State,
    msg: PrivMsg,
    command_name: str,
    command_args: str,
) -> reaction.Reaction:
    """Run the command ``command_name`` and get the bot's reaction.

    An unknown command, and every error result, become a
    :class:`~bot74.reaction.Reply` explaining the problem to the sender.
    """
    command = state.commands.get(command_name)
    if command is None:
        return reaction.Reply('Unknown command "%s"; apologies.' % command_name)

    name = command.name
    result = run_bot_command(state, msg, command, command_args)

    if isinstance(result, reaction.Ok):
        return result.reaction
    elif isinstance(result, reaction.Unauthorized):
        text = (
            'My apologies, but you do not appear to have sufficient '
            'authority to use my "%s" command.' % name)
    elif isinstance(result, reaction.SyntaxErr):
        text = 'Syntax: %s %s' % (name, command.usage)
    elif isinstance(result, reaction.ArgMissing):
        text = (
            'Syntax error: For command "%s", the argument "%s" is '
            'required, but it was not given.' % (name, result.name))
    elif isinstance(result, reaction.ArgMissing1To1):
        text = (
            'Syntax error: When command "%s" is used outside of a '
            'channel, the argument "%s" is required, but it was not '
            'given.' % (name, result.name))
    elif isinstance(result, reaction.LibErr):
        # the sender gets a reply whatever the strategy decides
        state.error_handler(result.error)
        text = 'Error: %s' % result.error
    elif isinstance(result, reaction.UserErrMsg):
        text = 'User error: %s' % result.text
    elif isinstance(result, reaction.BotErrMsg):
        text = 'Internal error: %s' % result.text
    else:
        assert_never(result)

    return reaction.Reply(text)


def quit(state: State, quit_message: Optional[str] = None) -> Optional[Message]:
    """Build the ``QUIT`` message to leave the server.

    :param state: the bot's state
    :param quit_message: farewell message; defaults to
                         :attr:`State.default_quit_message
                         <bot74.state.State.default_quit_message>`
    :return: the ``QUIT`` message, or ``None`` if it can't be built

    If the message can't be built (e.g. the farewell message contains a
    newline), the error is handed to the state's error handler.
    """
    if quit_message is None:
        quit_message = state.default_quit_message

    LOGGER.info('Quitting. Quit message: %r.', quit_message)

    try:
        return ircmsg.quit(quit_message)
    except MessageError as error:
        state.error_handler(error)
        LOGGER.error('Failed to construct quit message.')
        return None


# Inbound messages

def handle_msg(state: State, message: Message) -> list[Message]:
    """Handle an inbound ``message``, and get the messages to send back."""
    privmsg = parse_privmsg(message)
    if privmsg is not None:
        return handle_privmsg(state, privmsg)
    elif message.command == RPL_MYINFO:
        return handle_004(state)
    return []


def parse_msg_to_nick(state: State, msg: PrivMsg, nick: str) -> Optional[str]:
    """Get the part of ``msg`` addressed to ``nick``.

    :return: the text addressed to ``nick`` (possibly empty), or ``None``
             if ``msg`` isn't addressed to ``nick``

    A private message is addressed in full. In a channel, the text must
    start with ``nick``, followed by ``:``, ``,``, a space, or nothing::

        bot74: hello   -> 'hello'
        bot74, hello   -> 'hello'
        bot74          -> ''
        bot74hello     -> None

    """
    text = msg.text
    if Identifier(msg.metadata.target.name) == nick:
        return text.strip()

    if Identifier(text[:len(nick)]) != nick:
        return None

    rest = text[len(nick):]
    if not rest:
        return ''
    if rest[0] in ADDRESS_SEPARATORS or rest[0].isspace():
        return rest[1:].strip()
    return None


def handle_privmsg(state: State, msg: PrivMsg) -> list[Message]:
    """Handle a ``PRIVMSG``: the handshake echo, or a message to the bot."""
    LOGGER.debug('Handling PRIVMSG: %r', msg)

    metadata = msg.metadata
    nick = state.nick

    msg_for_bot = parse_msg_to_nick(state, msg, nick)
    if msg_for_bot is None:
        return []

    if not msg_for_bot:
        return handle_reaction(state, msg, reaction.Reply('Yes?'))
    elif (metadata.prefix.nick is not None
            and Identifier(metadata.prefix.nick) == nick
            and Identifier(metadata.target.name) == nick
            and msg.text == UPDATE_MSG_PREFIX_STR):
        return update_prefix_info(state, metadata.prefix)
    else:
        return handle_bot_command(state, msg, msg_for_bot)


# Handshake

def update_prefix_info(state: State, prefix: MsgPrefix) -> list[Message]:
    """Store ``prefix`` as the bot's own prefix."""
    LOGGER.debug(
        'Updating stored message prefix information from received %r',
        prefix)
    state.msg_prefix.update_from(prefix)
    state.handshake.advance(Stage.PREFIX_KNOWN)
    return []


def handle_004(state: State) -> list[Message]:
    """Handle the end of the server's welcome burst."""
    # The server has finished sending the protocol-mandated welcome messages.
    state.handshake.advance(Stage.WELCOME_RECEIVED)
    return send_msg_prefix_update_request(state)


def send_msg_prefix_update_request(state: State) -> list[Message]:
    """Build the message the bot sends itself to learn its prefix."""
    state.handshake.advance(Stage.PREFIX_UPDATE_REQUESTED)
    return [ircmsg.privmsg(state.nick, UPDATE_MSG_PREFIX_STR)]


def connection_sequence(state: State) -> list[Message]:
    """Build the messages registering the bot's identity: NICK, then USER."""
    messages = [
        ircmsg.nick(state.nick),
        ircmsg.user(state.user, state.name),
    ]
    state.handshake.advance(Stage.IDENTITY_SENT)
    return messages
