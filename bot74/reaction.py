"""Results of handling a message, and of running a bot command.

A command handler never talks to the IRC connection itself: it returns a
:data:`BotCmdResult`, which is either a :class:`Ok` wrapping a
:data:`Reaction` (what the bot should do), or one of the error variants
(what went wrong). The core turns the result into IRC messages.

Both are closed sets of variants, each variant being a small frozen
:func:`~dataclasses.dataclass`; code consuming them checks every variant with
:func:`isinstance` and ends with
:func:`~typing_extensions.assert_never`::

    from bot74 import reaction

    def greet(state, metadata, args):
        if not args:
            return reaction.ArgMissing('name')
        return reaction.Ok(reaction.Reply('Hello, %s!' % args))

"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union


__all__ = [
    # reactions
    'BotCmd',
    'Msg',
    'Msgs',
    'NoReaction',
    'Quit',
    'RawMsg',
    'Reaction',
    'Replies',
    'Reply',
    # results
    'ArgMissing',
    'ArgMissing1To1',
    'BotCmdResult',
    'BotErrMsg',
    'LibErr',
    'Ok',
    'SyntaxErr',
    'Unauthorized',
    'UserErrMsg',
]


# Reactions

@dataclass(frozen=True)
class NoReaction:
    """Do nothing."""


@dataclass(frozen=True)
class Msg:
    """Say ``text`` to the reply target, without addressing the sender."""
    text: str


@dataclass(frozen=True)
class Msgs:
    """Say each of ``texts`` to the reply target."""
    texts: Sequence[str]


@dataclass(frozen=True)
class Reply:
    """Say ``text`` to the reply target, addressed to the sender."""
    text: str


@dataclass(frozen=True)
class Replies:
    """Say each of ``texts`` to the reply target, addressed to the sender."""
    texts: Sequence[str]


@dataclass(frozen=True)
class RawMsg:
    """Send ``line`` as a literal IRC line."""
    line: str


@dataclass(frozen=True)
class BotCmd:
    """Run ``command_line`` as if the sender had sent it to the bot."""
    command_line: str


@dataclass(frozen=True)
class Quit:
    """Make the bot quit, with an optional farewell ``message``.

    Only commands at the :attr:`~bot74.commands.AuthLevel.ADMIN` level are
    allowed to make the bot quit.
    """
    message: Optional[str] = None


Reaction = Union[
    NoReaction,
    Msg,
    Msgs,
    Reply,
    Replies,
    RawMsg,
    BotCmd,
    Quit,
]


# Command results

@dataclass(frozen=True)
class Ok:
    """The command ran; ``reaction`` describes what to do next."""
    reaction: Reaction


@dataclass(frozen=True)
class Unauthorized:
    """The sender isn't allowed to use the command."""


@dataclass(frozen=True)
class SyntaxErr:
    """The arguments don't match the command's usage."""


@dataclass(frozen=True)
class ArgMissing:
    """The required argument ``name`` wasn't given."""
    name: str


@dataclass(frozen=True)
class ArgMissing1To1:
    """The argument ``name`` is required outside of a channel."""
    name: str


@dataclass(frozen=True)
class LibErr:
    """An error was raised while running the command."""
    error: Exception


@dataclass(frozen=True)
class UserErrMsg:
    """The sender misused the command; ``text`` explains how."""
    text: str


@dataclass(frozen=True)
class BotErrMsg:
    """The command itself misbehaved; ``text`` explains how."""
    text: str


BotCmdResult = Union[
    Ok,
    Unauthorized,
    SyntaxErr,
    ArgMissing,
    ArgMissing1To1,
    LibErr,
    UserErrMsg,
    BotErrMsg,
]
