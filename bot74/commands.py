"""Bot commands: descriptors, modules providing them, and their registry.

A bot module is a :class:`Module` holding :class:`BotCommand` descriptors.
The easiest way to build one is to decorate plain functions::

    from bot74 import commands, reaction

    bot_module = commands.Module('greeting')

    @bot_module.command('hello', usage='[<name>]', help_msg='Say hello.')
    def hello(state, metadata, args):
        return reaction.Ok(reaction.Reply('Hello, %s!' % (args or 'you')))

    @bot_module.command('quit', auth_lvl=commands.AuthLevel.ADMIN)
    def quit_(state, metadata, args):
        return reaction.Ok(reaction.Quit(args or None))

At startup, all modules are merged into one :class:`CommandRegistry`, which
the bot uses to look commands up by name.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from collections.abc import Mapping
import enum
import logging
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, TYPE_CHECKING

from bot74.exceptions import DuplicateCommandError


if TYPE_CHECKING:
    from bot74.irc.message import MsgMetadata
    from bot74.reaction import BotCmdResult
    from bot74.state import State


__all__ = [
    'AuthLevel',
    'BotCommand',
    'CommandRegistry',
    'Handler',
    'Module',
]

LOGGER = logging.getLogger(__name__)

Handler = Callable[['State', 'MsgMetadata', str], 'BotCmdResult']
"""A command handler: ``(state, metadata, args) -> BotCmdResult``."""


class AuthLevel(enum.Enum):
    """Authorization level required to use a command."""
    PUBLIC = 'Public'
    """Anyone may use the command."""
    ADMIN = 'Admin'
    """Only the bot's admins (see ``core.admins``) may use the command."""

    def __str__(self) -> str:
        return self.value


class BotCommand(NamedTuple):
    """Immutable description of a bot command."""
    name: str
    """Name of the command, as typed by users; unique within a registry."""
    provider: Module
    """Module that provides this command."""
    auth_lvl: AuthLevel
    """Authorization level required to use the command."""
    handler: Handler
    """Callable that runs the command."""
    usage: str = ''
    """Arguments of the command, shown on syntax errors."""
    help_msg: str = ''
    """Short description of what the command does."""


class Module:
    """A named set of commands.

    :param name: name of the module, used in diagnostics
    :param commands: optional initial commands
    """
    def __init__(self, name: str, commands: Iterable[BotCommand] = ()):
        self.name = name
        self.commands: list[BotCommand] = list(commands)

    def __repr__(self) -> str:
        return '<%s %s (%d commands)>' % (
            self.__class__.__name__, self.name, len(self.commands))

    def command(
        self,
        name: str,
        auth_lvl: AuthLevel = AuthLevel.PUBLIC,
        usage: str = '',
        help_msg: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorate a handler to add it to this module as command ``name``.

        :param name: name of the command
        :param auth_lvl: required authorization level (defaults to public)
        :param usage: arguments of the command, e.g. ``'<nick> [<reason>]'``
        :param help_msg: description of the command; defaults to the first
                         line of the handler's docstring

        The handler is returned unchanged, so it can still be called
        directly (in tests, for example).
        """
        def add_command(handler: Handler) -> Handler:
            help_text = help_msg
            if help_text is None:
                doc = (handler.__doc__ or '').strip()
                help_text = doc.splitlines()[0] if doc else ''
            self.commands.append(BotCommand(
                name=name,
                provider=self,
                auth_lvl=auth_lvl,
                handler=handler,
                usage=usage,
                help_msg=help_text,
            ))
            return handler
        return add_command


class CommandRegistry(Mapping):
    """Lookup table of bot commands, keyed by name.

    Command names are matched exactly, case included::

        >>> registry = CommandRegistry.from_modules([bot_module])
        >>> registry.get('hello')
        BotCommand(name='hello', ...)
        >>> registry.get('HELLO') is None
        True

    """
    def __init__(self) -> None:
        self._commands: dict[str, BotCommand] = {}

    @classmethod
    def from_modules(cls, modules: Iterable[Module]) -> CommandRegistry:
        """Build a registry with every command of every module in ``modules``.

        :raise DuplicateCommandError: when two commands share a name
        """
        registry = cls()
        for module in modules:
            for command in module.commands:
                registry.register(command)
            LOGGER.debug(
                'Registered %d commands from module "%s"',
                len(module.commands), module.name)
        return registry

    def register(self, command: BotCommand) -> None:
        """Add ``command`` to the registry.

        :raise DuplicateCommandError: when a command with the same name is
                                      already registered
        """
        existing = self._commands.get(command.name)
        if existing is not None:
            raise DuplicateCommandError(
                command.name, existing.provider.name, command.provider.name)
        self._commands[command.name] = command

    def __getitem__(self, name: str) -> BotCommand:
        return self._commands[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return '<%s %s>' % (
            self.__class__.__name__, ', '.join(sorted(self._commands)))
