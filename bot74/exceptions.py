"""bot74's exceptions."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations


class Bot74Error(Exception):
    """Base class for bot74 related exceptions."""


class ModuleRequestedQuit(Bot74Error):
    """Raised when an authorized command asks the bot to quit.

    :param message: optional farewell message for the ``QUIT`` line

    This is control flow, not an error: it must only be caught by the bot's
    run loop, which answers with a ``QUIT`` line before stopping.
    """
    def __init__(self, message: str | None = None):
        self.message = message
        super().__init__(
            'Quit requested with quit message %r' % (message,))


class AdminCheckError(Bot74Error):
    """Raised when the bot cannot tell whether a sender is an admin."""


class DuplicateCommandError(Bot74Error):
    """Raised when two commands are registered under the same name."""
    def __init__(self, name: str, first: str, second: str):
        self.command_name = name
        self.first_module = first
        self.second_module = second
        super().__init__(
            'Command "%s" is provided by both module "%s" and module "%s"'
            % (name, first, second))


class ModuleLoadError(Bot74Error):
    """Raised when a bot module cannot be imported or is malformed."""
    def __init__(self, name: str, reason: str):
        self.module_name = name
        super().__init__('Unable to load module "%s": %s' % (name, reason))
