"""Load bot modules by their dotted import path.

A bot module is any importable Python module with a ``bot_module``
attribute, which is either a :class:`~bot74.commands.Module` or a callable
taking no argument and returning one::

    # mybot/greetings.py
    from bot74 import commands, reaction

    bot_module = commands.Module('greetings')

    @bot_module.command('hello')
    def hello(state, metadata, args):
        return reaction.Ok(reaction.Reply('Hello!'))

With ``modules = mybot.greetings`` in the ``[core]`` section of the
configuration, the bot loads it at startup.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import importlib
import logging
from typing import Iterable

from bot74.commands import Module
from bot74.exceptions import ModuleLoadError


LOGGER = logging.getLogger(__name__)

MODULE_ATTRIBUTE = 'bot_module'


def load_module(name: str) -> Module:
    """Import the Python module ``name`` and get its bot module.

    :param name: dotted import path of the Python module
    :raise ModuleLoadError: when the module can't be imported, or doesn't
                            provide a :class:`~bot74.commands.Module`

    Any error raised while importing the module, or while calling its
    ``bot_module`` factory, is logged with its traceback and turned into a
    :exc:`~bot74.exceptions.ModuleLoadError`.
    """
    try:
        python_module = importlib.import_module(name)
    except ImportError as error:
        raise ModuleLoadError(name, str(error)) from error
    except Exception as error:
        LOGGER.exception('Error importing module %s: %s', name, error)
        raise ModuleLoadError(
            name, '%s: %s' % (type(error).__name__, error)) from error

    provided = getattr(python_module, MODULE_ATTRIBUTE, None)
    if provided is None:
        raise ModuleLoadError(
            name, 'no "%s" attribute' % MODULE_ATTRIBUTE)

    if not isinstance(provided, Module) and callable(provided):
        try:
            provided = provided()
        except Exception as error:
            LOGGER.exception('Error setting up module %s: %s', name, error)
            raise ModuleLoadError(
                name, '%s: %s' % (type(error).__name__, error)) from error

    if not isinstance(provided, Module):
        raise ModuleLoadError(
            name, '"%s" is not a bot module: %r' % (MODULE_ATTRIBUTE, provided))

    LOGGER.info(
        'Loaded module "%s" from %s (%d commands)',
        provided.name, name, len(provided.commands))
    return provided


def load_modules(names: Iterable[str]) -> list[Module]:
    """Load every bot module in ``names``, in order.

    :raise ModuleLoadError: as soon as one of them fails to load
    """
    return [load_module(name) for name in names]
