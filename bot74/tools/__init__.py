"""Useful miscellaneous tools and shortcuts for bot74 and its modules."""
# Licensed under the Eiffel Forum License 2.

from __future__ import annotations

import logging

from .identifiers import Identifier  # NOQA
from .locks import ReadWriteLock  # NOQA


def get_logger(module_name: str) -> logging.Logger:
    """Return a logger for a bot module.

    :param module_name: name of the module that needs a logger
    :return: a logger named ``bot74.externals.<module_name>``

    Command modules living outside the ``bot74`` package should use this
    logger, so their output goes through the bot's logging configuration::

        from bot74 import tools

        LOGGER = tools.get_logger('greeting')

    """
    return logging.getLogger('bot74.externals.%s' % module_name)
