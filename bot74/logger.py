"""Logging configuration for bot74.

bot74's own code uses :func:`logging.getLogger(__name__) <logging.getLogger>`,
and external bot modules use :func:`bot74.tools.get_logger`; all of them are
children of the ``bot74`` logger configured here. Two loggers don't
propagate to it:

* ``bot74.raw``: raw IRC lines, sent and received (see ``core.log_raw``)
* ``bot74.exceptions``: errors the bot couldn't handle, with their traceback
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from logging.config import dictConfig
import os
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from bot74.config import Config


def get_logging_config(settings: Config) -> dict:
    """Build the :func:`~logging.config.dictConfig` configuration for ``settings``.

    :param settings: the bot's configuration
    :return: a logging configuration dictionary
    """
    log_directory = settings.core.logdir
    base_level = settings.core.logging_level or 'WARNING'
    base_format = settings.core.logging_format
    base_datefmt = settings.core.logging_datefmt

    return {
        'version': 1,
        'formatters': {
            'bot74': {
                'format': base_format,
                'datefmt': base_datefmt,
            },
            'raw': {
                'format': '%(asctime)s %(message)s',
                'datefmt': base_datefmt,
            },
        },
        'loggers': {
            # all purpose, bot74 root logger
            'bot74': {
                'level': base_level,
                'handlers': ['console', 'logfile', 'errorfile'],
            },
            # raw IRC log
            'bot74.raw': {
                'level': 'DEBUG',
                'propagate': False,
                'handlers': ['raw'],
            },
            # uncaught exceptions
            'bot74.exceptions': {
                'level': 'INFO',
                'propagate': False,
                'handlers': ['exceptionfile'],
            },
        },
        'handlers': {
            # output on stderr
            'console': {
                'level': 'DEBUG',
                'class': 'logging.StreamHandler',
                'formatter': 'bot74',
            },
            # generic purpose log file
            'logfile': {
                'level': 'DEBUG',
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': os.path.join(
                    log_directory, settings.basename + '.bot74.log'),
                'when': 'midnight',
                'formatter': 'bot74',
            },
            # caught error log file
            'errorfile': {
                'level': 'ERROR',
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': os.path.join(
                    log_directory, settings.basename + '.error.log'),
                'when': 'midnight',
                'formatter': 'bot74',
            },
            # uncaught error file
            'exceptionfile': {
                'level': 'ERROR',
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': os.path.join(
                    log_directory, settings.basename + '.exceptions.log'),
                'when': 'midnight',
                'formatter': 'bot74',
            },
            # raw IRC log file
            'raw': {
                'level': 'DEBUG',
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': os.path.join(
                    log_directory, settings.basename + '.raw.log'),
                'when': 'midnight',
                'formatter': 'raw',
            },
        },
    }


def setup_logging(settings: Config) -> None:
    """Set up logging based on the bot's configuration ``settings``.

    :param settings: configuration settings object
    """
    dictConfig(get_logging_config(settings))
