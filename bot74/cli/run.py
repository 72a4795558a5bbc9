"""bot74 run script: load the configuration and the modules, then run the bot."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import argparse
import logging
import sys

from bot74 import __version__, bot, config, loader, logger
from bot74.exceptions import DuplicateCommandError, ModuleLoadError
from . import utils


LOGGER = logging.getLogger(__name__)

ERR_CODE = 1
"""Error code: program exited with an error"""
ERR_CODE_NO_RESTART = 2
"""Error code: program exited with an error and should not be restarted

This error code is used to prevent systemd from restarting the bot when it
encounters such an error case, like an invalid configuration.
"""


def build_parser():
    """Build an ``argparse.ArgumentParser`` for the bot"""
    parser = argparse.ArgumentParser(description='bot74 IRC Bot',
                                     usage='%(prog)s [options]')
    utils.add_common_arguments(parser)
    parser.add_argument(
        '-V', '--version',
        action='store_true',
        dest='version',
        help='Show version number and exit')
    return parser


def print_version():
    """Print Python version and bot74 version on stdout."""
    py_ver = '%s.%s.%s' % (sys.version_info.major,
                           sys.version_info.minor,
                           sys.version_info.micro)
    print('bot74 %s (running on Python %s)' % (__version__, py_ver))


def run(settings):
    """Load the modules listed in ``settings`` and run the bot until it quits.

    :param settings: the bot's configuration
    :type settings: :class:`bot74.config.Config`
    :return: the program's exit code
    """
    print_version()
    print('\nLoaded config file: {}'.format(settings.filename))

    try:
        modules = loader.load_modules(settings.core.modules)
        p = bot.Bot(settings, modules)
    except (ModuleLoadError, DuplicateCommandError) as error:
        LOGGER.error('Unable to start the bot: %s', error)
        return ERR_CODE

    try:
        p.run(settings.core.host, int(settings.core.port))
    except KeyboardInterrupt:
        return ERR_CODE
    except Exception:
        err_log = logging.getLogger('bot74.exceptions')
        err_log.exception('Critical exception in core')
        err_log.error('----------------------------------------')
        return ERR_CODE

    return 0


def main(argv=None):
    """bot74 run script entry point"""
    try:
        parser = build_parser()
        opts = parser.parse_args(argv)

        if opts.version:
            print_version()
            return 0

        try:
            settings = utils.load_settings(opts)
        except config.ConfigurationError as error:
            print(error, file=sys.stderr)
            return ERR_CODE_NO_RESTART
        except ValueError as error:
            print('Invalid configuration: %s' % error, file=sys.stderr)
            return ERR_CODE_NO_RESTART

        logger.setup_logging(settings)
        return run(settings)
    except KeyboardInterrupt:
        print("\n\nInterrupted")
        return ERR_CODE


if __name__ == '__main__':
    sys.exit(main())
