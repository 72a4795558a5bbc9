"""Shared tools for bot74's command line."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import inspect
import logging
import os

from bot74 import config

# Allow clean import *
__all__ = [
    'enumerate_configs',
    'find_config',
    'add_common_arguments',
    'load_settings',
]

LOGGER = logging.getLogger(__name__)


def enumerate_configs(config_dir, extension='.cfg'):
    """List configuration files from ``config_dir`` with ``extension``

    :param str config_dir: path to the configuration directory
    :param str extension: configuration file's extension (default to ``.cfg``)
    :return: a list of configuration filenames found in ``config_dir`` with
             the correct ``extension``
    :rtype: list

    Example::

        >>> from bot74 import config
        >>> from bot74.cli import utils
        >>> os.listdir(config.DEFAULT_HOMEDIR)
        ['default.cfg', 'extra.ini', 'libera.cfg', 'README']
        >>> list(utils.enumerate_configs(config.DEFAULT_HOMEDIR))
        ['default.cfg', 'libera.cfg']

    """
    if not os.path.isdir(config_dir):
        return

    for item in os.listdir(config_dir):
        if item.endswith(extension):
            yield item


def find_config(config_dir, name, extension='.cfg'):
    """Build the absolute path for the given configuration file ``name``

    :param str config_dir: path to the configuration directory
    :param str name: configuration file ``name``
    :param str extension: configuration file's extension (default to ``.cfg``)
    :return: the path of the configuration file, either in the current
             directory or from the ``config_dir`` directory

    This function tries different locations:

    * the current directory
    * the ``config_dir`` directory with the ``extension`` suffix
    * the ``config_dir`` directory without a suffix

    """
    if os.path.isfile(name):
        return os.path.abspath(name)
    name_ext = name + extension
    for filename in enumerate_configs(config_dir, extension):
        if name_ext == filename:
            return os.path.join(config_dir, name_ext)

    return os.path.join(config_dir, name)


def add_common_arguments(parser):
    """Add common and configuration-related arguments to a ``parser``.

    :param parser: Argument parser (or subparser)
    :type parser: argparse.ArgumentParser

    It adds the following arguments:

    * ``-c``/``--config``: the name of the bot74 config, or its absolute path
    * ``--config-dir``: the directory to scan for config files

    Then, when the parser parses the command line arguments, it will expose
    ``config`` and ``configdir`` options that :func:`load_settings` uses to
    find and load bot74's settings.
    """
    parser.add_argument(
        '-c', '--config',
        default=None,
        metavar='filename',
        dest='config',
        help=inspect.cleandoc("""
            Use a specific configuration file.
            A config name can be given and the configuration file will be
            found in bot74's homedir (defaults to ``~/.bot74/default.cfg``).
            An absolute pathname can be provided instead to use an
            arbitrary location.
        """))
    parser.add_argument(
        '--config-dir',
        default=config.DEFAULT_HOMEDIR,
        dest='configdir',
        help='Look for configuration files in this directory.')


def load_settings(options):
    """Load bot74's settings using the command line's ``options``.

    :param options: parsed arguments
    :return: bot74 configuration
    :rtype: :class:`bot74.config.Config`
    :raise bot74.config.ConfigurationNotFound: raised when configuration file
                                               is not found
    :raise ValueError: raised when a configuration value is invalid

    This function loads bot74's settings from one of these sources:

    * value of ``options.config``, if given,
    * ``BOT74_CONFIG`` environment variable, if no option is given,
    * otherwise the ``default`` configuration is loaded.
    """
    # Default if no options.config or no env var or if they are empty
    name = 'default'
    if options.config:
        name = options.config
    elif 'BOT74_CONFIG' in os.environ:
        name = os.environ['BOT74_CONFIG'] or name  # use default if empty

    filename = find_config(options.configdir, name)

    if not os.path.isfile(filename):
        raise config.ConfigurationNotFound(filename=filename)

    return config.Config(filename)
