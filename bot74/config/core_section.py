"""The ``[core]`` section of bot74's configuration."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from bot74.config.types import (
    BooleanAttribute,
    ChoiceAttribute,
    FilenameAttribute,
    ListAttribute,
    StaticSection,
    ValidatedAttribute,
)
from bot74.tools import Identifier


LOGGING_LEVELS = ['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG']


def _parse_port(value):
    port = int(value)
    if not 0 < port < 65536:
        raise ValueError('Port must be between 1 and 65535, not %d' % port)
    return port


class CoreSection(StaticSection):
    """The config section used for configuring the bot itself.

    Every option has a default value, so a config file with an empty
    ``[core]`` section is enough to start the bot, if not very useful.
    """

    addressee_suffix = ValidatedAttribute('addressee_suffix', default=': ')
    """Text between a nick and a reply addressed to it.

    :default: ``": "``

    With the default value, a reply to ``alice`` in a channel reads
    ``alice: <reply>``. The config file parser strips trailing spaces, so a
    value ending with a space must be set through the
    ``BOT74_CORE_ADDRESSEE_SUFFIX`` environment variable.
    """

    admins = ListAttribute('admins')
    """The list of masks of people who can administer the bot.

    Each mask is a ``nick!user@host`` hostmask, with ``*`` and ``?``
    wildcards. A mask with only a nick matches that nick from anywhere.

    Example:

    .. code-block:: ini

        admins =
            alice!*@example.com
            bob

    """

    bind_host = ValidatedAttribute('bind_host')
    """Bind the connection to a specific IP.

    :default: ``0.0.0.0`` (all interfaces)
    """

    homedir = ValidatedAttribute('homedir')
    """The directory in which various files are stored at runtime.

    By default, this is the same directory as the config file.
    """

    host = ValidatedAttribute('host', default='irc.libera.chat')
    """The IRC server to connect to.

    :default: ``irc.libera.chat``
    """

    log_raw = BooleanAttribute('log_raw', default=False)
    """Whether a log of raw lines as sent and received should be kept.

    :default: ``no``
    """

    logdir = FilenameAttribute('logdir', directory=True, default='logs')
    """Directory in which to place logs.

    :default: ``logs``

    If the given value is not an absolute path, it will be interpreted relative
    to the bot's home directory.
    """

    logging_datefmt = ValidatedAttribute('logging_datefmt')
    """The format string to use for timestamps in logs.

    If not set, the ``datefmt`` argument is not provided, and :mod:`logging`
    will use the Python default.
    """

    logging_format = ValidatedAttribute(
        'logging_format',
        default='[%(asctime)s] %(name)-20s %(levelname)-8s - %(message)s')
    """The logging format string to use for logs.

    :default: ``[%(asctime)s] %(name)-20s %(levelname)-8s - %(message)s``
    """

    logging_level = ChoiceAttribute('logging_level', LOGGING_LEVELS, 'INFO')
    """The lowest severity of logs to display.

    :default: ``INFO``
    """

    modules = ListAttribute('modules')
    """Dotted import paths of the bot modules to load.

    Example:

    .. code-block:: ini

        modules =
            mybot.greetings
            mybot.admin

    Each module must expose a ``bot_module`` attribute; see
    :mod:`bot74.loader`.
    """

    name = ValidatedAttribute('name', default='bot74')
    """The "real name" of your bot for ``WHOIS`` responses.

    :default: ``bot74``
    """

    nick = ValidatedAttribute('nick', Identifier, default=Identifier('bot74'))
    """The nickname for the bot.

    :default: ``bot74``
    """

    port = ValidatedAttribute('port', _parse_port, default=6667)
    """The port to connect on.

    :default: ``6667``
    """

    quit_message = ValidatedAttribute('quit_message')
    """Farewell message sent when a module makes the bot quit without one.

    :default: ``bot74 v<version>``
    """

    timeout = ValidatedAttribute('timeout', int, default=120)
    """The number of seconds acceptable since the last message before timing out.

    :default: ``120``
    """

    timeout_ping_interval = ValidatedAttribute('timeout_ping_interval',
                                               int,
                                               default=0)
    """The number of seconds before sending a PING command to the server.

    :default: (auto)

    The default value of 0 means 45% of the :attr:`timeout`.
    """

    use_ssl = BooleanAttribute('use_ssl', default=False)
    """Whether to use a SSL/TLS encrypted connection.

    :default: ``False``
    """

    user = ValidatedAttribute('user', default='bot74')
    """The "user" for your bot (the part before the ``@`` in the hostname).

    :default: ``bot74``
    """

    verify_ssl = BooleanAttribute('verify_ssl', default=True)
    """Whether to require a trusted certificate for encrypted connections.

    :default: ``True``
    """
