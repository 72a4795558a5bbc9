"""bot74's configuration module.

The :class:`~bot74.config.Config` object provides an interface to access
bot74's configuration file. It exposes the configuration's sections through
its attributes as objects, which in turn expose their directives through
*their* attributes.

For example, this is how to access ``core.nick`` on a :class:`Config` object::

    >>> from bot74 import config
    >>> settings = config.Config('/bot74/config.cfg')
    >>> settings.core.nick
    'bot74'

The configuration file being:

.. code-block:: ini

    [core]
    nick = bot74
    host = irc.libera.chat
    use_ssl = true
    port = 6697
    admins =
        alice!*@example.com

The ``[core]`` section itself is represented by the
:class:`~bot74.config.core_section.CoreSection` class, which is a subclass of
:class:`~bot74.config.types.StaticSection`. It is automatically added when
the :class:`Config` object is instantiated; it uses
:meth:`Config.define_section` for that purpose.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import configparser
import os

from . import core_section, types


__all__ = [
    'core_section',
    'types',
    'DEFAULT_HOMEDIR',
    'ConfigurationError',
    'ConfigurationNotFound',
    'Config',
]

DEFAULT_HOMEDIR = os.path.join(os.path.expanduser('~'), '.bot74')


class ConfigurationError(Exception):
    """Exception type for configuration errors.

    :param str value: a description of the error that has occurred
    """
    def __init__(self, value):
        self.value = value

    def __str__(self):
        return 'ConfigurationError: %s' % self.value


class ConfigurationNotFound(ConfigurationError):
    """Exception type for use when the configuration file cannot be found.

    :param str filename: file path that could not be found
    """
    def __init__(self, filename):
        super().__init__(None)
        self.filename = filename
        """Path to the configuration file that could not be found."""

    def __str__(self):
        return 'Unable to find the configuration file %s' % self.filename


class Config:
    """The bot's configuration.

    :param str filename: the configuration file to load and use to populate
                         this ``Config`` instance
    :param bool validate: if ``True``, validate values in the ``[core]``
                          section when it is loaded (optional; ``True`` by
                          default)
    :raise ValueError: when a ``[core]`` value is invalid

    The configuration object will load sections from the file at ``filename``
    during initialization. Calling :meth:`save` writes any runtime changes to
    the loaded settings back to the same file.

    Only the ``[core]`` section (see :class:`~.core_section.CoreSection`) is
    added and made available by default; other sections must be defined by
    the code that needs them, using :meth:`define_section`.
    """
    def __init__(self, filename, validate=True):
        self.filename = filename
        """The config object's associated file."""
        basename, _ = os.path.splitext(os.path.basename(filename))
        self.basename = basename
        """The config's base filename, i.e. the filename without the extension.

        If the filename is ``libera.config.cfg``, then the ``basename`` will
        be ``libera.config``.
        """
        self.parser = configparser.RawConfigParser(allow_no_value=True)
        """The configuration parser object that does the heavy lifting.

        .. seealso::

            Python's built-in :mod:`configparser` module and its
            :class:`~configparser.RawConfigParser` class.

        """
        self.parser.read(self.filename, encoding='utf-8')
        self.define_section('core', core_section.CoreSection,
                            validate=validate)
        self.get = self.parser.get
        """Shortcut to :meth:`parser.get <configparser.ConfigParser.get>`."""

    @property
    def homedir(self):
        """The config file's home directory.

        If the :attr:`core.homedir <.core_section.CoreSection.homedir>` setting
        is available, that value is used. Otherwise, the default ``homedir`` is
        the directory portion of the :class:`Config`'s :attr:`filename`.
        """
        configured = None
        if self.parser.has_option('core', 'homedir'):
            configured = self.parser.get('core', 'homedir')
        if configured:
            return configured
        else:
            return os.path.dirname(os.path.abspath(self.filename))

    def save(self):
        """Write all changes to the config file.

        .. note::

            Saving the config file will remove any comments that might have
            existed, as Python's :mod:`configparser` ignores them when parsing.

        """
        with open(self.filename, 'w', encoding='utf-8') as cfgfile:
            self.parser.write(cfgfile)

    def add_section(self, name):
        """Add a new, empty section to the config file.

        :param str name: name of the new section
        :return: ``None`` if successful; ``False`` if a section named ``name``
                 already exists
        """
        try:
            return self.parser.add_section(name)
        except configparser.DuplicateSectionError:
            return False

    def define_section(self, name, cls_, validate=True):
        """Define the available settings in a section.

        :param str name: name of the new section
        :param cls\\_: :term:`class` defining the settings within the section
        :type cls\\_: subclass of :class:`~.types.StaticSection`
        :param bool validate: whether to validate the section's values
                              (optional; defaults to ``True``)
        :raise ValueError: if the section ``name`` has been defined already with
                           a different ``cls_``
        """
        if not issubclass(cls_, types.StaticSection):
            raise ValueError("Class must be a subclass of StaticSection.")
        current = self.__dict__.get(name)
        if current is not None and not isinstance(current, cls_):
            raise ValueError(
                "Can not re-define class for section from {} to {}.".format(
                    current.__class__, cls_)
            )
        setattr(self, name, cls_(self, name, validate=validate))

    def __getitem__(self, name):
        return getattr(self, name)

    def __contains__(self, name):
        return name in self.parser.sections()
