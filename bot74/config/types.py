"""Types for creating section definitions.

A section definition consists of a subclass of :class:`StaticSection`, on which
any number of subclasses of :class:`BaseValidated` (a few common ones of which
are available in this module) are assigned as attributes. These descriptors
define how to read values from, and write values to, the config file.

As an example, if one wanted to define the ``[spam]`` section as having an
``eggs`` option, which contains a list of values, they could do this:

    >>> class SpamSection(StaticSection):
    ...     eggs = ListAttribute('eggs')
    ...
    >>> config.define_section('spam', SpamSection)
    >>> print(config.spam.eggs)
    []
    >>> config.spam.eggs = ['goose', 'turkey', 'duck', 'chicken', 'quail']
    >>> print(config.spam.eggs)
    ['goose', 'turkey', 'duck', 'chicken', 'quail']
    >>> config.spam.eggs = 'herring'
    Traceback (most recent call last):
        ...
    ValueError: ListAttribute value must be a list.

Every option can be overridden by an environment variable named
``BOT74_<SECTION>_<OPTION>``, e.g. ``BOT74_CORE_NICK`` for ``core.nick``.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import os.path
import re


__all__ = [
    'NO_DEFAULT',
    'BaseValidated',
    'BooleanAttribute',
    'ChoiceAttribute',
    'FilenameAttribute',
    'ListAttribute',
    'StaticSection',
    'ValidatedAttribute',
]


class NO_DEFAULT:
    """A special value to indicate that there should be no default."""


class StaticSection:
    """A configuration section with parsed and validated settings.

    This class is intended to be subclassed and customized with added
    attributes containing :class:`BaseValidated`-based objects.
    """
    def __init__(self, config, section_name, validate=True):
        if not config.parser.has_section(section_name):
            config.parser.add_section(section_name)
        self._parent = config
        self._parser = config.parser
        self._section_name = section_name
        for value in dir(self):
            if value.startswith('_'):
                continue
            try:
                getattr(self, value)
            except ValueError as e:
                raise ValueError(
                    'Invalid value for {}.{}: {}'.format(section_name, value,
                                                         str(e))
                )
            except AttributeError:
                if validate:
                    raise ValueError(
                        'Missing required value for {}.{}'.format(section_name,
                                                                  value)
                    )


class BaseValidated:
    """The base type for a setting descriptor in a :class:`StaticSection`.

    :param str name: the attribute name to use in the config file
    :param default: the value to be returned if the setting has no value
                    (optional; defaults to :obj:`None`)

    ``default`` also can be set to :const:`bot74.config.types.NO_DEFAULT`, if
    the value *must* be configured by the user (i.e. there is no suitable
    default value). Trying to read an empty ``NO_DEFAULT`` value will raise
    :class:`AttributeError`.
    """
    def __init__(self, name, default=None):
        self.name = name
        self.default = default

    def serialize(self, value, *args, **kwargs):
        """Take some object, and return the string to be saved to the file.

        Must be implemented in subclasses.
        """
        raise NotImplementedError("Serialize method must be implemented in subclass")

    def parse(self, value, *args, **kwargs):
        """Take a string from the file, and return the appropriate object.

        Must be implemented in subclasses."""
        raise NotImplementedError("Parse method must be implemented in subclass")

    def _raw_value(self, instance):
        env_name = 'BOT74_%s_%s' % (
            instance._section_name.upper(), self.name.upper())
        if env_name in os.environ:
            return os.environ.get(env_name)
        elif instance._parser.has_option(instance._section_name, self.name):
            return instance._parser.get(instance._section_name, self.name)
        return None

    def __get__(self, instance, owner=None):
        if instance is None:
            # getting from the section class itself: return the descriptor
            return self

        value = self._raw_value(instance)
        if value is None:
            if self.default is not NO_DEFAULT:
                return self.default
            raise AttributeError(
                "Missing required value for {}.{}".format(
                    instance._section_name, self.name
                )
            )
        return self.parse(value)

    def __set__(self, instance, value):
        if value is None:
            if self.default == NO_DEFAULT:
                raise ValueError('Cannot unset an option with a required value.')
            instance._parser.remove_option(instance._section_name, self.name)
            return
        value = self.serialize(value)
        instance._parser.set(instance._section_name, self.name, value)


def _parse_boolean(value):
    if value is True or value == 1:
        return value
    if isinstance(value, str):
        return value.lower() in ['1', 'yes', 'y', 'true', 'on']
    return bool(value)


def _serialize_boolean(value):
    return 'true' if _parse_boolean(value) else 'false'


class ValidatedAttribute(BaseValidated):
    """A descriptor for settings in a :class:`StaticSection`.

    :param str name: the attribute name to use in the config file
    :param parse: a function to be used to read the string and create the
                  appropriate object (optional; the string value will be
                  returned as-is if not set)
    :type parse: :term:`function`
    :param serialize: a function that, given an object, should return a string
                      that can be written to the config file safely (optional;
                      defaults to :class:`str`)
    :type serialize: :term:`function`
    """
    def __init__(self, name, parse=None, serialize=None, default=None):
        super().__init__(name, default=default)
        self.parse = parse or self.parse
        self.serialize = serialize or self.serialize

    def serialize(self, value):
        """Return the ``value`` as a Unicode string."""
        return str(value)

    def parse(self, value):
        """No-op: simply returns the given ``value``, unchanged."""
        return value


class BooleanAttribute(BaseValidated):
    """A descriptor for Boolean settings in a :class:`StaticSection`.

    :param str name: the attribute name to use in the config file
    :param bool default: the default value to use if this setting is not
                         present in the config file

    Values ``1``, ``yes``, ``y``, ``true``, and ``on`` (case-insensitive) are
    true; anything else is false.
    """
    def __init__(self, name, default=False):
        super().__init__(name, default=default)

    def parse(self, value):
        """Parse a limited set of values/objects into Boolean representations."""
        return _parse_boolean(value)

    def serialize(self, value):
        """Convert a Boolean value to a string for saving to the config file."""
        return _serialize_boolean(value)


class ListAttribute(BaseValidated):
    """A config attribute containing a list of string values.

    :param str name: the attribute name to use in the config file
    :param strip: whether to strip whitespace from around each value
                  (optional; applies only to comma-separated lists;
                  multi-line lists are always stripped)
    :type strip: bool
    :param default: the default value if the config file does not define a
                    value for this option; to require explicit configuration,
                    use :const:`bot74.config.types.NO_DEFAULT` (optional)
    :type default: list

    From this :class:`StaticSection`::

        class SpamSection(StaticSection):
            cheeses = ListAttribute('cheeses')

    the option will be exposed as a Python :class:`list`::

        >>> config.spam.cheeses
        ['camembert', 'cheddar', 'reblochon', '#brie']

    which comes from this configuration file:

    .. code-block:: ini

        [spam]
        cheeses =
            camembert
            cheddar
            reblochon
            "#brie"

    Note that the ``#brie`` item starts with a ``#``, hence the double quote:
    without these quotation marks, the config parser would think it's a
    comment. The quote/unquote is managed automatically by this field, and
    if and only if it's necessary (see :meth:`parse` and :meth:`serialize`).
    """
    DELIMITER = ','
    QUOTE_REGEX = re.compile(r'^"(?P<value>#.*)"$')
    """Regex pattern to match value that requires quotation marks."""

    def __init__(self, name, strip=True, default=None):
        default = default or []
        super().__init__(name, default=default)
        self.strip = strip

    def parse(self, value):
        """Parse ``value`` into a list.

        :param str value: a multi-line string of values to parse into a list
        :return: a list of items from ``value``
        :rtype: list

        The value is split on newlines, with fallback to comma when there is
        no newline in ``value``.
        """
        if "\n" in value:
            items = (
                item.strip(self.DELIMITER).strip()
                for item in value.splitlines())
        else:
            items = value.split(self.DELIMITER)

        items = (self.parse_item(item) for item in items if item)
        if self.strip:
            return [item.strip() for item in items]

        return list(items)

    def parse_item(self, item):
        """Parse one ``item`` from the list, unquoting it if needed."""
        result = self.QUOTE_REGEX.match(item)
        if result:
            return result.group('value')
        return item

    def serialize(self, value):
        """Serialize ``value`` into a multi-line string.

        :param list value: the input list
        :rtype: str
        :raise ValueError: if ``value`` is the wrong type (i.e. not a list)
        """
        if not isinstance(value, (list, set)):
            raise ValueError('ListAttribute value must be a list.')
        elif not value:
            return ''

        # always a newline, even with only one value in the list, so a comma
        # won't be read as a delimiter later
        return '\n' + '\n'.join(self.serialize_item(item) for item in value)

    def serialize_item(self, item):
        """Serialize an ``item`` from the list value, quoting it if needed."""
        if item.startswith('#'):
            # protect an item that would otherwise appear as a comment
            return '"%s"' % item
        return item


class ChoiceAttribute(BaseValidated):
    """A config attribute which must be one of a set group of options.

    :param str name: the attribute name to use in the config file
    :param choices: acceptable values; currently, only strings are supported
    :type choices: list or tuple
    :param default: which choice to use if none is set in the config file; to
                    require explicit configuration, use
                    :const:`bot74.config.types.NO_DEFAULT` (optional)
    :type default: str
    """
    def __init__(self, name, choices, default=None):
        super().__init__(name, default=default)
        self.choices = choices

    def parse(self, value):
        """Check the loaded ``value`` against the valid ``choices``.

        :raise ValueError: if ``value`` is not one of the valid ``choices``
        """
        if value in self.choices:
            return value
        else:
            raise ValueError('Value must be in {}'.format(self.choices))

    def serialize(self, value):
        """Make sure ``value`` is valid and safe to write in the config file.

        :raise ValueError: if ``value`` is not one of the valid ``choices``
        """
        if value in self.choices:
            return value
        else:
            raise ValueError('Value must be in {}'.format(self.choices))


class FilenameAttribute(BaseValidated):
    """A config attribute which must be a file or directory.

    :param str name: the attribute name to use in the config file
    :param bool relative: whether the path should be relative to the location
                          of the config file (absolute paths will still be
                          absolute)
    :param bool directory: whether the path should indicate a directory,
                           rather than a file
    :param default: the value to use if none is defined in the config file
    """
    def __init__(self, name, relative=True, directory=False, default=None):
        super().__init__(name, default=default)
        self.relative = relative
        self.directory = directory

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        value = self._raw_value(instance)
        if value is None:
            if self.default is NO_DEFAULT:
                raise AttributeError(
                    "Missing required value for {}.{}".format(
                        instance._section_name, self.name
                    )
                )
            value = self.default
            if value is None:
                return None
        return self.parse(value, instance._parent)

    def __set__(self, instance, value):
        value = self.serialize(value, instance._parent)
        instance._parser.set(instance._section_name, self.name, value)

    def parse(self, value, main_config):
        """Get the absolute path of ``value``.

        A relative path is resolved against the configuration's
        :attr:`~bot74.config.Config.homedir`.
        """
        if value is None:
            return None

        value = os.path.expanduser(value)

        if not os.path.isabs(value):
            if not self.relative:
                raise ValueError("Value must be an absolute path.")
            value = os.path.join(main_config.homedir, value)

        if self.directory and not os.path.isdir(value):
            try:
                os.makedirs(value)
            except OSError:
                raise ValueError(
                    "Value must be an existing or creatable directory.")
        if not self.directory and not os.path.isfile(value):
            try:
                open(value, 'w').close()
            except OSError:
                raise ValueError("Value must be an existing or creatable file.")
        return value

    def serialize(self, value, main_config):
        """Serialize the path ``value``, checking it like :meth:`parse`."""
        self.parse(value, main_config)
        return value
