"""Identifier tools to compare IRC names (nick or channel).

IRC names are case-insensitive, but "case" does not only mean ASCII
letters: per :rfc:`RFC 2812 § 2.2<2812#section-2.2>`, the characters
``{}|^`` are the lowercase equivalents of ``[]\\~``. Two nicks must be
lowered with the same rules before being compared.

The bot uses these tools to recognize its own nick, whether a message
was sent privately to it, and whether a sender matches an admin mask.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import string
from typing import Callable

Casemapping = Callable[[str], str]

ASCII_TABLE = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
RFC1459_TABLE = str.maketrans(
    string.ascii_uppercase + '[]\\~',
    string.ascii_lowercase + '{}|^',
)
DEFAULT_CHANTYPES = ('#', '&', '+', '!')


def ascii_lower(text: str) -> str:
    """Lower ``text`` mapping only ``[A-Z]`` to ``[a-z]``."""
    return text.translate(ASCII_TABLE)


def rfc1459_lower(text: str) -> str:
    """Lower ``text`` according to :rfc:`2812`.

    ASCII letters are lowered, and ``[]\\~`` are mapped to ``{}|^``.
    """
    return text.translate(RFC1459_TABLE)


class Identifier(str):
    """A ``str`` subclass which acts appropriately for IRC identifiers.

    :param str identifier: IRC identifier
    :param casemapping: a casemapping function (optional keyword argument)

    When used as normal ``str`` objects, case will be preserved. However,
    when comparing two Identifier objects, or comparing an Identifier object
    with a ``str`` object, the comparison will be case insensitive::

        >>> Identifier('Bot[74]') == 'bot{74}'
        True

    """
    def __new__(
        cls,
        identifier: str,
        *,
        casemapping: Casemapping = rfc1459_lower,
        chantypes: tuple = DEFAULT_CHANTYPES,
    ) -> 'Identifier':
        return str.__new__(cls, identifier)

    def __init__(
        self,
        identifier: str,
        *,
        casemapping: Casemapping = rfc1459_lower,
        chantypes: tuple = DEFAULT_CHANTYPES,
    ) -> None:
        super().__init__()
        self.casemapping: Casemapping = casemapping
        self.chantypes = chantypes
        self._lowered = self.casemapping(identifier)

    def lower(self) -> str:
        """Get the IRC-compliant lowercase version of this identifier."""
        return self._lowered

    def __repr__(self):
        return "%s(%r)" % (
            self.__class__.__name__,
            self.__str__()
        )

    def __hash__(self):
        return self._lowered.__hash__()

    def __eq__(self, other):
        if not isinstance(other, str):
            return NotImplemented
        return self._lowered == self.casemapping(other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def is_nick(self) -> bool:
        """Check if the Identifier is a nickname (i.e. not a channel).

        ::

            >>> Identifier('bot74').is_nick()
            True
            >>> Identifier('#bot74').is_nick()
            False

        """
        return bool(self) and not self.startswith(self.chantypes)
