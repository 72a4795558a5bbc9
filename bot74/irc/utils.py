""":mod:`bot74.irc.utils` contains low-level tools for IRC protocol handling.

Most importantly, it knows how to cut a long text into lines that each fit
in a ``PRIVMSG``, once the server has added the bot's prefix to it.
"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import bisect
import itertools
import re
from typing import Iterator

MAX_LINE_LENGTH = 512
"""Maximum length of an IRC line in bytes, including the trailing CR-LF."""

WHITESPACE_REGEX = re.compile(r'\s')


def safe(string: str) -> str:
    """Remove disallowed bytes from a string, and ensure Unicode.

    :param string: input text to process
    :return: the string as Unicode without characters prohibited in IRC messages
    :raises TypeError: when ``string`` is ``None``

    This function removes newlines and null bytes from a string::

        >>> safe('some \\x00text\\r\\n')
        'some text'

    Parameters can **never** contain NUL, CR, or LF octets, per
    :rfc:`2812#section-2.3.1`.
    """
    if string is None:
        raise TypeError('safe function requires a string, not NoneType')
    if isinstance(string, bytes):
        string = string.decode("utf8")
    string = string.replace('\n', '')
    string = string.replace('\r', '')
    string = string.replace('\x00', '')
    return string


def metadata_length(prefix_length: int, target: str, command: str = 'PRIVMSG') -> int:
    """Compute the bytes taken by everything but the text in a line.

    :param prefix_length: length of the bot's prefix (``nick!user@host``)
    :param target: the message's target (channel or nick)
    :param command: the command used to send text
    :return: the protocol overhead for a message to ``target``

    The line the server relays to other clients looks like this::

        :nick!user@host PRIVMSG target :text\\r\\n

    so on top of the prefix, the command, and the target, there are two
    colons, three spaces, and the CR-LF terminator.
    """
    line_terminator_len = 2
    spaces = 3
    colons = 2
    punctuation_len = colons + spaces + line_terminator_len
    return (
        prefix_length
        + len(command)
        + len(target.encode('utf-8'))  # target channel/nick (can contain Unicode)
        + punctuation_len
    )


def text_budget(prefix_length: int, target: str, command: str = 'PRIVMSG') -> int:
    """Get the number of bytes left for text in a message to ``target``.

    :raise ValueError: when the overhead alone fills the whole line
    """
    overhead = metadata_length(prefix_length, target, command)
    budget = MAX_LINE_LENGTH - overhead
    if budget <= 0:
        raise ValueError(
            'No room left for text in a message to %r: '
            'protocol overhead is %d bytes' % (target, overhead))
    return budget


def split_text(text: str, budget: int) -> Iterator[str]:
    """Split ``text`` into lines shorter than ``budget`` bytes.

    :param text: the text to split
    :param budget: maximum size of a line of text, in bytes; it must be
                   strictly positive
    :return: an iterator over the lines, trimmed of surrounding whitespace

    Lines are cut at whitespace whenever possible, each line taking as many
    words as it can::

        >>> list(split_text('aaa bbb ccc ddd', 9))
        ['aaa bbb', 'ccc ddd']

    A word too long to fit in a line on its own is cut at exactly
    ``budget`` bytes, so splitting always makes progress::

        >>> list(split_text('aaaaaaaaaa', 4))
        ['aaaa', 'aaaa', 'aa']

    Lengths are in UTF-8 bytes, but a multi-byte character is never cut in
    half. A text that fits is returned as a single line, even when empty.
    """
    if budget <= 0:
        raise ValueError('Budget must be strictly positive, got %d' % budget)

    # byte offset of each character, so any slice size is one subtraction
    offsets = list(itertools.accumulate(
        (len(char.encode('utf-8')) for char in text), initial=0))
    text_length = len(text)

    def size(start: int, end: int) -> int:
        return offsets[end] - offsets[start]

    if size(0, text_length) < budget:
        yield text.strip()
        return

    spaces = [match.start() for match in WHITESPACE_REGEX.finditer(text)]
    space_idx = 0
    start = 0

    while start < text_length:
        # skip boundaries already behind the current line
        while space_idx < len(spaces) and spaces[space_idx] <= start:
            space_idx += 1

        if size(start, text_length) < budget:
            end = text_length
        else:
            end = start
            while (space_idx < len(spaces)
                   and size(start, spaces[space_idx]) < budget):
                end = spaces[space_idx]
                space_idx += 1

            if end <= start:
                # no whitespace early enough: cut the word at the budget,
                # on a character boundary
                limit = offsets[start] + budget
                end = bisect.bisect_right(offsets, limit, lo=start) - 1
                end = max(end, start + 1)

        line = text[start:end].strip()
        if line:
            yield line
        start = end


def wrap_msg(prefix_length: int, target: str, text: str) -> Iterator[str]:
    """Wrap ``text`` into lines that fit in a ``PRIVMSG`` to ``target``.

    :param prefix_length: length of the bot's prefix, as the server sees it
    :param target: the message's target (channel or nick)
    :param text: the text to send
    :return: an iterator over the lines to send
    :raise ValueError: when the prefix and target leave no room for text

    Every line, once sent with the ``PRIVMSG`` command and relayed by the
    server with the bot's prefix, fits in :data:`MAX_LINE_LENGTH` bytes.
    """
    return split_text(text, text_budget(prefix_length, target))
