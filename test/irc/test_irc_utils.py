"""Tests for core ``bot74.irc.utils``"""
from __future__ import annotations

from itertools import permutations

import pytest

from bot74.irc import utils


@pytest.mark.parametrize('s1, s2, s3', permutations(('\n', '\r', '\x00')))
def test_safe(s1, s2, s3):
    text = 'some text'
    seq = ''.join((s1, s2, s3))

    assert utils.safe(text + seq) == text
    assert utils.safe(seq + text) == text
    assert utils.safe('some ' + seq + 'text') == text
    assert utils.safe(
        s1
        + 'some '
        + s2
        + 'text'
        + s3
    ) == text


def test_safe_empty():
    text = ''
    assert utils.safe(text) == text


def test_safe_none():
    with pytest.raises(TypeError):
        utils.safe(None)


def test_safe_bytes():
    assert utils.safe(b'some \x00text\r\n') == 'some text'


def test_metadata_length():
    # ":bot74!~bot@example.com PRIVMSG #chan :text\r\n"
    prefix = 'bot74!~bot@example.com'
    expected = len(':%s PRIVMSG #chan :\r\n' % prefix)
    assert utils.metadata_length(len(prefix), '#chan') == expected


def test_metadata_length_unicode_target():
    # target length is in bytes
    assert utils.metadata_length(0, '#café') == 7 + 6 + 7


def test_text_budget():
    prefix = 'bot74!~bot@example.com'
    line = ':%s PRIVMSG #chan :\r\n' % prefix
    assert utils.text_budget(len(prefix), '#chan') == 512 - len(line)


def test_text_budget_no_room():
    with pytest.raises(ValueError):
        utils.text_budget(500, '#chan')

    with pytest.raises(ValueError):
        utils.text_budget(512 - 7 - 5 - 7, '#chan')


def test_text_budget_one_byte_left():
    assert utils.text_budget(512 - 7 - 5 - 7 - 1, '#chan') == 1


def test_split_text_fits():
    assert list(utils.split_text('hello world', 100)) == ['hello world']


def test_split_text_fits_trimmed():
    assert list(utils.split_text('  hello world  ', 100)) == ['hello world']


def test_split_text_empty():
    assert list(utils.split_text('', 100)) == ['']


def test_split_text_whitespace_only():
    assert list(utils.split_text('   ', 100)) == ['']


def test_split_text_words():
    assert list(utils.split_text('aaa bbb ccc ddd', 9)) == ['aaa bbb', 'ccc ddd']


def test_split_text_size_equal_budget_does_not_fit():
    # a line must be strictly shorter than the budget
    assert list(utils.split_text('aaa bbb', 7)) == ['aaa', 'bbb']


def test_split_text_words_every_ten_chars():
    text = ('a' * 9 + ' ') * 60
    assert len(text) == 600

    lines = list(utils.split_text(text, 100))

    assert len(lines) > 1
    for line in lines:
        assert len(line.encode('utf-8')) < 100
        # broken at whitespace: only complete words
        assert all(word == 'a' * 9 for word in line.split(' '))
    assert ' '.join(lines) == text.strip()


def test_split_text_long_token():
    text = 'x' * 600
    lines = list(utils.split_text(text, 100))

    assert len(lines) == 6
    assert all(line == 'x' * 100 for line in lines)
    assert ''.join(lines) == text


def test_split_text_long_token_uneven():
    lines = list(utils.split_text('aaaaaaaaaa', 4))
    assert lines == ['aaaa', 'aaaa', 'aa']


def test_split_text_token_exactly_budget():
    assert list(utils.split_text('x' * 10, 10)) == ['x' * 10]


def test_split_text_long_token_between_words():
    text = 'hello ' + 'x' * 25 + ' world'
    lines = list(utils.split_text(text, 10))

    # the forced cut counts the space before the long token
    assert lines == ['hello', 'x' * 9, 'x' * 10, 'x' * 6, 'world']
    assert ''.join(lines[1:4]) == 'x' * 25


def test_split_text_multibyte():
    # 2 bytes per character: never cut a character in half
    text = 'é' * 100
    lines = list(utils.split_text(text, 51))

    assert lines == ['é' * 25] * 4
    for line in lines:
        assert len(line.encode('utf-8')) <= 51


def test_split_text_multibyte_words():
    text = ' '.join(['日本語'] * 40)
    lines = list(utils.split_text(text, 50))

    assert len(lines) > 1
    for line in lines:
        assert len(line.encode('utf-8')) < 50
    assert ' '.join(lines) == text


def test_split_text_invalid_budget():
    with pytest.raises(ValueError):
        list(utils.split_text('text', 0))

    with pytest.raises(ValueError):
        list(utils.split_text('text', -5))


@pytest.mark.parametrize('text', [
    'short text',
    'word ' * 200,
    'x' * 1500,
    'mixed ' + 'y' * 700 + ' words ' * 30,
    'ça été très ' * 80,
])
def test_wrap_msg_lines_fit(text):
    prefix_length = len('bot74!~bot@example.com')
    target = '#chan'
    overhead = utils.metadata_length(prefix_length, target)

    lines = list(utils.wrap_msg(prefix_length, target, text))

    assert lines
    for line in lines:
        assert overhead + len(line.encode('utf-8')) <= utils.MAX_LINE_LENGTH


def test_wrap_msg_single_line():
    lines = list(utils.wrap_msg(20, '#chan', '  Hello world!  '))
    assert lines == ['Hello world!']


def test_wrap_msg_no_room():
    with pytest.raises(ValueError):
        utils.wrap_msg(600, '#chan', 'text')
