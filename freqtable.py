"""Line-oriented frequency table format.

    2
    "" "" I 1
    I am a 1 not 1
    ...

Line 1 is the prefix length. Every other line is a prefix key (prefix length
words) followed by suffix/count pairs, all separated by single spaces. The
empty sentinel word is spelled `""`; a real word made only of double quotes
gets one extra quote so the two never collide. Tables written before that
rule existed are read differently when they hold such a word: a stored
`\"\"\"` comes back as `""`.
"""
from collections import namedtuple
import logging
import os

from chain import SENTINEL, Prefix
import config

log = logging.getLogger(__name__)

SENTINEL_TOKEN = '""'

Table = namedtuple('Table', ('prefix_len', 'choices', 'counts'))


class FormatError(ValueError):
    def __init__(self, msg, lineno=None, line=None):
        self.lineno = lineno
        self.line = line
        if lineno is not None:
            msg = 'line %d: %s: %r' % (lineno, msg, line)
        super().__init__(msg)


def _all_quotes(word):
    return len(word) >= 2 and not word.strip('"')


def escape(word):
    if word == SENTINEL:
        return SENTINEL_TOKEN
    if _all_quotes(word):
        return word + '"'
    return word


def unescape(tok):
    if tok == SENTINEL_TOKEN:
        return SENTINEL
    if _all_quotes(tok):
        return tok[:-1]
    return tok


def _number(tok):
    if not (tok.isascii() and tok.isdigit()):
        raise ValueError(tok)
    return int(tok)


def encode(prefix_len, freq):
    yield '%d\n' % prefix_len
    for key, succs in freq.items():
        fields = [escape(w) for w in Prefix.from_key(key, prefix_len).words]
        for succ, count in succs.items():
            fields.append(escape(succ))
            fields.append(str(count))
        yield ' '.join(fields) + '\n'


def dumps(prefix_len, freq):
    return ''.join(encode(prefix_len, freq))


def dump(path, prefix_len, freq):
    tmp = '%s.tmp' % path
    try:
        with open(tmp, 'w', encoding=config.ENCODING, newline='\n') as out:
            out.writelines(encode(prefix_len, freq))
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    log.info('wrote %d prefixes to %s', len(freq), path)


def _parse_line(line, lineno, prefix_len):
    toks = line.split(' ')
    if '' in toks:
        raise FormatError('empty field', lineno, line)
    if len(toks) < prefix_len:
        raise FormatError('expected %d prefix words' % prefix_len, lineno, line)
    key = ' '.join(unescape(t) for t in toks[:prefix_len])
    tail = toks[prefix_len:]
    if len(tail) % 2:
        raise FormatError('odd number of suffix/count fields', lineno, line)
    pairs = []
    for succ, count in zip(tail[::2], tail[1::2]):
        try:
            pairs.append((unescape(succ), _number(count)))
        except ValueError:
            raise FormatError('bad count %r' % count, lineno, line) from None
    return key, pairs


def decode(lines):
    lines = iter(lines)
    first = next(lines, None)
    if first is None:
        raise FormatError('empty table')
    first = first.rstrip('\r\n')
    try:
        prefix_len = _number(first.strip())
    except ValueError:
        raise FormatError('bad prefix length', 1, first) from None

    choices = {}
    counts = {}
    blank = None
    for lineno, line in enumerate(lines, 2):
        line = line.rstrip('\n').rstrip('\r')
        if not line.strip():
            if blank is None:
                blank = lineno
            continue
        if blank is not None:
            raise FormatError('blank line inside table', blank, '')
        key, pairs = _parse_line(line, lineno, prefix_len)
        lst = choices.setdefault(key, [])
        succs = counts.setdefault(key, {})
        for succ, count in pairs:
            lst.extend([succ] * count)
            succs[succ] = succs.get(succ, 0) + count
        log.debug('line %d: %r -> %d choices', lineno, key, len(lst))

    log.info('decoded %d prefixes (prefix length %d)', len(choices), prefix_len)
    return Table(prefix_len, choices, counts)


def load(path):
    with open(path, encoding=config.ENCODING) as s:
        return decode(s)
