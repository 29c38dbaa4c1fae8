import logging
import sys

import config

log = logging.getLogger(__name__)

# placeholder for "no word yet" at the start of a window
SENTINEL = ''


class Prefix:
    """Fixed-length window over the last words seen, usable as a chain key."""

    __slots__ = ('words',)

    def __init__(self, n):
        if n < 0:
            raise ValueError('negative prefix length: %d' % n)
        self.words = [SENTINEL] * n

    @classmethod
    def from_key(cls, key, n):
        p = cls(n)
        if n:
            words = key.split(' ')
            if len(words) != n:
                raise ValueError('key %r is not %d words long' % (key, n))
            p.words[:] = words
        return p

    def key(self):
        return ' '.join(self.words)

    def shift(self, word):
        if self.words:
            self.words[:-1] = self.words[1:]
            self.words[-1] = word

    def __len__(self):
        return len(self.words)

    def __eq__(self, other):
        if not isinstance(other, Prefix):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __str__(self):
        return self.key()

    def __repr__(self):
        return 'Prefix(%r)' % self.words


def words(lines):
    for line in lines:
        yield from line.split()


def read_words(path):
    if path == '-':
        yield from words(sys.stdin)
        return
    with open(path, encoding=config.ENCODING) as s:
        yield from words(s)


def count_transitions(words, n, trans=None):
    if trans is None:
        trans = {}
    p = Prefix(n)
    for w in words:
        curr = p.key()
        if curr not in trans:
            trans[curr] = {w: 1}
        elif w not in trans[curr]:
            trans[curr][w] = 1
        else:
            trans[curr][w] += 1
        p.shift(w)
    return trans


class ChainBuilder:
    """Accumulates prefix -> suffix -> count over one or more documents.

    Every call to `build` starts from a fresh sentinel prefix, so the end of
    one document never forms context for the start of the next.
    """

    def __init__(self, prefix_len):
        if prefix_len < 1:
            raise ValueError('prefix length must be at least 1, got %d' % prefix_len)
        self.prefix_len = prefix_len
        self.freq = {}
        self.transitions = 0

    def _tally(self, words):
        for w in words:
            self.transitions += 1
            yield w

    def build(self, words):
        before = self.transitions
        count_transitions(self._tally(words), self.prefix_len, self.freq)
        log.info('folded %d transitions, %d prefixes so far',
                 self.transitions - before, len(self.freq))
        return self

    def __len__(self):
        return len(self.freq)


def build(sources, prefix_len):
    builder = ChainBuilder(prefix_len)
    for src in sources:
        builder.build(src)
    return builder
