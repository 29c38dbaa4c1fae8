from collections import namedtuple
from math import log as ln
from random import randrange
import logging

from chain import Prefix, ChainBuilder
import freqtable

log = logging.getLogger(__name__)


Node = namedtuple('Node', ('choices', 'entropy'))


def entropy(succs):
    tot = sum(succs.values())
    if not tot:
        return 0.0
    return -sum(f/tot * ln(f/tot) for f in succs.values() if f)


def build_model(table):
    return {key: Node(choices=table.choices[key], entropy=entropy(succs))
            for (key, succs) in table.counts.items()}


def generate(choices, prefix_len, max_words, rand=randrange):
    """Random walk over `choices` (prefix key -> list of suffixes, one entry
    per occurrence) from the all-sentinel prefix.

    Stops after `max_words` words or at the first prefix with nothing to
    follow it.
    """
    p = Prefix(prefix_len)
    out = []
    for _ in range(max(max_words, 0)):
        lst = choices.get(p.key())
        if not lst:
            break
        succ = lst[rand(len(lst))]
        out.append(succ)
        p.shift(succ)
    return out


def generate_text(choices, prefix_len, max_words, rand=randrange):
    return ' '.join(generate(choices, prefix_len, max_words, rand))


class Generator:
    def __init__(self, words=None, prefix_len=None, path=None):
        if path is not None:
            table = freqtable.load(path)
        else:
            assert words is not None and prefix_len is not None, 'bad arguments'
            b = ChainBuilder(prefix_len).build(words)
            table = freqtable.decode(freqtable.encode(prefix_len, b.freq))
        self.prefix_len = table.prefix_len
        self.counts = table.counts
        self.choices = table.choices
        self.model = build_model(table)

    def dump_model(self, path):
        freqtable.dump(path, self.prefix_len, self.counts)

    def generate(self, max_words, rand=randrange):
        out = generate(self.choices, self.prefix_len, max_words, rand)
        p = Prefix(self.prefix_len)
        entropy = 0
        for succ in out:
            entropy += self.model[p.key()].entropy
            p.shift(succ)
        if len(out) < max_words:
            log.debug('dead end at %r after %d words', p.key(), len(out))
        return ' '.join(out), entropy
