"""Markov chain text generator.

    mark read 2 model.txt book1.txt book2.txt
    mark generate model.txt 100

`read` (also `build`) scans the inputs into a prefix -> suffix frequency
table and stores it; `generate` walks a stored table and prints at most the
requested number of words. Inputs may be paths, `-` for stdin, or http(s)
URLs.
"""
import argparse
import logging
import os
import random
import sys

import chain
import config
import freqtable
import scrape
import textgen

log = logging.getLogger('mark')

EXIT_IO = 1
EXIT_FORMAT = 3


def source(name):
    log.info('reading %s', name)
    if scrape.is_url(name):
        return scrape.url_words(name)
    return chain.read_words(name)


def cmd_read(args):
    builder = chain.build((source(name) for name in args.inputs), args.prefix_len)
    freqtable.dump(args.outfile, builder.prefix_len, builder.freq)
    log.info('%d prefixes, %d transitions', len(builder), builder.transitions)


def cmd_generate(args):
    if args.seed is not None:
        random.seed(args.seed)
    gen = textgen.Generator(path=args.modelfile)
    text, entropy = gen.generate(args.num_words)
    print(text)
    if args.entropy:
        print('entropy: %.3f nats' % entropy, file=sys.stderr)


def cmd_info(args):
    gen = textgen.Generator(path=args.modelfile)
    n = len(gen.model)
    trans = sum(sum(succs.values()) for succs in gen.counts.values())
    mean = sum(node.entropy for node in gen.model.values()) / n if n else 0.0
    print('prefix length: %d' % gen.prefix_len)
    print('prefixes:      %d' % n)
    print('transitions:   %d' % trans)
    print('mean entropy:  %.3f nats' % mean)


def silence_stdout():
    # reader went away (`mark generate ... | head`); keep the exit flush quiet
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, ValueError, OSError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


def nonneg(s):
    n = int(s)
    if n < 0:
        raise argparse.ArgumentTypeError('must be >= 0: %s' % s)
    return n


def positive(s):
    n = int(s)
    if n < 1:
        raise argparse.ArgumentTypeError('must be >= 1: %s' % s)
    return n


def parser():
    ap = argparse.ArgumentParser(prog='mark', description='Markov chain text generator')
    ap.add_argument('-v', '--verbose', action='store_true', help='log progress to stderr')
    sub = ap.add_subparsers(dest='command', metavar='COMMAND')
    sub.required = True

    p = sub.add_parser('read', aliases=['build'], help='build a frequency table from texts')
    p.add_argument('prefix_len', type=positive, help='words per prefix (e.g. %d)' % config.DEFAULT_PREFIX_LEN)
    p.add_argument('outfile', help='frequency table to write')
    p.add_argument('inputs', nargs='+', help='text files, - for stdin, or http(s) URLs')
    p.set_defaults(func=cmd_read)

    p = sub.add_parser('generate', help='generate text from a frequency table')
    p.add_argument('modelfile', help='frequency table to read')
    p.add_argument('num_words', type=nonneg, nargs='?', default=config.DEFAULT_WORDS,
                   help='maximum number of words (default %d)' % config.DEFAULT_WORDS)
    p.add_argument('--seed', type=int, help='random seed for reproducible output')
    p.add_argument('--entropy', action='store_true', help='print the entropy of the walk on stderr')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('info', help='summarize a frequency table')
    p.add_argument('modelfile')
    p.set_defaults(func=cmd_info)
    return ap


def main(argv=None):
    args = parser().parse_args(argv)
    if args.verbose or config.VERBOSE:
        logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')

    try:
        args.func(args)
    except freqtable.FormatError as err:
        print('mark: invalid model file %s: %s' % (args.modelfile, err), file=sys.stderr)
        return EXIT_FORMAT
    except BrokenPipeError:
        silence_stdout()
        return EXIT_IO
    except OSError as err:
        print('mark: could not open/create file: %s' % err, file=sys.stderr)
        return EXIT_IO
    except UnicodeDecodeError as err:
        print('mark: could not read file as %s: %s' % (config.ENCODING, err), file=sys.stderr)
        return EXIT_IO
    return 0


if __name__ == '__main__':
    sys.exit(main())
