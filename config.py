import os

DEFAULT_PREFIX_LEN = 2
DEFAULT_WORDS = 100

# on-disk encoding of input texts and model files
ENCODING = os.environ.get('MARK_ENCODING', 'utf-8')

# fetching web pages as input
HTTP_TIMEOUT = 10
USER_AGENT = 'mark/0.1 (+markov text generator)'

VERBOSE = os.environ.get('MARK_VERBOSE') == '1'
