# pull training text out of web pages

import logging

import bs4
import requests

import config
from chain import words

log = logging.getLogger(__name__)

BAD = ('script', 'style', 'noscript', 'nav', 'header', 'footer', 'aside')


def is_url(s):
    return s.startswith(('http://', 'https://'))


def load(url):
    log.info('fetching %s', url)
    try:
        r = requests.get(url, timeout=config.HTTP_TIMEOUT,
                         headers={'User-Agent': config.USER_AGENT})
        r.raise_for_status()
    except requests.RequestException as err:
        raise OSError('could not fetch %s: %s' % (url, err)) from err
    return bs4.BeautifulSoup(r.content, 'lxml')


def extract(soup):
    for tag in soup.find_all(BAD):
        tag.decompose()
    paras = soup.find_all('p')
    if not paras:
        # no paragraph markup, fall back to the whole body
        paras = [soup.body or soup]
    for p in paras:
        for s in p.stripped_strings:
            yield str(s)


def url_words(url):
    yield from words(extract(load(url)))
