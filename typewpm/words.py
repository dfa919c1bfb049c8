"""Word bank loading and random line generation."""

import json
import logging
import random
from datetime import datetime, timedelta

import requests

from .config import WORDS_PATH, WORDS_URL, WORDS_CACHE, CACHE_DAYS

log = logging.getLogger(__name__)


class WordBankError(ValueError):
    """The word source cannot produce a line."""


def parse_words(text):
    """Split a flat token list into an ordered tuple of distinct words."""
    seen = set()
    words = []
    for token in text.split():
        if token not in seen:
            seen.add(token)
            words.append(token)
    return tuple(words)


# Downloaded word list caching
def get_cached_words(url, cache_path=WORDS_CACHE, max_age_days=CACHE_DAYS):
    try:
        with open(cache_path, encoding="utf-8") as f:
            data = json.load(f)
        if data["url"] != url:
            return None
        ts = datetime.fromisoformat(data["timestamp"])
        if max_age_days is not None and datetime.now() - ts >= timedelta(days=max_age_days):
            return None
        return tuple(data["words"])
    except (OSError, ValueError, KeyError):
        return None


def cache_words(url, words, cache_path=WORDS_CACHE):
    with open(cache_path, "w", encoding="utf-8") as f:
        json.dump({"url": url, "timestamp": datetime.now().isoformat(), "words": list(words)}, f)


def download_words(url, cache_path=WORDS_CACHE, timeout=10):
    words = get_cached_words(url, cache_path)
    if words:
        log.info("Using cached word list for %s", url)
        return words

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        # A stale copy beats no copy
        words = get_cached_words(url, cache_path, max_age_days=None)
        if words:
            log.warning("Download of %s failed (%s), using stale cache", url, e)
            return words
        raise WordBankError(f"Could not download word list from {url}: {e}") from e

    words = parse_words(response.text)
    if words:
        try:
            cache_words(url, words, cache_path)
        except OSError as e:
            log.warning("Could not cache word list: %s", e)
    return words


def load_word_bank(path=None, url=None):
    """Load the word bank from ``url`` when given, otherwise from ``path``.

    Raises WordBankError when the source is missing or holds no words.
    """
    url = url if url is not None else WORDS_URL
    if url:
        words = download_words(url)
        source = url
    else:
        source = path or WORDS_PATH
        try:
            with open(source, encoding="utf-8") as f:
                words = parse_words(f.read())
        except OSError as e:
            raise WordBankError(f"Could not read word list {source}: {e}") from e

    if not words:
        raise WordBankError(f"Word list {source} is empty")
    log.info("Loaded %d words from %s", len(words), source)
    return words


def random_line(word_bank, max_width, rng=None):
    """Pick random words until the joined line is at least ``max_width`` wide.

    Two neighbouring words are never the same.
    """
    if not word_bank:
        raise WordBankError("Cannot build a line from an empty word bank")
    rng = rng or random
    single_word = len(set(word_bank)) < 2

    line = []
    line_length = -1  # no leading separator before the first word
    while line_length < max_width:
        if line and single_word:
            raise WordBankError("Word bank needs at least two distinct words to fill a line")
        word = rng.choice(word_bank)
        while line and word == line[-1]:
            word = rng.choice(word_bank)
        line.append(word)
        line_length += len(word) + 1
    return line
