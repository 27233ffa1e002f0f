"""
Answer Normalizer - raw text to the canonical comparison form.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.

The same form is used to store override texts and to compare answers, so a
change here changes what every stored override means.
"""
import re
import unicodedata

_QUOTE_CHARS = '"\'“”‘’«»`'

# "What is ...", "Who were ..." - the Jeopardy response phrasing.
_RESPONSE_PHRASE_RE = re.compile(r"^(?:what|who|where|when)\s+(?:is|are|was|were)\s+")
_ARTICLE_RE = re.compile(r"^(?:a|an|the)\s+")
_HTML_TAG_RE = re.compile(r"<[^<]+?>")
# Anything that is not a letter, digit, whitespace, hyphen or apostrophe.
_PUNCTUATION_RE = re.compile(r"[^\w\s'\-]|_")
# Hyphens and apostrophes not sitting between two word characters.
_LOOSE_JOINER_RE = re.compile(r"(?<![^\W_])['\-]|['\-](?![^\W_])")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    """Fold accented letters to their base letter (é -> e)."""
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_html(text: str) -> str:
    """Remove markup such as <i>...</i> found in imported canonical answers."""
    return _HTML_TAG_RE.sub('', text)


def normalize_answer(text) -> str:
    """
    Normalize an answer for storage and comparison.

    Steps, in order: trim, lowercase (accents folded, '&' read as 'and'),
    strip surrounding quotation marks, drop a leading response phrase and
    then one leading article, remove punctuation except hyphens and
    apostrophes inside a word, collapse whitespace.

    Never raises; None and empty input give ''.

    Examples:
        >>> normalize_answer('  "The Beatles" ')
        'beatles'
        >>> normalize_answer("Mt. Everest")
        'mt everest'
        >>> normalize_answer("What is rock-and-roll?")
        'rock-and-roll'
    """
    if not text:
        return ''
    if not isinstance(text, str):
        text = str(text)

    text = text.strip()
    text = strip_accents(text).lower()
    text = text.replace('’', "'").replace('&', ' and ')
    text = _WHITESPACE_RE.sub(' ', text).strip()

    text = text.strip(_QUOTE_CHARS).strip()

    text = _RESPONSE_PHRASE_RE.sub('', text, count=1)
    text = _ARTICLE_RE.sub('', text, count=1)

    text = _PUNCTUATION_RE.sub('', text)
    text = _LOOSE_JOINER_RE.sub('', text)

    return _WHITESPACE_RE.sub(' ', text).strip()
