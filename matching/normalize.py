"""
Query normalization.

Lowercase, fold Vietnamese diacritics, strip punctuation, collapse
whitespace. Pure function, no I/O.
"""

import re
import unicodedata
from typing import Any

from vocab.aliases import DIACRITIC_TABLE

_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)
_WHITESPACE = re.compile(r'\s+')


def normalize(text: Any) -> str:
    """
    Normalize free text for matching.

    Never raises: None or non-string input gives "".

    Examples:
        >>> normalize("Điện thoại  iPhone-15 Pro Max!!")
        'dien thoai iphone 15 pro max'
        >>> normalize(None)
        ''
    """
    if not isinstance(text, str) or not text:
        return ""

    # Compose decomposed accents (NFD keyboards) so the folding table applies
    s = unicodedata.normalize("NFC", text).lower().translate(DIACRITIC_TABLE)
    # ASCII word class: anything still non-ASCII becomes a separator
    s = _NON_WORD.sub(" ", s)
    return _WHITESPACE.sub(" ", s).strip()
