"""Text preprocessing for BM25 keyword search."""

from __future__ import annotations

import re
import unicodedata

from routing_engine.config.constants import STOPWORDS

_WORD_RE = re.compile(r"\w+")


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens with stopwords and single characters removed.

    Apostrophes split words ("user's" -> "user", "s"), so possessives collapse
    onto the bare noun once the single-character remainder is dropped.
    """
    text = unicodedata.normalize("NFKC", text).casefold()
    return [t for t in _WORD_RE.findall(text) if len(t) > 1 and t not in STOPWORDS]
