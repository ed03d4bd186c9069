"""
Text segmentation for the pacing engine.

Three views of the same source text:
- word stream: whitespace-delimited tokens
- bionic stream: each token split into a bold lead and a normal tail
- chunk stream: tokens grouped mechanically or along phrase boundaries

Plus two per-item helpers used while pacing: the focus point (ORP) of a
word and the dwell multiplier implied by trailing punctuation.

All functions are pure.
"""

from __future__ import annotations

import logging
import math
import re
from bisect import bisect_left
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Punctuation that closes a phrase (break AFTER the token)
END_PUNCT_RE = re.compile(r"[.!?,;:—–-]$")

SENTENCE_END_RE = re.compile(r"[.!?](?:['\"”’)\]]+)?$")
CLAUSE_END_RE = re.compile(r"[,;:](?:['\"”’)\]]+)?$")

# Anything that is not a letter or digit, in any script
_LEADING_NON_ALNUM_RE = re.compile(r"^[\W_]*")
_TRAILING_NON_ALNUM_RE = re.compile(r"[\W_]*$")

# Words that typically start a new phrase (break BEFORE them)
PHRASE_STARTERS = {
    "en": frozenset(
        {
            # articles and determiners
            "the", "a", "an", "this", "that", "these", "those",
            # conjunctions
            "and", "but", "or", "so", "yet", "for", "nor",
            # subordinators
            "when", "while", "if", "unless", "although", "because", "since",
            # relative and interrogative pronouns
            "who", "which", "where", "what", "how", "why",
            # prepositions
            "in", "on", "at", "by", "with", "from", "to", "into", "onto",
            # connectives
            "however", "therefore", "moreover", "furthermore", "meanwhile",
        }
    ),
    "tr": frozenset(
        {
            "ve", "ama", "fakat", "veya", "ya", "çünkü", "için",
            "bu", "şu", "o", "bunlar", "şunlar", "onlar",
            "ile", "gibi", "kadar", "üzere", "rağmen", "dolayı",
            "ancak", "oysa", "halbuki", "yani", "öyleyse",
        }
    ),
}


@dataclass(frozen=True)
class BionicWord:
    bold: str
    normal: str
    original: str


def split_words(text: str) -> List[str]:
    """Split text on runs of whitespace. Blank input gives an empty list."""
    if not text:
        return []
    return text.split()


def phrase_starters_for(languages: Iterable[str]) -> frozenset:
    """Union of the phrase-starter sets for the given language codes."""
    starters: set = set()
    for code in languages:
        words = PHRASE_STARTERS.get(code.lower())
        if words is None:
            logger.warning("No phrase starters for language %r, ignoring", code)
            continue
        starters |= words
    return frozenset(starters)


def _phrase_key(token: str) -> str:
    return "".join(ch for ch in token.casefold() if ch.isalpha())


def get_bold_length(word: str) -> int:
    n = sum(1 for ch in word if ch.isalnum())
    if n <= 3:
        return 1
    if n <= 5:
        return 2
    if n <= 8:
        return 3
    return math.ceil(n * 0.4)


def to_bionic_word(word: str) -> BionicWord:
    """Split a token into its bold lead and normal tail.

    Leading and trailing punctuation stay attached to the bold and normal
    parts respectively, so ``bold + normal == word`` always holds.
    """
    if not word.strip():
        return BionicWord(bold="", normal="", original=word)

    leading = _LEADING_NON_ALNUM_RE.match(word).group(0)
    rest = word[len(leading):]
    trailing = _TRAILING_NON_ALNUM_RE.search(rest).group(0)
    core = rest[: len(rest) - len(trailing)]

    bold_len = get_bold_length(core)
    return BionicWord(
        bold=leading + core[:bold_len],
        normal=core[bold_len:] + trailing,
        original=word,
    )


def to_bionic_words(tokens: Iterable[str]) -> List[BionicWord]:
    return [to_bionic_word(tok) for tok in tokens]


def build_chunks(
    tokens: List[str],
    chunk_size: int = 3,
    phrase_mode: bool = True,
    phrase_starters: Optional[AbstractSet[str]] = None,
) -> List[List[str]]:
    """Group tokens into display chunks.

    Mechanical mode cuts every ``chunk_size`` tokens. Phrase mode closes a
    group early before a phrase-starting word or after a token ending in
    clause punctuation, once the group holds at least two tokens, and never
    lets a group grow past ``chunk_size``.
    """
    size = max(1, chunk_size)
    if not tokens:
        return []

    if not phrase_mode:
        return [tokens[i:i + size] for i in range(0, len(tokens), size)]

    if phrase_starters is None:
        phrase_starters = phrase_starters_for(PHRASE_STARTERS)

    chunks: List[List[str]] = []
    current: List[str] = []
    prev = ""

    for tok in tokens:
        break_before = len(current) >= size or (
            len(current) >= 2
            and (_phrase_key(tok) in phrase_starters or bool(END_PUNCT_RE.search(prev)))
        )
        if break_before and current:
            chunks.append(current)
            current = []

        current.append(tok)
        prev = tok

        # Full group ending on punctuation: close it here
        if len(current) >= size and END_PUNCT_RE.search(tok):
            chunks.append(current)
            current = []

    if current:
        chunks.append(current)
    return chunks


# Longest core length for focus offsets 0..3; longer words use 4
_ORP_LENGTH_LIMITS = (1, 5, 9, 13)


def compute_orp_index(word: str) -> int:
    """Character index of the optimal recognition point within ``word``.

    The offset is chosen from the length of the word without its outer
    punctuation, then shifted past any leading punctuation.
    """
    if not word:
        return 0
    leading = len(_LEADING_NON_ALNUM_RE.match(word).group(0))
    rest = word[leading:]
    core_len = len(rest) - len(_TRAILING_NON_ALNUM_RE.search(rest).group(0))
    offset = bisect_left(_ORP_LENGTH_LIMITS, core_len or len(word))
    return min(leading + offset, len(word) - 1)


def estimate_pause_multiplier(item: str, comma_mult: float, sentence_mult: float) -> float:
    """Dwell multiplier for an item based on how it ends."""
    mult = 1.0
    if SENTENCE_END_RE.search(item):
        mult = max(mult, sentence_mult)
    elif CLAUSE_END_RE.search(item):
        mult = max(mult, comma_mult)

    if "..." in item or "…" in item:
        mult = max(mult, comma_mult + 0.25)
    return mult
