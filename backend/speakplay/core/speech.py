"""
Phrase matching for continuously-listening speech recognition.

The recognizer keeps appending to one transcript, so a phrase spoken now sits
at the end of whatever was heard before. Matching is anchored to the trailing
window of the transcript sized to the phrase being tested.
"""

import re
from typing import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
# Recognizers often glue "red box" into one word.
_TOKEN_MERGES = ((re.compile(r"\bredbox\b"), "red box"),)


def normalize_transcript(text: str) -> list[str]:
    """Lowercase, drop punctuation, fix known mis-transcriptions, split into tokens."""
    if not text:
        return []
    s = _NON_ALNUM.sub("", text.lower())
    for pattern, replacement in _TOKEN_MERGES:
        s = pattern.sub(replacement, s)
    return [token for token in s.split() if token]


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit insert/delete/substitute cost."""
    return Levenshtein.distance(a or "", b or "")


def _joined(tokens: Sequence[str]) -> str:
    return " ".join(tokens)


def _compact(tokens: Sequence[str]) -> str:
    return "".join(tokens)


def _phrase_matches(transcript_tokens: list[str], phrase: str, tolerance: int) -> bool:
    phrase_tokens = normalize_transcript(phrase)
    if not phrase_tokens:
        return False

    phrase_joined = _joined(phrase_tokens)
    phrase_compact = _compact(phrase_tokens)

    if phrase_joined in _joined(transcript_tokens) or phrase_compact in _compact(transcript_tokens):
        return True

    if len(transcript_tokens) < len(phrase_tokens):
        return False

    suffix_tokens = transcript_tokens[-len(phrase_tokens):]
    suffix_joined = _joined(suffix_tokens)
    suffix_compact = _compact(suffix_tokens)

    if phrase_joined in suffix_joined or phrase_compact in suffix_compact:
        return True

    # Fuzzy comparison only within the suffix window, never the whole transcript.
    if levenshtein_distance(suffix_joined, phrase_joined) <= tolerance:
        return True
    return levenshtein_distance(suffix_compact, phrase_compact) <= tolerance


def phrases_match(transcript: str, phrases: Iterable[str], tolerance: int) -> bool:
    """
    True if any phrase was spoken at the end of (or anywhere inside) the transcript.

    Exact containment is checked on both the space-joined and the compact
    (no spaces) forms. Otherwise the last N transcript tokens, N being the
    phrase's token count, may differ from the phrase by at most `tolerance`
    edits. Phrases are tried in order; the first hit wins.
    """
    transcript_tokens = normalize_transcript(transcript)
    if not transcript_tokens:
        return False
    return any(_phrase_matches(transcript_tokens, phrase, tolerance) for phrase in phrases)
