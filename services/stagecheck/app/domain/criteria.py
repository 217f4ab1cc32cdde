"""Detection of subjective completion criteria."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from ..config import StagecheckSettings, get_settings

_WORD_RE = re.compile(r"[a-z0-9]+(?:'[a-z]+)?")
# "it's" -> "it", "everything's" -> "everything"; negations such as "isn't" stay whole.
_CONTRACTION_RE = re.compile(r"'(?:s|re|ll|ve|d|m)\b")


def _words(text: str) -> list[str]:
    normalized = text.lower().replace("’", "'").replace("‘", "'")
    return _WORD_RE.findall(_CONTRACTION_RE.sub("", normalized))


@dataclass(frozen=True)
class VagueTermRules:
    """Normalized denylist of subjective terms plus words ignored around them."""

    terms: frozenset[str]
    filler: frozenset[str]

    @classmethod
    def from_lists(cls, terms: Iterable[str], filler: Iterable[str] = ()) -> "VagueTermRules":
        normalized_terms = {" ".join(_words(term)) for term in terms}
        normalized_filler = {word for entry in filler for word in _words(entry)}
        normalized_terms.discard("")
        return cls(terms=frozenset(normalized_terms), filler=frozenset(normalized_filler))

    @classmethod
    def from_settings(cls, settings: StagecheckSettings | None = None) -> "VagueTermRules":
        rules = (settings or get_settings()).rules
        return cls.from_lists(rules.vague_terms, rules.filler_words)


def is_vague(criterion: str, rules: VagueTermRules) -> bool:
    """Return True when the criterion is blank or only restates a denylisted term.

    Filler words are dropped first, so "It works!" and "Everything is done"
    match the entries "works" and "done". Any other remaining word makes the
    criterion concrete: "Migrations pass" is not vague.
    """
    words = _words(criterion)
    if not words:
        return True
    if " ".join(words) in rules.terms:
        return True
    significant = [word for word in words if word not in rules.filler]
    return bool(significant) and " ".join(significant) in rules.terms


__all__ = ["VagueTermRules", "is_vague"]
