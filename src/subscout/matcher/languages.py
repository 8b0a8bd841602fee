"""Language synonym groups and filename language detection.

Synonym lines such as ``"fr|fra|fre|french"`` become :class:`LanguageGroup`
objects. A filename is tokenized on non-alphanumeric runs and the first
configured group holding one of its tokens decides the language.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..utils import lower_tokens

UNDETERMINED = "und"

ENGLISH_FALLBACK: tuple[str, ...] = ("en", "eng", "english")

# Consulted only when no configured group matched and the extended map is enabled.
EXTENDED_LANGUAGE_MAP: tuple[tuple[str, frozenset[str]], ...] = (
    ("eng", frozenset({"english", "eng", "en"})),
    ("dan", frozenset({"danish", "dan", "da"})),
    ("fra", frozenset({"french", "fra", "fre", "fr"})),
    ("deu", frozenset({"german", "ger", "deu", "de"})),
    ("spa", frozenset({"spanish", "spa", "es"})),
)


@dataclass(frozen=True, slots=True)
class LanguageGroup:
    """Interchangeable lower-case tokens naming one language, in configured order."""

    tokens: tuple[str, ...]

    @property
    def canonical(self) -> str:
        for token in self.tokens:
            if len(token) == 3:
                return token
        return self.tokens[0]

    def __contains__(self, token: object) -> bool:
        return token in self.tokens

    def intersects(self, tokens: Iterable[str]) -> bool:
        return any(token in self.tokens for token in tokens)


@dataclass(frozen=True, slots=True)
class LanguageClassification:
    code: str
    group: LanguageGroup | None


def parse_synonym_line(line: object) -> LanguageGroup | None:
    if not isinstance(line, str):
        return None
    tokens: list[str] = []
    for part in line.split("|"):
        token = part.strip().lower()
        if token and token not in tokens:
            tokens.append(token)
    if not tokens:
        return None
    return LanguageGroup(tuple(tokens))


def build_language_groups(lines: Iterable[object] | None) -> list[LanguageGroup]:
    """Build groups from synonym lines, appending English when no group contains ``en``."""
    groups: list[LanguageGroup] = []
    for line in lines or ():
        group = parse_synonym_line(line)
        if group is not None:
            groups.append(group)
    if not any("en" in group for group in groups):
        groups.append(LanguageGroup(ENGLISH_FALLBACK))
    return groups


def filename_tokens(filename: str) -> list[str]:
    """Lower-cased tokens of ``filename`` with its final extension removed."""
    stem, _ = os.path.splitext(os.path.basename(filename))
    return lower_tokens(stem)


def find_language_group(tokens: Sequence[str], groups: Sequence[LanguageGroup]) -> LanguageGroup | None:
    for group in groups:
        if group.intersects(tokens):
            return group
    return None


def extended_language_code(tokens: Sequence[str]) -> str | None:
    token_set = set(tokens)
    for code, names in EXTENDED_LANGUAGE_MAP:
        if token_set & names:
            return code
    return None


class LanguageResolver:
    """Classifies filenames against one scan's language groups."""

    def __init__(self, synonym_lines: Iterable[object] | None, *, use_extended_map: bool = True) -> None:
        self.groups = build_language_groups(synonym_lines)
        self.use_extended_map = use_extended_map

    def classify(self, filename: str) -> LanguageClassification:
        tokens = filename_tokens(filename)
        group = find_language_group(tokens, self.groups)
        if group is not None:
            return LanguageClassification(code=group.canonical, group=group)
        if self.use_extended_map:
            code = extended_language_code(tokens)
            if code:
                return LanguageClassification(code=code, group=None)
        return LanguageClassification(code=UNDETERMINED, group=None)

    def detect(self, filename: str) -> str:
        return self.classify(filename).code

    def group_for(self, filename: str) -> LanguageGroup | None:
        return self.classify(filename).group


__all__ = [
    "ENGLISH_FALLBACK",
    "EXTENDED_LANGUAGE_MAP",
    "UNDETERMINED",
    "LanguageClassification",
    "LanguageGroup",
    "LanguageResolver",
    "build_language_groups",
    "extended_language_code",
    "filename_tokens",
    "find_language_group",
    "parse_synonym_line",
]
