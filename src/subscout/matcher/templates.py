"""Subtitle location templates compiled into case-insensitive matchers.

A template such as ``Subs/%fn%/%n%_%l%.%fe%`` describes where a subtitle may
live relative to its video. Literal text is escaped first and placeholders
are then replaced by regex fragments:

``%fn%``
    the video base name, matched literally
``%l%``
    an alternation over the synonyms of the language detected in the
    candidate's name, or the canonical code when no group matched
``%fe%``
    the candidate's extension without the dot
``%n%``
    a run of digits
``%any%``
    any run of characters other than a path separator

``/`` and ``\\`` in a template match either separator. A template hits a
candidate when its pattern fully matches either the candidate's path
relative to the video directory or the candidate's bare filename.

:func:`compile_template` never raises. Failures come back as a
:class:`TemplateCompileError`, which behaves as a matcher that never hits;
logging them is left to the caller.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .languages import LanguageGroup

PLACEHOLDER_PATTERN = re.compile(r"%(fn|l|fe|n|any)%")
SEPARATORS = ("/", "\\")
SEPARATOR_FRAGMENT = r"[/\\]"
DIGITS_FRAGMENT = r"[0-9]+"
ANY_FRAGMENT = r"[^/\\]+"

_LITERAL = "literal"
_PLACEHOLDER = "placeholder"
_SEPARATOR = "separator"


@dataclass(frozen=True, slots=True)
class TemplateSubject:
    """The values a template is tested against for one (video, candidate) pair."""

    video_base: str
    language_pattern: str
    extension: str
    relative_path: str
    filename: str


@dataclass(frozen=True, slots=True)
class TemplateCompileError:
    template: object
    reason: str

    def matches(self, subject: TemplateSubject) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class TemplateMatcher:
    template: str
    segments: tuple[tuple[str, str], ...]

    def render_pattern(self, subject: TemplateSubject) -> str:
        parts: list[str] = []
        for kind, value in self.segments:
            if kind == _LITERAL:
                parts.append(re.escape(value))
            elif kind == _SEPARATOR:
                parts.append(SEPARATOR_FRAGMENT)
            elif value == "fn":
                parts.append(re.escape(subject.video_base))
            elif value == "l":
                parts.append(subject.language_pattern)
            elif value == "fe":
                parts.append(re.escape(subject.extension))
            elif value == "n":
                parts.append(DIGITS_FRAGMENT)
            else:
                parts.append(ANY_FRAGMENT)
        return "".join(parts)

    def matches(self, subject: TemplateSubject) -> bool:
        try:
            regex = _compile_regex(self.render_pattern(subject))
        except re.error:
            return False
        return bool(regex.fullmatch(subject.relative_path) or regex.fullmatch(subject.filename))


CompiledTemplate = Union[TemplateMatcher, TemplateCompileError]


@functools.lru_cache(maxsize=1024)
def _compile_regex(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _literal_segments(text: str) -> list[tuple[str, str]]:
    segments: list[tuple[str, str]] = []
    buffer: list[str] = []
    for char in text:
        if char in SEPARATORS:
            if buffer:
                segments.append((_LITERAL, "".join(buffer)))
                buffer = []
            segments.append((_SEPARATOR, char))
        else:
            buffer.append(char)
    if buffer:
        segments.append((_LITERAL, "".join(buffer)))
    return segments


def _parse_segments(template: str) -> tuple[tuple[str, str], ...]:
    segments: list[tuple[str, str]] = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(template):
        segments.extend(_literal_segments(template[position : match.start()]))
        segments.append((_PLACEHOLDER, match.group(1)))
        position = match.end()
    segments.extend(_literal_segments(template[position:]))
    return tuple(segments)


_PROBE_SUBJECT = TemplateSubject(
    video_base="Probe (2000) [x]",
    language_pattern="(?:en|eng)",
    extension="srt",
    relative_path="Probe (2000) [x].en.srt",
    filename="Probe (2000) [x].en.srt",
)


def compile_template(template: object) -> CompiledTemplate:
    """Compile ``template`` into a matcher, or a compile error that never matches."""
    if not isinstance(template, str):
        return TemplateCompileError(template=template, reason=f"template must be a string, got {type(template).__name__}")
    if not template.strip():
        return TemplateCompileError(template=template, reason="template is empty")
    try:
        matcher = TemplateMatcher(template=template, segments=_parse_segments(template.strip()))
        _compile_regex(matcher.render_pattern(_PROBE_SUBJECT))
    except (re.error, ValueError, TypeError) as exc:
        return TemplateCompileError(template=template, reason=str(exc))
    return matcher


def compile_templates(templates: Iterable[object]) -> tuple[list[TemplateMatcher], list[TemplateCompileError]]:
    matchers: list[TemplateMatcher] = []
    failures: list[TemplateCompileError] = []
    for template in templates:
        compiled = compile_template(template)
        if isinstance(compiled, TemplateCompileError):
            failures.append(compiled)
        else:
            matchers.append(compiled)
    return matchers, failures


def build_language_pattern(group: LanguageGroup | None, canonical: str) -> str:
    """Regex fragment substituted for ``%l%``."""
    if group is not None and group.tokens:
        return "(?:" + "|".join(re.escape(token) for token in group.tokens) + ")"
    return re.escape(canonical)


def relative_subject_path(candidate: Path, media_dir: Path) -> str:
    """Path of ``candidate`` relative to ``media_dir`` using ``/`` separators.

    Falls back to the bare filename when the candidate is not below the directory.
    """
    try:
        relative = candidate.relative_to(media_dir)
    except ValueError:
        return candidate.name
    return relative.as_posix().replace("\\", "/")


__all__ = [
    "CompiledTemplate",
    "TemplateCompileError",
    "TemplateMatcher",
    "TemplateSubject",
    "build_language_pattern",
    "compile_template",
    "compile_templates",
    "relative_subject_path",
]
