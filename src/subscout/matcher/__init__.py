"""Matcher package deciding whether a nearby file is a video's subtitle.

This package provides:
- Template compilation and matching (``templates``)
- Language synonym groups and detection (``languages``)
- Token-overlap relatedness (``similarity``)

Public API:
- evaluate_candidate: Classify and decide a single candidate for a video

Example:
    from subscout.matcher import LanguageResolver, compile_templates, evaluate_candidate

    matchers, _ = compile_templates(config.templates)
    resolver = LanguageResolver(config.language_synonyms)
    decision = evaluate_candidate(video, candidate, matchers, resolver)
    if decision.matched:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..models import VideoItem
from .languages import LanguageClassification, LanguageResolver
from .similarity import looks_related
from .templates import (
    TemplateMatcher,
    TemplateSubject,
    build_language_pattern,
    compile_template,
    compile_templates,
    relative_subject_path,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CandidateDecision:
    language: str
    extension: str
    template_hit: bool
    looks_related: bool

    @property
    def matched(self) -> bool:
        return self.template_hit or self.looks_related


def build_subject(video: VideoItem, candidate: Path, classification: LanguageClassification) -> TemplateSubject:
    return TemplateSubject(
        video_base=video.base_name,
        language_pattern=build_language_pattern(classification.group, classification.code),
        extension=candidate.suffix[1:] if candidate.suffix.startswith(".") else candidate.suffix,
        relative_path=relative_subject_path(candidate, video.directory),
        filename=candidate.name,
    )


def evaluate_candidate(
    video: VideoItem,
    candidate: Path,
    matchers: Sequence[TemplateMatcher],
    resolver: LanguageResolver,
) -> CandidateDecision:
    classification = resolver.classify(candidate.name)
    subject = build_subject(video, candidate, classification)

    template_hit = False
    for matcher in matchers:
        hit = matcher.matches(subject)
        LOGGER.debug(
            "Template test: '%s' vs relative='%s' file='%s' -> %s",
            matcher.template,
            subject.relative_path,
            subject.filename,
            hit,
        )
        if hit:
            template_hit = True
            break

    return CandidateDecision(
        language=classification.code,
        extension=subject.extension,
        template_hit=template_hit,
        looks_related=looks_related(video.base_name, candidate.name),
    )


__all__ = [
    "CandidateDecision",
    "LanguageResolver",
    "build_subject",
    "compile_template",
    "compile_templates",
    "evaluate_candidate",
    "looks_related",
]
