from __future__ import annotations

from subscout.config import DEFAULT_LANGUAGE_SYNONYMS
from subscout.matcher.languages import (
    UNDETERMINED,
    LanguageGroup,
    LanguageResolver,
    build_language_groups,
    extended_language_code,
    filename_tokens,
    find_language_group,
    parse_synonym_line,
)


class TestParseSynonymLine:
    """Test parse_synonym_line function."""

    def test_splits_trims_and_lowercases(self) -> None:
        group = parse_synonym_line(" FR | fra|Fre |french ")
        assert group is not None
        assert group.tokens == ("fr", "fra", "fre", "french")

    def test_drops_empty_entries(self) -> None:
        group = parse_synonym_line("en||eng| |english|")
        assert group is not None
        assert group.tokens == ("en", "eng", "english")

    def test_blank_line_yields_nothing(self) -> None:
        assert parse_synonym_line("   ") is None
        assert parse_synonym_line("|||") is None

    def test_non_string_yields_nothing(self) -> None:
        assert parse_synonym_line(None) is None
        assert parse_synonym_line(42) is None


class TestLanguageGroup:
    """Test canonical code selection."""

    def test_canonical_prefers_first_three_letter_token(self) -> None:
        assert LanguageGroup(("fr", "fra", "fre", "french")).canonical == "fra"
        assert LanguageGroup(("de", "ger", "deu", "german")).canonical == "ger"

    def test_canonical_falls_back_to_first_token(self) -> None:
        assert LanguageGroup(("english", "en")).canonical == "english"

    def test_membership(self) -> None:
        group = LanguageGroup(("en", "eng"))
        assert "eng" in group
        assert "fra" not in group


class TestBuildLanguageGroups:
    """Test build_language_groups function."""

    def test_keeps_configured_order(self) -> None:
        groups = build_language_groups(["fr|fra", "en|eng"])
        assert [group.tokens for group in groups] == [("fr", "fra"), ("en", "eng")]

    def test_appends_english_when_missing(self) -> None:
        groups = build_language_groups(["fr|fra|french"])
        assert groups[-1].tokens == ("en", "eng", "english")
        assert len(groups) == 2

    def test_does_not_duplicate_english(self) -> None:
        groups = build_language_groups(["en|eng|english", "fr|fra"])
        assert len(groups) == 2

    def test_none_yields_english_only(self) -> None:
        groups = build_language_groups(None)
        assert [group.tokens for group in groups] == [("en", "eng", "english")]

    def test_dirty_lines_do_not_crash(self) -> None:
        groups = build_language_groups([".srt", None, "", "sv|swe"])
        assert ("sv", "swe") in [group.tokens for group in groups]


class TestTokenization:
    """Test filename tokenization used by detection."""

    def test_strips_final_extension(self) -> None:
        assert filename_tokens("Show.S01E01.ENG.srt") == ["show", "s01e01", "eng"]

    def test_ignores_directories(self) -> None:
        assert filename_tokens("Subs/French_Forced.srt") == ["french", "forced"]

    def test_extension_is_not_a_token(self) -> None:
        assert filename_tokens("Movie.en") == ["movie"]


class TestLanguageResolver:
    """Test LanguageResolver detection and group lookup."""

    def test_detects_canonical_code(self) -> None:
        resolver = LanguageResolver(DEFAULT_LANGUAGE_SYNONYMS)
        assert resolver.detect("Movie.fre.srt") == "fra"
        assert resolver.detect("Movie.french.srt") == "fra"
        assert resolver.detect("Show.S01E01.eng.srt") == "eng"

    def test_group_order_wins_over_token_order(self) -> None:
        resolver = LanguageResolver(["de|ger|deu|german", "en|eng|english"])
        assert resolver.detect("Show.en.de.srt") == "ger"

    def test_undetermined_without_language_token(self) -> None:
        resolver = LanguageResolver(DEFAULT_LANGUAGE_SYNONYMS)
        assert resolver.detect("Movie.srt") == UNDETERMINED

    def test_extended_map_used_when_no_group_matches(self) -> None:
        resolver = LanguageResolver(["sv|swe|swedish"], use_extended_map=True)
        assert resolver.detect("Movie.danish.srt") == "dan"
        assert resolver.detect("Movie.spanish.srt") == "spa"

    def test_extended_map_disabled(self) -> None:
        resolver = LanguageResolver(["sv|swe|swedish"], use_extended_map=False)
        assert resolver.detect("Movie.danish.srt") == UNDETERMINED

    def test_english_fallback_group_always_detects_english(self) -> None:
        resolver = LanguageResolver(["fr|fra"], use_extended_map=False)
        assert resolver.detect("Movie.english.srt") == "eng"

    def test_detection_is_deterministic(self) -> None:
        resolver = LanguageResolver(DEFAULT_LANGUAGE_SYNONYMS)
        results = {resolver.detect("Film.2019.ita.forced.srt") for _ in range(10)}
        assert results == {"ita"}

    def test_group_lookup_matches_detection(self) -> None:
        resolver = LanguageResolver(DEFAULT_LANGUAGE_SYNONYMS)
        classification = resolver.classify("Movie.fre.srt")
        assert classification.group is not None
        assert "french" in classification.group
        assert classification.code == classification.group.canonical
        assert resolver.group_for("Movie.srt") is None


class TestHelpers:
    """Test module-level helpers."""

    def test_find_language_group_returns_first_configured(self) -> None:
        groups = build_language_groups(["es|spa", "en|eng"])
        group = find_language_group(["eng", "spa"], groups)
        assert group is not None
        assert group.tokens == ("es", "spa")

    def test_extended_language_code(self) -> None:
        assert extended_language_code(["movie", "german"]) == "deu"
        assert extended_language_code(["movie"]) is None
