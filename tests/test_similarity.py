from __future__ import annotations

from subscout.matcher.similarity import looks_related, shared_tokens


class TestLooksRelated:
    """Test token-overlap relatedness."""

    def test_shared_token_is_related(self) -> None:
        assert looks_related("Show.S01E01", "Show.S01E01.en.srt")

    def test_no_shared_token(self) -> None:
        assert not looks_related("Movie", "fra.srt")

    def test_is_symmetric(self) -> None:
        pairs = [("Movie.2019", "2019-extras.srt"), ("Alpha", "beta.srt"), ("A_B", "b.c")]
        for left, right in pairs:
            assert looks_related(left, right) == looks_related(right, left)

    def test_ignores_case(self) -> None:
        assert looks_related("MOVIE", "movie.fra.srt")

    def test_empty_names(self) -> None:
        assert not looks_related("", "movie.srt")
        assert not looks_related("---", "...")

    def test_shared_tokens(self) -> None:
        assert shared_tokens("The.Movie.2019", "movie_2019_eng.srt") == frozenset({"movie", "2019"})
