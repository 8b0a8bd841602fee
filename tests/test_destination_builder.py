from __future__ import annotations

from pathlib import Path

import pytest

from subscout.destination_builder import build_destination, format_relative_destination, render_destination_name
from subscout.models import VideoItem


class TestRenderDestinationName:
    """Test plain placeholder replacement."""

    def test_default_pattern(self) -> None:
        assert render_destination_name("%fn%.%l%.%fe%", "Movie", "fra", "srt") == "Movie.fra.srt"

    def test_regex_characters_are_not_special(self) -> None:
        rendered = render_destination_name("%fn%.%l%.%fe%", "Movie (2020) [$1]", "und", "ass")
        assert rendered == "Movie (2020) [$1].und.ass"

    def test_pattern_without_placeholders(self) -> None:
        assert render_destination_name("fixed.srt", "Movie", "eng", "srt") == "fixed.srt"


class TestBuildDestination:
    """Test destination paths relative to the video directory."""

    def test_resolves_next_to_video(self, tmp_path: Path) -> None:
        video = VideoItem.from_path(tmp_path / "Movie.mkv")
        assert build_destination(video, "%fn%.%l%.%fe%", "fra", "srt") == tmp_path / "Movie.fra.srt"

    def test_allows_subdirectories(self, tmp_path: Path) -> None:
        video = VideoItem.from_path(tmp_path / "Movie.mkv")
        destination = build_destination(video, "Subs/%fn%.%l%.%fe%", "eng", "srt")
        assert destination == tmp_path / "Subs" / "Movie.eng.srt"

    def test_rejects_escaping_pattern(self, tmp_path: Path) -> None:
        video = VideoItem.from_path(tmp_path / "media" / "Movie.mkv")
        with pytest.raises(ValueError, match="escapes"):
            build_destination(video, "../%fn%.%fe%", "eng", "srt")

    def test_rejects_empty_pattern(self, tmp_path: Path) -> None:
        video = VideoItem.from_path(tmp_path / "Movie.mkv")
        with pytest.raises(ValueError, match="empty"):
            build_destination(video, "   ", "eng", "srt")


class TestFormatRelativeDestination:
    """Test format_relative_destination function."""

    def test_relative_inside(self, tmp_path: Path) -> None:
        assert format_relative_destination(tmp_path / "Subs" / "a.srt", tmp_path) == str(Path("Subs") / "a.srt")

    def test_absolute_outside(self, tmp_path: Path) -> None:
        outside = tmp_path.parent / "elsewhere.srt"
        assert format_relative_destination(outside, tmp_path) == str(outside)


class TestUnresolvableDestination:
    """Resolution failures surface as ValueError."""

    @pytest.mark.parametrize("error", [RuntimeError("Symlink loop"), OSError(36, "File name too long")])
    def test_resolution_errors_become_value_errors(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, error: Exception
    ) -> None:
        video = VideoItem.from_path(tmp_path / "Movie.mkv")

        def failing_resolve(self, *args, **kwargs):
            raise error

        monkeypatch.setattr(Path, "resolve", failing_resolve)

        with pytest.raises(ValueError, match="cannot be resolved"):
            build_destination(video, "%fn%.%l%.%fe%", "fra", "srt")
