from __future__ import annotations

import os
from pathlib import Path

import pytest

from subscout import file_discovery
from subscout.file_discovery import (
    gather_subtitle_candidates,
    gather_video_files,
    has_accepted_extension,
    iter_directory_files,
    skip_reason_for_video_file,
)


def touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    root = tmp_path / "Movie"
    touch(root / "Movie.mkv")
    touch(root / "Movie.en.srt")
    touch(root / "notes.txt")
    touch(root / "Subs" / "fra.srt")
    touch(root / "Subs" / "deep" / "a.srt")
    touch(root / "Subs" / "deep" / "deeper" / "b.srt")
    touch(root / "Extras" / "c.srt")
    return root


def relative_names(paths: list[Path], root: Path) -> set[str]:
    return {path.relative_to(root).as_posix() for path in paths}


class TestHasAcceptedExtension:
    """Test has_accepted_extension function."""

    def test_case_insensitive(self) -> None:
        assert has_accepted_extension("MOVIE.EN.SRT", [".srt"])
        assert has_accepted_extension("movie.srt", [".SRT"])

    def test_rejects_other_extensions(self) -> None:
        assert not has_accepted_extension("movie.txt", [".srt", ".ass"])

    def test_ignores_blank_extensions(self) -> None:
        assert not has_accepted_extension("movie.srt", [""])


class TestGatherSubtitleCandidates:
    """Test candidate discovery around a video."""

    def test_shallow_search_covers_video_dir_and_subs(self, media_dir: Path) -> None:
        found = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=False)
        assert relative_names(found, media_dir) == {"Movie.en.srt", "Subs/fra.srt"}

    def test_deep_search_is_unbounded_by_default(self, media_dir: Path) -> None:
        found = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True)
        assert relative_names(found, media_dir) == {
            "Movie.en.srt",
            "Subs/fra.srt",
            "Subs/deep/a.srt",
            "Subs/deep/deeper/b.srt",
            "Extras/c.srt",
        }

    def test_deep_search_yields_each_file_once(self, media_dir: Path) -> None:
        found = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True)
        assert len(found) == len(set(found))

    def test_max_depth_bounds_each_root(self, media_dir: Path) -> None:
        found = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True, max_depth=1)
        names = relative_names(found, media_dir)
        # depth is counted from each search root, so Subs/deep is one level below Subs
        assert names == {"Movie.en.srt", "Subs/fra.srt", "Extras/c.srt", "Subs/deep/a.srt"}
        assert "Subs/deep/deeper/b.srt" not in names

    def test_empty_extensions_find_nothing(self, media_dir: Path) -> None:
        assert gather_subtitle_candidates(media_dir, [], allow_deep_match=True) == []

    def test_discovery_order_is_deterministic(self, media_dir: Path) -> None:
        first = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True)
        second = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True)
        assert first == second

    def test_missing_directory_finds_nothing(self, tmp_path: Path) -> None:
        assert gather_subtitle_candidates(tmp_path / "gone", [".srt"], allow_deep_match=True) == []

    def test_unreadable_directory_is_skipped(self, media_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        real_scandir = os.scandir

        def guarded_scandir(path):
            if Path(path).name == "deep":
                raise PermissionError("denied")
            return real_scandir(path)

        monkeypatch.setattr(file_discovery.os, "scandir", guarded_scandir)

        found = gather_subtitle_candidates(media_dir, [".srt"], allow_deep_match=True)
        names = relative_names(found, media_dir)
        assert "Subs/fra.srt" in names
        assert "Extras/c.srt" in names
        assert not any(name.startswith("Subs/deep/") for name in names)


class TestIterDirectoryFiles:
    """Test the explicit work-list walk."""

    def test_very_deep_tree(self, tmp_path: Path) -> None:
        current = tmp_path
        for index in range(60):
            current = current / f"level{index}"
        target = touch(current / "deep.srt")

        assert list(iter_directory_files(tmp_path, [".srt"])) == [target]

    def test_bounded_walk_stops_at_max_depth(self, tmp_path: Path) -> None:
        touch(tmp_path / "top.srt")
        touch(tmp_path / "one" / "inner.srt")
        touch(tmp_path / "one" / "two" / "deeper.srt")

        found = list(iter_directory_files(tmp_path, [".srt"], max_depth=1))
        assert relative_names(found, tmp_path) == {"top.srt", "one/inner.srt"}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_directory_symlinks_are_not_followed(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        touch(outside / "stray.srt")
        root = tmp_path / "root"
        root.mkdir()
        try:
            (root / "link").symlink_to(outside, target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")

        assert list(iter_directory_files(root, [".srt"])) == []


class TestGatherVideoFiles:
    """Test gather_video_files function."""

    def test_finds_videos_recursively(self, tmp_path: Path) -> None:
        movie = touch(tmp_path / "Movies" / "Movie.mkv")
        episode = touch(tmp_path / "TV" / "Show" / "Show.S01E01.MP4")
        touch(tmp_path / "TV" / "Show" / "Show.S01E01.en.srt")

        assert sorted(gather_video_files(tmp_path, [".mkv", ".mp4"])) == sorted([movie, episode])

    def test_skips_resource_forks(self, tmp_path: Path) -> None:
        touch(tmp_path / "._Movie.mkv")
        movie = touch(tmp_path / "Movie.mkv")

        assert list(gather_video_files(tmp_path, [".mkv"])) == [movie]

    def test_missing_library_logs_warning(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING"):
            assert list(gather_video_files(tmp_path / "missing", [".mkv"])) == []
        assert "Library Directory Missing" in caplog.text

    def test_skip_reason(self) -> None:
        assert skip_reason_for_video_file(Path("._Movie.mkv")) is not None
        assert skip_reason_for_video_file(Path("Movie.mkv")) is None
