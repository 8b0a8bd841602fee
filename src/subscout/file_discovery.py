"""Candidate subtitle discovery and video file discovery.

This module walks the directories around a video to collect files whose
extension is an accepted subtitle extension, and enumerates video files
beneath library directories for the filesystem catalog. Unreadable or
vanished directories contribute no files; they never abort a walk.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from .logging_utils import render_fields_block

LOGGER = logging.getLogger(__name__)

SUBS_DIRECTORY_NAME = "Subs"


def has_accepted_extension(name: str, extensions: Sequence[str]) -> bool:
    """Case-insensitive suffix test of ``name`` against ``extensions``."""
    lowered = name.lower()
    return any(ext and lowered.endswith(ext.lower()) for ext in extensions)


def _scan_directory(directory: Path) -> tuple[list[Path], list[Path]]:
    """Return ``(files, subdirectories)`` of ``directory``, both sorted by name.

    Directory symlinks are not followed.
    """
    files: list[Path] = []
    subdirectories: list[Path] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if entry.is_file():
                        files.append(Path(entry.path))
                    elif entry.is_dir(follow_symlinks=False):
                        subdirectories.append(Path(entry.path))
                except OSError:
                    continue
    except OSError as exc:
        LOGGER.debug("Unable to list %s: %s", directory, exc)
        return [], []
    files.sort(key=lambda path: path.name)
    subdirectories.sort(key=lambda path: path.name)
    return files, subdirectories


def iter_directory_files(root: Path, extensions: Sequence[str], max_depth: int = 0) -> Iterator[Path]:
    """Yield accepted files beneath ``root`` using an explicit work-list.

    Depth is counted from ``root`` (its own files are depth 0). ``max_depth``
    of 0 means unbounded; otherwise subdirectories deeper than ``max_depth``
    levels below ``root`` are not entered.
    """
    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        directory, depth = stack.pop()
        files, subdirectories = _scan_directory(directory)
        for path in files:
            if has_accepted_extension(path.name, extensions):
                yield path
        if max_depth > 0 and depth >= max_depth:
            continue
        for subdirectory in reversed(subdirectories):
            stack.append((subdirectory, depth + 1))


def iter_immediate_files(root: Path, extensions: Sequence[str]) -> Iterator[Path]:
    files, _ = _scan_directory(root)
    for path in files:
        if has_accepted_extension(path.name, extensions):
            yield path


def search_roots(video_dir: Path) -> list[Path]:
    roots = [video_dir]
    subs_dir = video_dir / SUBS_DIRECTORY_NAME
    try:
        if subs_dir.is_dir():
            roots.append(subs_dir)
    except OSError:
        pass
    return roots


def _dedupe_paths(paths: Iterable[Path]) -> list[Path]:
    seen: set[str] = set()
    unique: list[Path] = []
    for path in paths:
        key = str(path).casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(path)
    return unique


def gather_subtitle_candidates(
    video_dir: Path,
    extensions: Sequence[str],
    *,
    allow_deep_match: bool = False,
    max_depth: int = 0,
) -> list[Path]:
    """Collect candidate subtitle files around a video.

    Searches the video directory and its ``Subs`` subdirectory. With deep
    matching each search root is walked recursively up to ``max_depth``;
    otherwise only the immediate files of each root are considered. The
    result is de-duplicated case-insensitively in discovery order.
    """
    if not extensions:
        return []

    found: list[Path] = []
    for root in _dedupe_paths(search_roots(video_dir)):
        if allow_deep_match:
            found.extend(iter_directory_files(root, extensions, max_depth))
        else:
            found.extend(iter_immediate_files(root, extensions))
    return _dedupe_paths(found)


def skip_reason_for_video_file(path: Path) -> str | None:
    """Check if a video file should be skipped.

    Returns:
        A string describing why the file should be skipped, or None if it should be used
    """
    name = path.name
    if name.startswith("._") and len(name) > 2:
        return "macOS resource fork (._ prefix)"
    return None


def gather_video_files(library_dir: Path, video_extensions: Sequence[str]) -> Iterator[Path]:
    """Yield video files beneath ``library_dir``.

    Symlinks and macOS resource forks are skipped. A missing library directory
    is logged and yields nothing.
    """
    if not library_dir.exists():
        LOGGER.warning(
            render_fields_block(
                "Library Directory Missing",
                {"Path": library_dir},
                pad_top=True,
            )
        )
        return

    for path in sorted(library_dir.rglob("*")):
        if not path.is_file():
            continue
        if not has_accepted_extension(path.name, video_extensions):
            continue

        if path.is_symlink():
            LOGGER.debug(
                render_fields_block(
                    "Skipping Video File",
                    {"Path": path, "Reason": "symlink"},
                    pad_top=True,
                )
            )
            continue

        skip_reason = skip_reason_for_video_file(path)
        if skip_reason:
            LOGGER.debug(
                render_fields_block(
                    "Skipping Video File",
                    {"Path": path, "Reason": skip_reason},
                    pad_top=True,
                )
            )
            continue

        yield path
