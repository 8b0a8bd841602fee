"""Destination path building for matched subtitles.

The destination pattern (``%fn%.%l%.%fe%`` by default) is rendered by plain
string replacement, never through a regex, and resolved against the
directory of the video the subtitle belongs to.
"""

from __future__ import annotations

from pathlib import Path

from .models import VideoItem

DESTINATION_PLACEHOLDERS = ("%fn%", "%l%", "%fe%")


def render_destination_name(pattern: str, video_base: str, language: str, extension: str) -> str:
    """Substitute ``%fn%``, ``%l%`` and ``%fe%`` into ``pattern``.

    Args:
        pattern: Destination filename pattern
        video_base: Video filename without extension
        language: Detected language code (``und`` when undetermined)
        extension: Subtitle extension without the leading dot

    Returns:
        The rendered filename, possibly containing relative directory components
    """
    return (
        pattern.replace("%fn%", video_base)
        .replace("%l%", language)
        .replace("%fe%", extension)
    )


def build_destination(video: VideoItem, pattern: str, language: str, extension: str) -> Path:
    """Build the destination path for a subtitle of ``video``.

    Raises:
        ValueError: If the rendered pattern is empty, cannot be resolved (symlink loop,
            unreadable path) or resolves outside the video directory
    """
    rendered = render_destination_name(pattern, video.base_name, language, extension).strip()
    if not rendered:
        raise ValueError(f"destination pattern {pattern!r} renders to an empty filename")

    destination = video.directory / rendered

    try:
        base_dir = video.directory.resolve()
        destination_resolved = destination.resolve(strict=False)
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"destination {destination} cannot be resolved: {exc}") from exc
    if not destination_resolved.is_relative_to(base_dir):
        raise ValueError(f"destination {destination_resolved} escapes media folder {base_dir}")

    return destination


def format_relative_destination(destination: Path, media_dir: Path) -> str:
    """Format destination path as relative to the media directory.

    Returns:
        Relative path string if possible, absolute path string otherwise
    """
    try:
        relative = destination.relative_to(media_dir)
    except ValueError:
        return str(destination)
    return str(relative)
