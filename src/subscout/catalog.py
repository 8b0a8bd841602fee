"""Video catalogs consumed by the scanner.

A catalog is anything with an ``iter_videos()`` method yielding
:class:`~subscout.models.VideoItem` objects. The scanner itself decides
which of them still exist on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Protocol

from .config import DEFAULT_VIDEO_EXTENSIONS, ConfigStore, Settings
from .file_discovery import gather_video_files
from .models import VideoItem

LOGGER = logging.getLogger(__name__)


class VideoCatalog(Protocol):
    def iter_videos(self) -> Iterable[VideoItem]: ...


class StaticCatalog:
    """Catalog over a fixed list of videos supplied by a host application."""

    def __init__(self, videos: Iterable[VideoItem | Path | str]) -> None:
        self._videos = [video if isinstance(video, VideoItem) else VideoItem.from_path(Path(video)) for video in videos]

    def iter_videos(self) -> Iterator[VideoItem]:
        return iter(list(self._videos))


class FilesystemCatalog:
    """Catalog enumerating video files beneath library directories on each call."""

    def __init__(self, library_dirs: Sequence[Path], video_extensions: Sequence[str] = DEFAULT_VIDEO_EXTENSIONS) -> None:
        self.library_dirs = [Path(path) for path in library_dirs]
        self.video_extensions = list(video_extensions)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilesystemCatalog":
        return cls(settings.library_dirs, settings.video_extensions)

    def iter_videos(self) -> Iterator[VideoItem]:
        seen: set[Path] = set()
        for library_dir in self.library_dirs:
            for path in gather_video_files(library_dir, self.video_extensions):
                if path in seen:
                    continue
                seen.add(path)
                yield VideoItem.from_path(path)


class ConfiguredCatalog:
    """Filesystem catalog that re-reads ``settings`` from the config store on every scan.

    Edits to ``library_dirs`` or ``video_extensions`` apply to the next scan
    without a restart.
    """

    def __init__(self, config_store: ConfigStore) -> None:
        self.config_store = config_store

    def iter_videos(self) -> Iterator[VideoItem]:
        settings = self.config_store.load().settings
        return FilesystemCatalog.from_settings(settings).iter_videos()
