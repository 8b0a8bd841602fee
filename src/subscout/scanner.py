from __future__ import annotations

import enum
import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from rich.progress import Progress

from .catalog import VideoCatalog
from .config import ConfigStore, ScanConfig
from .destination_builder import build_destination, format_relative_destination
from .file_discovery import gather_subtitle_candidates
from .logging_utils import render_fields_block
from .match_handler import handle_match
from .matcher import LanguageResolver, compile_templates, evaluate_candidate
from .matcher.templates import TemplateMatcher
from .models import ScanReport, ScanStats, SubtitleMatch, VideoItem
from .run_summary import log_scan_start, log_scan_summary

LOGGER = logging.getLogger(__name__)


class SubScoutError(Exception):
    """Base class for errors surfaced to callers of the scanner."""


class ConfigurationRequiredError(SubScoutError, ValueError):
    """Raised when a scan is requested without a configuration."""


class CancellationSignal(Protocol):
    def is_set(self) -> bool: ...


class ScanPhase(enum.Enum):
    IDLE = "idle"
    FILTERING = "filtering"
    PER_ITEM = "per-item"
    AGGREGATING = "aggregating"
    DONE = "done"


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle.casefold() in haystack.casefold()


def filter_videos(videos: Iterable[VideoItem], config: ScanConfig) -> list[VideoItem]:
    """Apply the optional case-insensitive path and name substring filters."""
    only_path = (config.only_path_contains or "").strip()
    only_name = (config.only_name_contains or "").strip()
    selected: list[VideoItem] = []
    for video in videos:
        if only_path and not _contains(str(video.path), only_path):
            continue
        if only_name and not _contains(video.name, only_name):
            continue
        selected.append(video)
    return selected


class Scanner:
    """Finds subtitles near every catalog video and places them next to it.

    ``run_once`` takes the configuration by value. ``run`` fetches the live
    configuration from the config store and delegates to ``run_once``.
    """

    def __init__(self, catalog: VideoCatalog, config_store: ConfigStore | None = None) -> None:
        self.catalog = catalog
        self.config_store = config_store
        self.phase = ScanPhase.IDLE

    @staticmethod
    def _format_log(event: str, fields: dict[str, object] | None = None) -> str:
        return render_fields_block(event, fields or {}, pad_top=False)

    def run(self, *, dry_run: bool = False, cancel_event: CancellationSignal | None = None) -> ScanReport:
        config = self.config_store.load_scan_config() if self.config_store is not None else ScanConfig()
        return self.run_once(config, dry_run=dry_run, cancel_event=cancel_event)

    def run_once(
        self,
        config: ScanConfig | None,
        *,
        dry_run: bool = False,
        cancel_event: CancellationSignal | None = None,
    ) -> ScanReport:
        return self.scan(config, dry_run=dry_run, cancel_event=cancel_event).to_report()

    def scan(
        self,
        config: ScanConfig | None,
        *,
        dry_run: bool = False,
        cancel_event: CancellationSignal | None = None,
    ) -> ScanStats:
        if config is None:
            raise ConfigurationRequiredError("A scan configuration is required")

        stats = ScanStats()
        run_started = time.perf_counter()
        log_scan_start(config, dry_run=dry_run)

        matchers = self._compile_templates(config, stats)
        resolver = LanguageResolver(config.language_synonyms, use_extended_map=config.use_extended_language_map)

        self.phase = ScanPhase.FILTERING
        videos = filter_videos(self.catalog.iter_videos(), config)

        self.phase = ScanPhase.PER_ITEM
        with Progress(disable=not LOGGER.isEnabledFor(logging.INFO)) as progress:
            task_id = progress.add_task("Scanning", total=len(videos))
            for video in videos:
                if cancel_event is not None and cancel_event.is_set():
                    stats.cancelled = True
                    LOGGER.info(
                        self._format_log(
                            "Subtitle Scan Cancelled",
                            {"Remaining": len(videos) - stats.items_visited},
                        )
                    )
                    break
                stats.register_visited()
                self._process_video(video, config, matchers, resolver, stats, dry_run=dry_run)
                progress.advance(task_id)

        self.phase = ScanPhase.AGGREGATING
        log_scan_summary(stats, elapsed=time.perf_counter() - run_started)
        self.phase = ScanPhase.DONE
        return stats

    def _compile_templates(self, config: ScanConfig, stats: ScanStats) -> list[TemplateMatcher]:
        matchers, failures = compile_templates(config.templates or [])
        for failure in failures:
            LOGGER.warning(
                self._format_log(
                    "Template Compile Failed",
                    {"Template": repr(failure.template), "Reason": failure.reason},
                )
            )
            stats.register_warning(f"Template {failure.template!r} ignored: {failure.reason}")
        return matchers

    def _process_video(
        self,
        video: VideoItem,
        config: ScanConfig,
        matchers: list[TemplateMatcher],
        resolver: LanguageResolver,
        stats: ScanStats,
        *,
        dry_run: bool,
    ) -> None:
        try:
            exists = video.path.is_file()
        except OSError:
            exists = False
        if not exists:
            return

        candidates = gather_subtitle_candidates(
            video.directory,
            config.extensions or [],
            allow_deep_match=config.allow_deep_match,
            max_depth=config.max_depth or 0,
        )
        stats.register_candidates(len(candidates))

        for candidate in candidates:
            match = self._decide(video, candidate, config, matchers, resolver, stats)
            if match is None:
                continue
            stats.register_match(match)
            LOGGER.info(
                self._format_log(
                    "Subtitle Matched",
                    {
                        "Media": video.path.name,
                        "Subtitle": format_relative_destination(candidate, video.directory),
                        "Language": match.language,
                        "Destination": match.destination_path,
                    },
                )
            )
            if not dry_run:
                handle_match(match, config, stats)

    def _decide(
        self,
        video: VideoItem,
        candidate: Path,
        config: ScanConfig,
        matchers: list[TemplateMatcher],
        resolver: LanguageResolver,
        stats: ScanStats,
    ) -> SubtitleMatch | None:
        decision = evaluate_candidate(video, candidate, matchers, resolver)
        if not decision.matched:
            return None

        try:
            destination = build_destination(video, config.destination_pattern, decision.language, decision.extension)
        except ValueError as exc:
            LOGGER.warning(
                self._format_log(
                    "Skipping Subtitle With Invalid Destination",
                    {"Subtitle": candidate, "Error": exc},
                )
            )
            stats.register_skipped(f"{candidate}: {exc}", is_error=True)
            return None

        return SubtitleMatch(
            video=video,
            source_path=candidate,
            destination_path=destination,
            language=decision.language,
            extension=decision.extension,
            template_hit=decision.template_hit,
            looks_related=decision.looks_related,
        )
