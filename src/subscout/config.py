from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .utils import dedupe_casefold, load_yaml_file

LOGGER = logging.getLogger(__name__)

DEFAULT_TEMPLATES: tuple[str, ...] = (
    "%fn%.%l%.%fe%",
    "%fn%_%l%.%fe%",
    "%fn%.%fe%",
    "Subs/%fn%.%l%.%fe%",
    "Subs/%fn%_%l%.%fe%",
    "Subs/%fn%.%fe%",
    "Subs/%fn%/%n%_%l%.%fe%",
    "Subs/%fn%/%any%.%fe%",
    "Subs/%any%/%any%.%fe%",
)

DEFAULT_SUBTITLE_EXTENSIONS: tuple[str, ...] = (".srt", ".ass", ".ssa", ".vtt", ".sub", ".idx")

DEFAULT_LANGUAGE_SYNONYMS: tuple[str, ...] = (
    "en|eng|english",
    "fr|fra|fre|french",
    "de|ger|deu|german",
    "es|spa|spanish",
    "it|ita|italian",
    "pt|por|portuguese",
    "sv|swe|swedish",
    "da|dan|dansk|danish",
    "nl|dut|nld|dutch",
    "pl|pol|polish",
    "ru|rus|russian",
    "zh|chi|zho|chinese|chs|cht",
    "ja|jpn|japanese",
    "ko|kor|korean",
)

DEFAULT_VIDEO_EXTENSIONS: tuple[str, ...] = (".mkv", ".mp4", ".m4v", ".avi", ".ts", ".mov", ".wmv")

DEFAULT_DESTINATION_PATTERN = "%fn%.%l%.%fe%"
DEFAULT_DEBOUNCE_SECONDS = 8.0


@dataclass
class ScanConfig:
    """Configuration snapshot handed by value to every scan."""

    templates: list[str] = field(default_factory=lambda: list(DEFAULT_TEMPLATES))
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_SUBTITLE_EXTENSIONS))
    language_synonyms: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGE_SYNONYMS))
    allow_deep_match: bool = True
    max_depth: int = 0  # 0 = unbounded
    use_extended_language_map: bool = True
    only_path_contains: str = ""
    only_name_contains: str = ""
    copy_to_media_folder: bool = True
    move_instead_of_copy: bool = False
    overwrite_existing: bool = False
    destination_pattern: str = DEFAULT_DESTINATION_PATTERN


@dataclass
class WatcherSettings:
    enabled: bool = False
    paths: list[str] = field(default_factory=list)
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS


@dataclass
class Settings:
    library_dirs: list[Path] = field(default_factory=list)
    video_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))
    dry_run: bool = False
    file_watcher: WatcherSettings = field(default_factory=WatcherSettings)


@dataclass
class AppConfig:
    settings: Settings
    scan: ScanConfig


def _clean_list(values: Any) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    cleaned = [str(value).strip() for value in values if value is not None]
    return dedupe_casefold([value for value in cleaned if value])


def normalize_scan_config(config: ScanConfig) -> ScanConfig:
    """Return a cleaned copy of ``config``.

    List entries are trimmed and de-duplicated, misfiled entries are moved
    between the extension and synonym lists, and empty lists or a blank
    destination pattern fall back to the defaults.
    """
    templates = _clean_list(config.templates)
    extensions = _clean_list(config.extensions)
    synonyms = _clean_list(config.language_synonyms)

    misfiled_languages = [value for value in extensions if "|" in value]
    if misfiled_languages:
        synonyms = dedupe_casefold(synonyms + misfiled_languages)
        extensions = [value for value in extensions if "|" not in value]

    misfiled_extensions = [value for value in synonyms if value.startswith(".")]
    if misfiled_extensions:
        extensions = dedupe_casefold(extensions + misfiled_extensions)
        synonyms = [value for value in synonyms if not value.startswith(".")]

    destination = (config.destination_pattern or "").strip() or DEFAULT_DESTINATION_PATTERN

    return replace(
        config,
        templates=templates or list(DEFAULT_TEMPLATES),
        extensions=extensions or list(DEFAULT_SUBTITLE_EXTENSIONS),
        language_synonyms=synonyms or list(DEFAULT_LANGUAGE_SYNONYMS),
        max_depth=max(int(config.max_depth or 0), 0),
        only_path_contains=(config.only_path_contains or "").strip(),
        only_name_contains=(config.only_name_contains or "").strip(),
        destination_pattern=destination,
    )


def _build_scan_config(data: dict[str, Any]) -> ScanConfig:
    if not data:
        return ScanConfig()
    if not isinstance(data, dict):
        raise ValueError("'scan' must be provided as a mapping when specified")

    defaults = ScanConfig()
    try:
        max_depth = int(data.get("max_depth", defaults.max_depth) or 0)
    except (TypeError, ValueError) as exc:  # noqa: PERF203
        raise ValueError("'scan.max_depth' must be an integer") from exc

    return ScanConfig(
        templates=_clean_list(data.get("templates")) or list(defaults.templates),
        extensions=_clean_list(data.get("extensions")) or list(defaults.extensions),
        language_synonyms=_clean_list(data.get("language_synonyms")) or list(defaults.language_synonyms),
        allow_deep_match=bool(data.get("allow_deep_match", defaults.allow_deep_match)),
        max_depth=max_depth,
        use_extended_language_map=bool(data.get("use_extended_language_map", defaults.use_extended_language_map)),
        only_path_contains=str(data.get("only_path_contains") or ""),
        only_name_contains=str(data.get("only_name_contains") or ""),
        copy_to_media_folder=bool(data.get("copy_to_media_folder", defaults.copy_to_media_folder)),
        move_instead_of_copy=bool(data.get("move_instead_of_copy", defaults.move_instead_of_copy)),
        overwrite_existing=bool(data.get("overwrite_existing", defaults.overwrite_existing)),
        destination_pattern=str(data.get("destination_pattern") or defaults.destination_pattern),
    )


def _build_watcher_settings(data: dict[str, Any]) -> WatcherSettings:
    if not data:
        return WatcherSettings()
    if not isinstance(data, dict):
        raise ValueError("'file_watcher' must be provided as a mapping when specified")

    try:
        debounce = float(data.get("debounce_seconds", DEFAULT_DEBOUNCE_SECONDS))
    except (TypeError, ValueError) as exc:  # noqa: PERF203
        raise ValueError("'file_watcher.debounce_seconds' must be a number") from exc
    if debounce < 0:
        raise ValueError("'file_watcher.debounce_seconds' must be greater than or equal to 0")

    return WatcherSettings(
        enabled=bool(data.get("enabled", False)),
        paths=_clean_list(data.get("paths")),
        debounce_seconds=debounce,
    )


def _build_settings(data: dict[str, Any], base_dir: Path) -> Settings:
    if not data:
        return Settings()
    if not isinstance(data, dict):
        raise ValueError("'settings' must be provided as a mapping when specified")

    library_dirs: list[Path] = []
    for raw in _clean_list(data.get("library_dirs")):
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = base_dir / path
        library_dirs.append(path)

    video_extensions = _clean_list(data.get("video_extensions")) or list(DEFAULT_VIDEO_EXTENSIONS)

    return Settings(
        library_dirs=library_dirs,
        video_extensions=video_extensions,
        dry_run=bool(data.get("dry_run", False)),
        file_watcher=_build_watcher_settings(data.get("file_watcher", {})),
    )


def build_app_config(data: dict[str, Any], *, base_dir: Path | None = None) -> AppConfig:
    base = base_dir or Path.cwd()
    settings = _build_settings(data.get("settings", {}), base)
    scan = normalize_scan_config(_build_scan_config(data.get("scan", {})))
    return AppConfig(settings=settings, scan=scan)


def load_config(path: Path) -> AppConfig:
    data = load_yaml_file(path)
    return build_app_config(data, base_dir=path.parent)


class ConfigStore:
    """Live configuration source backed by a YAML file.

    Each ``load`` re-reads the file, so edits made between scans are picked up.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> AppConfig:
        config = load_config(self.path)
        LOGGER.debug("Loaded configuration from %s", self.path)
        return config

    def load_scan_config(self) -> ScanConfig:
        return self.load().scan
