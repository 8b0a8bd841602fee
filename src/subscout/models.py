from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True, slots=True)
class VideoItem:
    """A video known to the catalog. Never mutated by a scan."""

    path: Path
    directory: Path
    base_name: str
    name: str

    @classmethod
    def from_path(cls, path: Path, name: Optional[str] = None) -> "VideoItem":
        path = Path(path)
        return cls(
            path=path,
            directory=path.parent,
            base_name=path.stem,
            name=name if name is not None else path.stem,
        )


@dataclass(frozen=True, slots=True)
class SubtitleMatch:
    video: VideoItem
    source_path: Path
    destination_path: Path
    language: str
    extension: str
    template_hit: bool
    looks_related: bool


@dataclass(frozen=True, slots=True)
class ScanReport:
    items_visited: int = 0
    sub_candidates: int = 0
    matches: int = 0
    writes: int = 0
    cancelled: bool = False

    def as_dict(self) -> Dict[str, int]:
        return {
            "itemsVisited": self.items_visited,
            "subCandidates": self.sub_candidates,
            "matches": self.matches,
            "writesOrPlanned": self.writes,
        }


@dataclass(slots=True)
class ScanStats:
    """Mutable counters accumulated while a single scan runs."""

    items_visited: int = 0
    sub_candidates: int = 0
    matches: int = 0
    writes: int = 0
    skipped: int = 0
    cancelled: bool = False
    matched: List[SubtitleMatch] = field(default_factory=list)
    skipped_details: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def register_visited(self) -> None:
        self.items_visited += 1

    def register_candidates(self, count: int) -> None:
        self.sub_candidates += count

    def register_match(self, match: SubtitleMatch) -> None:
        self.matches += 1
        self.matched.append(match)

    def register_write(self) -> None:
        self.writes += 1

    def register_skipped(self, reason: str, *, is_error: bool = False) -> None:
        self.skipped += 1
        self.skipped_details.append(reason)
        if is_error:
            self.register_error(reason)

    def register_warning(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    def register_error(self, message: str) -> None:
        self.errors.append(message)

    def to_report(self) -> ScanReport:
        return ScanReport(
            items_visited=self.items_visited,
            sub_candidates=self.sub_candidates,
            matches=self.matches,
            writes=self.writes,
            cancelled=self.cancelled,
        )
