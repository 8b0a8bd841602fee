"""Placement of matched subtitles next to their video.

This module applies the placement policy for a matched subtitle: discovery
only, skip when the destination exists, move, or copy. Filesystem failures
are logged and reported as "not written"; they never propagate to the scan.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ScanConfig
from .logging_utils import render_fields_block
from .models import ScanStats, SubtitleMatch
from .utils import ensure_directory

LOGGER = logging.getLogger(__name__)

REASON_DISCOVERY_ONLY = "discovery-only"
REASON_ALREADY_IN_PLACE = "already-in-place"
REASON_DESTINATION_EXISTS = "destination-exists"


@dataclass(frozen=True, slots=True)
class PlacementResult:
    written: bool
    reason: Optional[str] = None
    action: Optional[str] = None


def _is_same_file(source: Path, destination: Path) -> bool:
    try:
        return destination.exists() and source.samefile(destination)
    except OSError:
        return False


def place_subtitle(source: Path, destination: Path, *, move: bool = False, overwrite: bool = False) -> PlacementResult:
    """Copy or move ``source`` to ``destination``.

    An existing destination is left untouched unless ``overwrite`` is set.
    """
    if _is_same_file(source, destination):
        return PlacementResult(written=False, reason=REASON_ALREADY_IN_PLACE)

    try:
        if destination.exists() and not overwrite:
            return PlacementResult(written=False, reason=REASON_DESTINATION_EXISTS)

        ensure_directory(destination.parent)
        if move:
            if destination.exists():
                destination.unlink()
            shutil.move(str(source), str(destination))
            return PlacementResult(written=True, action="moved")
        shutil.copy2(source, destination)
    except OSError as exc:
        return PlacementResult(written=False, reason=str(exc) or exc.__class__.__name__)
    return PlacementResult(written=True, action="copied")


def handle_match(match: SubtitleMatch, config: ScanConfig, stats: ScanStats) -> PlacementResult:
    """Apply the configured placement policy to one matched subtitle and count the outcome."""
    if not config.copy_to_media_folder:
        return PlacementResult(written=False, reason=REASON_DISCOVERY_ONLY)

    result = place_subtitle(
        match.source_path,
        match.destination_path,
        move=config.move_instead_of_copy,
        overwrite=config.overwrite_existing,
    )

    if result.written:
        stats.register_write()
        LOGGER.info(
            render_fields_block(
                "Subtitle Moved" if result.action == "moved" else "Subtitle Copied",
                {
                    "Source": match.source_path,
                    "Destination": match.destination_path,
                },
                pad_top=False,
            )
        )
        return result

    if result.reason in (REASON_DESTINATION_EXISTS, REASON_ALREADY_IN_PLACE):
        LOGGER.info(
            render_fields_block(
                "Skipping Subtitle Placement",
                {
                    "Destination": match.destination_path,
                    "Reason": result.reason,
                },
                pad_top=False,
            )
        )
        stats.register_skipped(f"{match.destination_path}: {result.reason}")
        return result

    LOGGER.warning(
        render_fields_block(
            "Subtitle Placement Failed",
            {
                "Source": match.source_path,
                "Destination": match.destination_path,
                "Error": result.reason,
            },
            pad_top=False,
        )
    )
    stats.register_skipped(f"{match.source_path} -> {match.destination_path}: {result.reason}", is_error=True)
    return result
