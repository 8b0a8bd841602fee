"""Logging of scan configuration and per-scan summaries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .logging_utils import LogBlockBuilder, render_fields_block

if TYPE_CHECKING:
    from .config import ScanConfig
    from .models import ScanStats

LOGGER = logging.getLogger(__name__)

MAX_DETAIL_LINES = 10


def log_scan_start(config: ScanConfig, *, dry_run: bool) -> None:
    LOGGER.info(
        render_fields_block(
            "Subtitle Scan Starting",
            {
                "Dry Run": dry_run,
                "Templates": len(config.templates or []),
                "Extensions": config.extensions or [],
                "Deep Match": config.allow_deep_match,
                "Max Depth": config.max_depth or "unbounded",
                "Extended Languages": config.use_extended_language_map,
                "Only Path": config.only_path_contains or "(any)",
                "Only Name": config.only_name_contains or "(any)",
                "Copy To Media": config.copy_to_media_folder,
                "Move": config.move_instead_of_copy,
                "Overwrite": config.overwrite_existing,
                "Destination": config.destination_pattern,
            },
        )
    )


def _truncate(items: list[str]) -> list[str]:
    if len(items) <= MAX_DETAIL_LINES:
        return list(items)
    hidden = len(items) - MAX_DETAIL_LINES
    return list(items[:MAX_DETAIL_LINES]) + [f"(+{hidden} more)"]


def log_scan_summary(stats: ScanStats, *, elapsed: float | None = None) -> None:
    """Log the per-scan summary, including errors and skips at DEBUG detail."""
    title = "Subtitle Scan Cancelled" if stats.cancelled else "Subtitle Scan Complete"
    builder = LogBlockBuilder(title)
    fields: dict[str, object] = {
        "Visited": stats.items_visited,
        "Candidates": stats.sub_candidates,
        "Matches": stats.matches,
        "Writes": stats.writes,
        "Skipped": stats.skipped,
    }
    if elapsed is not None:
        fields["Elapsed"] = f"{elapsed:.2f}s"
    builder.add_fields(fields)
    if stats.errors:
        builder.add_section("Errors", _truncate(stats.errors))
    if stats.warnings:
        builder.add_section("Warnings", _truncate(stats.warnings))
    LOGGER.info(builder.render())

    if stats.skipped_details and LOGGER.isEnabledFor(logging.DEBUG):
        detail = LogBlockBuilder("Skipped Placements")
        detail.add_section("Destinations", _truncate(stats.skipped_details))
        LOGGER.debug(detail.render())
