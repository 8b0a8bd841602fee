"""Titled key/value log blocks and root logger setup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from textwrap import wrap

from rich.console import Console
from rich.logging import RichHandler

WRAP_WIDTH = 110
MAX_LABEL_WIDTH = 22
MIN_LABEL_WIDTH = 8
INDENT = "    "
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value)
    return str(value).strip()


def _wrapped(value: object, width: int) -> list[str]:
    return wrap(_stringify(value), width=width) or [""]


class LogBlockBuilder:
    """Accumulates a block: title, underline, aligned fields and bulleted sections."""

    def __init__(self, title: str, *, pad_top: bool = True) -> None:
        self.lines: list[str] = ([""] if pad_top else []) + [title, "-" * len(title)]

    def add_fields(self, fields: Mapping[str, object] | None) -> None:
        if not fields:
            return
        label_width = min(max(max(len(key) for key in fields), MIN_LABEL_WIDTH), MAX_LABEL_WIDTH)
        value_width = max(WRAP_WIDTH - len(INDENT) - label_width - 4, 32)
        for key, value in fields.items():
            first, *rest = _wrapped(value, value_width)
            self.lines.append(f"{INDENT}{key:<{label_width}}: {first}")
            self.lines.extend(f"{INDENT}{'':<{label_width}}  {line}" for line in rest)

    def add_section(self, heading: str, items: Iterable[object]) -> None:
        if self.lines[-1]:
            self.lines.append("")
        self.lines.append(f"{heading}:")
        entries = [item for item in items if item is not None]
        if not entries:
            self.lines.append(f"{INDENT}(none)")
        for item in entries:
            first, *rest = _wrapped(item, WRAP_WIDTH - len(INDENT) - 2)
            self.lines.append(f"{INDENT}- {first}")
            self.lines.extend(f"{INDENT}  {line}" for line in rest)

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: Mapping[str, object], *, pad_top: bool = True) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    return builder.render()


def configure_logging(
    level: int | str = logging.INFO,
    *,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """Install a rich console handler (and optionally a plain file handler) on the root logger.

    Calling this more than once replaces the handlers installed previously.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_subscout_handler", False):
            root.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler._subscout_handler = True  # type: ignore[attr-defined]
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        file_handler._subscout_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(min(level, logging.DEBUG) if log_file is not None else level)
