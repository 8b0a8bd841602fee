from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml
from jsonschema import Draft7Validator

from .utils import load_yaml_file


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, path: str, message: str, code: str) -> None:
        self.errors.append(ValidationIssue(severity="error", path=path, message=message, code=code))

    def add_warning(self, path: str, message: str, code: str) -> None:
        self.warnings.append(ValidationIssue(severity="warning", path=path, message=message, code=code))


_STRING_LIST = {
    "oneOf": [
        {"type": "array", "items": {"type": "string"}},
        {"type": "string"},
    ]
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "settings": {
            "type": "object",
            "properties": {
                "library_dirs": _STRING_LIST,
                "video_extensions": _STRING_LIST,
                "dry_run": {"type": "boolean"},
                "file_watcher": {
                    "type": "object",
                    "properties": {
                        "enabled": {"type": "boolean"},
                        "paths": _STRING_LIST,
                        "debounce_seconds": {"type": ["number", "integer"], "minimum": 0},
                    },
                    "additionalProperties": True,
                },
            },
            "additionalProperties": True,
        },
        "scan": {
            "type": "object",
            "properties": {
                "templates": _STRING_LIST,
                "extensions": _STRING_LIST,
                "language_synonyms": _STRING_LIST,
                "allow_deep_match": {"type": "boolean"},
                "max_depth": {"type": "integer", "minimum": 0},
                "use_extended_language_map": {"type": "boolean"},
                "only_path_contains": {"type": ["string", "null"]},
                "only_name_contains": {"type": ["string", "null"]},
                "copy_to_media_folder": {"type": "boolean"},
                "move_instead_of_copy": {"type": "boolean"},
                "overwrite_existing": {"type": "boolean"},
                "destination_pattern": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    tokens: List[str] = []
    for part in path:
        if isinstance(part, int):
            if tokens:
                tokens[-1] = f"{tokens[-1]}[{part}]"
            else:
                tokens.append(f"[{part}]")
        else:
            tokens.append(str(part))
    return ".".join(tokens) if tokens else "<root>"


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate configuration data against schema and semantic rules."""
    report = ValidationReport()
    if not isinstance(data, dict):
        report.add_error("<root>", "Configuration must be a mapping", "schema")
        return report

    validator = Draft7Validator(CONFIG_SCHEMA)
    for error in sorted(validator.iter_errors(data), key=lambda exc: _format_jsonschema_path(exc.absolute_path)):
        report.add_error(_format_jsonschema_path(error.absolute_path), error.message, "schema")

    _validate_semantics(data, report)
    return report


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    scan = data.get("scan") or {}
    if not isinstance(scan, dict):
        return

    for index, template in enumerate(_as_list(scan.get("templates"))):
        if not isinstance(template, str):
            continue
        path = f"scan.templates[{index}]"
        if not template.strip():
            report.add_warning(path, "Blank template is ignored", "template-blank")
        elif "../" in template or "..\\" in template:
            report.add_error(path, f"Template '{template}' must not climb above the media folder", "template-parent")
        elif "\x00" in template:
            report.add_error(path, "Template contains a NUL character", "template-invalid")

    for index, extension in enumerate(_as_list(scan.get("extensions"))):
        if not isinstance(extension, str):
            continue
        path = f"scan.extensions[{index}]"
        cleaned = extension.strip()
        if "|" in cleaned:
            report.add_warning(path, f"'{cleaned}' looks like a language synonym line; it will be moved", "misfiled-language")
        elif cleaned and not cleaned.startswith("."):
            report.add_error(path, f"Extension '{cleaned}' must start with a dot", "extension-dot")

    for index, line in enumerate(_as_list(scan.get("language_synonyms"))):
        if isinstance(line, str) and line.strip().startswith("."):
            report.add_warning(
                f"scan.language_synonyms[{index}]",
                f"'{line.strip()}' looks like an extension; it will be moved",
                "misfiled-extension",
            )

    destination = scan.get("destination_pattern")
    if isinstance(destination, str) and ("../" in destination or "..\\" in destination):
        report.add_error(
            "scan.destination_pattern",
            "Destination pattern must stay inside the media folder",
            "destination-parent",
        )

    settings = data.get("settings") or {}
    if isinstance(settings, dict) and not _as_list(settings.get("library_dirs")):
        report.add_warning("settings.library_dirs", "No library directories configured", "no-libraries")


def validate_config_file(path: Path) -> ValidationReport:
    try:
        data = load_yaml_file(path)
    except (OSError, yaml.YAMLError) as exc:
        report = ValidationReport()
        report.add_error("<root>", f"Unable to read {path}: {exc}", "unreadable")
        return report
    return validate_config_data(data)


def format_issue(issue: ValidationIssue) -> str:
    return f"[{issue.severity.upper()}] {issue.path}: {issue.message} ({issue.code})"
