"""Version detection with support for development builds."""

from __future__ import annotations

import os
import subprocess
from importlib import metadata

# Fallback version if nothing else works
_FALLBACK_VERSION = "unknown"
_DISTRIBUTION = "subscout"


def _get_git_sha() -> str | None:
    """Get the short Git SHA if running from a checkout."""
    try:
        sha = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    return sha.stdout.strip() if sha.returncode == 0 else None


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. Installed distribution metadata
    3. Git short SHA from a local checkout
    4. Fallback to "unknown"
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version:
        return build_version.strip()

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        pass

    sha = _get_git_sha()
    if sha:
        return f"dev ({sha})"

    return _FALLBACK_VERSION


# Cache the version on module load
__version__ = get_version()
