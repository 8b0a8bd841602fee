"""Token-overlap relatedness between a video and a subtitle filename."""

from __future__ import annotations

from ..utils import lower_tokens


def token_set(value: str) -> frozenset[str]:
    return frozenset(lower_tokens(value))


def shared_tokens(video_base_name: str, subtitle_filename: str) -> frozenset[str]:
    return token_set(video_base_name) & token_set(subtitle_filename)


def looks_related(video_base_name: str, subtitle_filename: str) -> bool:
    """True when the two names share at least one alphanumeric token, ignoring case.

    A shared year or release-group tag is enough.
    """
    return bool(shared_tokens(video_base_name, subtitle_filename))
