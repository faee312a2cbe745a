"""HTTP URL checks shared by the normalizer and asset materializer."""

from __future__ import annotations

from core.constants import HTTP_URL_PREFIXES


def is_http_url(value: object) -> bool:
    """Return whether a value is a string with an http(s) scheme prefix.

    Args:
        value: Candidate URL of any type.

    Returns:
        True for strings starting with ``http://`` or ``https://`` and
        carrying at least one character after the prefix.
    """
    if not isinstance(value, str):
        return False
    lowered = value.strip().lower()
    return any(
        lowered.startswith(prefix) and len(lowered) > len(prefix) for prefix in HTTP_URL_PREFIXES
    )
