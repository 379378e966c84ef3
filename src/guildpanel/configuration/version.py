"""Schema version comparison for ``config.version`` strings."""

from __future__ import annotations

import re
from typing import Optional, Tuple

CURRENT_VERSION = "3.1.0"
# Version assumed for files written before the field existed
UNVERSIONED = "3.0.0"

_NUMBER = re.compile(r"[0-9]+")


def parse_version(version: str) -> Tuple[int, int, int]:
    """Split ``major.minor.patch`` into integers.

    Raises:
        ValueError: If the string does not have exactly three numeric parts.
    """
    parts = str(version).split(".")
    if len(parts) != 3:
        raise ValueError(f"Invalid version {version!r}, expected major.minor.patch")
    if not all(_NUMBER.fullmatch(part) for part in parts):
        raise ValueError(f"Invalid version {version!r}, parts must be plain digits")
    major, minor, patch = (int(part) for part in parts)
    return major, minor, patch


def compare_version(version_a: Optional[str], version_b: Optional[str]) -> bool:
    """Return True if ``version_a`` is strictly newer than ``version_b``.

    Equal versions compare False, so callers wanting "at least" must also
    test equality. A missing ``version_a`` is never newer; a missing
    ``version_b`` is always older.

    Raises:
        ValueError: If either version is malformed.
    """
    if version_a is None:
        return False
    if version_b is None:
        return True
    return parse_version(version_a) > parse_version(version_b)


def is_at_least(version: str, minimum: str) -> bool:
    return version == minimum or compare_version(version, minimum)
