"""Go-style semantic version helpers built on ``semantic_version``.

Module versions always carry a leading ``v`` and may use the shorthand forms
``vMAJOR`` and ``vMAJOR.MINOR``. Anything that fails to parse is treated as
invalid and sorts below every valid version.
"""

import re
from typing import Optional

import semantic_version

from constants import Constants

_SHORTHAND = re.compile(r"^v(0|[1-9][0-9]*)(?:\.(0|[1-9][0-9]*))?$")
_CORE = re.compile(r"^v(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)(?:[-+]|$)")


def _parse(v: str) -> Optional[semantic_version.Version]:
    """Parse ``v`` into a semantic_version.Version, or None when invalid."""
    if not isinstance(v, str) or not v.startswith("v"):
        return None
    m = _SHORTHAND.match(v)
    if m:
        minor = m.group(2) or "0"
        return semantic_version.Version(f"{m.group(1)}.{minor}.0")
    if not _CORE.match(v):
        return None
    try:
        return semantic_version.Version(v[1:])
    except ValueError:
        return None


def is_valid(v: str) -> bool:
    """Report whether ``v`` is a valid module version."""
    return _parse(v) is not None


def compare(v: str, w: str) -> int:
    """Return -1, 0 or 1 ordering ``v`` against ``w``; build metadata is ignored."""
    pv, pw = _parse(v), _parse(w)
    if pv is None and pw is None:
        return 0
    if pv is None:
        return -1
    if pw is None:
        return 1
    if pv < pw:
        return -1
    if pw < pv:
        return 1
    return 0


def max_version(v: str, w: str) -> str:
    """Return the larger of two versions, preferring ``v`` on ties."""
    return w if compare(v, w) < 0 else v


def major(v: str) -> str:
    """Return the major version prefix (``v2`` for ``v2.1.0``), or "" when invalid."""
    parsed = _parse(v)
    if parsed is None:
        return ""
    return f"v{parsed.major}"


def major_number(v: str) -> Optional[int]:
    parsed = _parse(v)
    if parsed is None:
        return None
    return parsed.major


def prerelease(v: str) -> str:
    """Return the pre-release suffix including the leading dash, e.g. ``-rc.1``."""
    parsed = _parse(v)
    if parsed is None or not parsed.prerelease:
        return ""
    return "-" + ".".join(parsed.prerelease)


def build(v: str) -> str:
    """Return the build suffix including the leading plus, e.g. ``+incompatible``."""
    parsed = _parse(v)
    if parsed is None or not parsed.build:
        return ""
    return "+" + ".".join(parsed.build)


def is_incompatible(v: str) -> bool:
    return build(v) == Constants.INCOMPATIBLE_BUILD


def next_major(v: str) -> str:
    """Return the major after ``v``; v0 and v1 both count as 1, so the result is at least ``v2``.

    ``v`` may be a full version or a bare major token such as ``v3``.
    """
    n = major_number(v)
    if n is None:
        raise ValueError(f"invalid version: {v!r}")
    return f"v{max(n, 1) + 1}"
