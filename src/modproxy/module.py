"""Version listing for a single module path as reported by the proxy."""

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Iterable, Optional, Tuple

from versioning import semver
from versioning.coords import encode, mod_prefix


def _has_version_prefix(version: str, prefix: str) -> bool:
    """Match ``prefix`` against ``version`` on a component boundary.

    ``v2`` matches ``v2.1.0`` but not ``v20.0.0``; ``v2.0.0`` matches
    ``v2.0.0+incompatible``.
    """
    if not prefix:
        return True
    if not version.startswith(prefix):
        return False
    rest = version[len(prefix):]
    return not rest or rest[0] in ".-+"


def sort_versions(versions: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted(versions, key=cmp_to_key(semver.compare)))


@dataclass(frozen=True)
class Module:
    """A module path and every version the proxy knows for it."""
    path: str
    versions: Tuple[str, ...] = field(default_factory=tuple)

    def max_version(self, prefix: str = "", pre: bool = False) -> str:
        """Return the highest valid version starting with ``prefix``.

        Pre-release versions are skipped unless ``pre`` is set. Returns ""
        when nothing matches.
        """
        best = ""
        for v in self.versions:
            if not semver.is_valid(v) or not _has_version_prefix(v, prefix):
                continue
            if not pre and semver.prerelease(v):
                continue
            best = semver.max_version(best, v)
        return best

    def latest_version(self, pre: bool = False) -> str:
        return self.max_version("", pre)

    def mod_prefix(self) -> str:
        return mod_prefix(self.path)

    def next_major_path(self) -> Optional[str]:
        """Return the path the next major version would live at.

        None when the module has no versions or is still at v0.
        """
        latest = self.max_version("", True)
        if not latest or semver.major(latest) == "v0":
            return None
        return encode(self.mod_prefix(), semver.next_major(latest))
