"""Reference mapping handed to the import path rewriter."""

from dataclasses import dataclass
from typing import Optional, Tuple

from versioning.coords import decompose, join_path


@dataclass(frozen=True)
class ReferenceMapping:
    """Pure mapping from an observed import path to its rewritten form.

    Instances only hold immutable resolved values, so one mapping may be
    called from any number of worker threads.

    Attributes:
        old_prefix: version-independent prefix of the module being replaced.
        new_prefix: prefix of the replacement module; equals ``old_prefix``
            unless the module itself is being renamed.
        version: target version, e.g. ``v3.1.0`` or ``v3``.
        subpath: when set, only references to this package directory are
            rewritten.
    """
    old_prefix: str
    version: str
    new_prefix: Optional[str] = None
    subpath: Optional[str] = None

    def __call__(self, path: str) -> Tuple[str, bool]:
        _, subpath, ok = decompose(path, self.old_prefix)
        if not ok:
            return path, False
        if self.subpath and self.subpath != subpath:
            return path, False
        new_path = join_path(self.new_prefix or self.old_prefix, self.version, subpath)
        if new_path == path:
            return path, False
        return new_path, True


def build_mapping(old_prefix: str, version: str, new_prefix: Optional[str] = None,
                  subpath: Optional[str] = None) -> ReferenceMapping:
    return ReferenceMapping(
        old_prefix=old_prefix,
        version=version,
        new_prefix=new_prefix,
        subpath=subpath or None,
    )
