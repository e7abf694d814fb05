"""Module coordinate algebra.

Maps between a module prefix, its encoded major version and the package
sub-path of an import path. Two path conventions exist:

* standard: the major version is a trailing path element, ``example.com/mod/v2``,
  and is only present for v2 and above.
* legacy host (``gopkg.in``): the major version is a ``.vN`` suffix on the last
  element, ``gopkg.in/yaml.v3``, and is always present.

The convention is decided once per path by :func:`convention_for`; the
encode/strip pair dispatches on it and is total over both variants.
"""

import posixpath
import re
from fnmatch import fnmatchcase
from typing import Optional, Tuple, Union

from constants import Constants
from versioning import semver
from versioning.models import ModuleCoordinate, PackageReference, PathConvention

MajorLike = Union[int, str, None]

_LEGACY_BOUNDARY = re.compile(r"^\.v[0-9]")
_UNSTABLE = "-unstable"
_PATH_CHARS = re.compile(r"^[A-Za-z0-9.\-_~+/]+$")


def convention_for(path: str) -> PathConvention:
    """Return the path convention governing ``path``."""
    if path.startswith(Constants.LEGACY_HOST_PREFIX):
        return PathConvention.LEGACY_HOST
    return PathConvention.STANDARD


def major_token(major: MajorLike) -> str:
    """Normalize an int, ``vN`` token, ``/vN``/``.vN`` suffix or version into ``vN``.

    Returns "" when no major is given.
    """
    if major is None:
        return ""
    if isinstance(major, bool):
        raise TypeError("major must be an int, str or None")
    if isinstance(major, int):
        if major < 0:
            raise ValueError(f"negative major version: {major}")
        return f"v{major}"
    token = major.lstrip("/.")
    if not token:
        return ""
    if semver.is_valid(token) and "." in token:
        return semver.major(token)
    return token


def encode(prefix: str, major: MajorLike = None) -> str:
    """Append the encoded major version to a module prefix.

    Standard paths only carry ``/vN`` for N >= 2. Legacy-host paths carry
    ``.vN`` whenever a major is given, including v0 and v1.
    """
    token = major_token(major)
    if convention_for(prefix) is PathConvention.LEGACY_HOST:
        if not token:
            return prefix
        return prefix + "." + token
    if token in ("", "v0", "v1"):
        return prefix
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix + token


def _strip_legacy(path: str) -> Tuple[str, str, bool]:
    i = len(path)
    if path.endswith(_UNSTABLE):
        i -= len(_UNSTABLE)
    while i > 0 and path[i - 1].isdigit():
        i -= 1
    if i <= 1 or path[i - 1] != "v" or path[i - 2] != ".":
        return path, "", False
    suffix = path[i - 2:]
    digits = suffix[2:].split("-", 1)[0]
    if not digits or (digits[0] == "0" and digits != "0"):
        return path, "", False
    return path[:i - 2], suffix[1:], True


def _strip_standard(path: str) -> Tuple[str, str, bool]:
    i = len(path)
    dot = False
    while i > 0 and (path[i - 1].isdigit() or path[i - 1] == "."):
        if path[i - 1] == ".":
            dot = True
        i -= 1
    if i <= 1 or i == len(path) or path[i - 1] != "v" or path[i - 2] != "/":
        return path, "", False
    suffix = path[i - 2:]
    if dot or len(suffix) <= 2 or suffix[2] == "0" or suffix == "/v1":
        return path, "", False
    return path[:i - 2], suffix[1:], True


def strip(path: str) -> Tuple[str, str, bool]:
    """Remove a trailing encoded major version.

    Returns ``(prefix, token, found)``; when nothing is found the path is
    returned unchanged with an empty token.
    """
    if convention_for(path) is PathConvention.LEGACY_HOST:
        return _strip_legacy(path)
    return _strip_standard(path)


def mod_prefix(path: str) -> str:
    """Return the version-independent prefix of a module path."""
    return strip(path)[0]


def mod_major(path: str) -> Optional[str]:
    """Return the encoded major token of a module path, or None."""
    _, token, found = strip(path)
    return token if found else None


def coordinate(path: str) -> ModuleCoordinate:
    prefix, token, found = strip(path)
    return ModuleCoordinate(prefix=prefix, major=token if found else None)


def _on_boundary(prefix: str, rest: str) -> bool:
    if not rest or rest.startswith("/") or prefix.endswith("/"):
        return True
    return (convention_for(prefix) is PathConvention.LEGACY_HOST
            and _LEGACY_BOUNDARY.match(rest) is not None)


def decompose(full_path: str, prefix: str) -> Tuple[str, str, bool]:
    """Split an import path into its module root and package sub-path.

    ``prefix`` is the version-independent module prefix. The element right
    after the prefix is checked for an encoded major version so that
    ``example.com/mod/v2/pkg`` yields ``("example.com/mod/v2", "pkg", True)``.
    Fails when ``full_path`` does not start with ``prefix`` on an element
    boundary.
    """
    if not prefix or not full_path.startswith(prefix):
        return "", "", False
    if not _on_boundary(prefix, full_path[len(prefix):]):
        return "", "", False

    end = len(prefix)
    if full_path[end:].startswith("/"):
        end += 1
    idx = full_path.find("/", end)
    candidate = full_path[:idx] if idx >= 0 else full_path

    root = prefix
    stripped, token, found = strip(candidate)
    if found and stripped == prefix:
        root = encode(prefix, token)
    elif end == len(prefix) and len(full_path) > end and not prefix.endswith("/"):
        # a legacy-host suffix that does not strip belongs to another module
        return "", "", False
    subpath = full_path[len(root):].lstrip("/")
    return root, subpath, True


def reference(full_path: str, prefix: str) -> Optional[PackageReference]:
    """Decompose ``full_path`` into a PackageReference, or None on mismatch."""
    root, subpath, ok = decompose(full_path, prefix)
    if not ok:
        return None
    return PackageReference(module_prefix=prefix, major=mod_major(root), subpath=subpath)


def full_path(ref: PackageReference) -> str:
    return join(encode(ref.module_prefix, ref.major), ref.subpath)


def join(root: str, subpath: str) -> str:
    """Join a module root and a sub-path without introducing duplicate slashes."""
    if not subpath:
        return root
    if root.endswith("/"):
        return root + subpath.lstrip("/")
    return root + "/" + subpath.lstrip("/")


def module_path_for_version(prefix: str, version: str) -> str:
    """Return the module path that serves ``version`` of the module at ``prefix``.

    A ``+incompatible`` version of a standard-convention module keeps the
    unsuffixed path even though its major version is 2 or more.
    """
    if semver.is_incompatible(version) and convention_for(prefix) is PathConvention.STANDARD:
        return prefix
    return encode(prefix, semver.major(version) or None)


def join_path(prefix: str, version: str, subpath: str = "") -> str:
    """Create a full package path from a module prefix, version and sub-path."""
    return join(module_path_for_version(prefix, version), subpath)


def split_spec(spec: str) -> Tuple[str, str]:
    """Split ``path@query`` on the first ``@``; the query is "" when absent."""
    path, sep, query = spec.partition("@")
    if not sep:
        return spec, ""
    return path, query


def escape_path(path: str) -> str:
    """Case-encode a module path for the proxy protocol (``A`` becomes ``!a``)."""
    return "".join("!" + c.lower() if c.isupper() else c for c in path)


def check_path(path: str) -> bool:
    """Cheap syntactic check that ``path`` could be a module path."""
    if not path or path.startswith("/") or path.endswith("/") or "//" in path:
        return False
    if not _PATH_CHARS.match(path):
        return False
    first = path.split("/", 1)[0]
    if "." not in first or first.startswith(".") or first.startswith("-"):
        return False
    return all(elem not in (".", "..") for elem in path.split("/"))


def parent(path: str) -> str:
    """Return ``path`` with its last element removed ("" at the top)."""
    head, _ = posixpath.split(path)
    return head.rstrip("/")


def match_prefix_patterns(patterns: str, target: str) -> bool:
    """Report whether any comma-separated glob matches a leading part of ``target``.

    Each glob is compared element-wise against as many leading elements of
    ``target`` as the glob has, so ``*.corp.com`` matches
    ``git.corp.com/team/mod``.
    """
    for glob in patterns.split(","):
        glob = glob.strip().rstrip("/")
        if not glob:
            continue
        glob_elems = glob.split("/")
        target_elems = target.split("/")
        if len(target_elems) < len(glob_elems):
            continue
        if all(fnmatchcase(t, g) for t, g in zip(target_elems, glob_elems)):
            return True
    return False
