"""Token parsing utilities for package specs and version queries."""

from typing import Tuple

from constants import Constants
from versioning import semver
from versioning.coords import split_spec
from versioning.errors import InvalidVersionError, MissingSpecError
from versioning.models import QueryKind, VersionQuery


def parse_query(raw: str) -> VersionQuery:
    """Classify the text after ``@`` into a VersionQuery.

    Explicit values must be valid module versions; shorthand such as ``v2``
    is accepted and later matched as a version prefix.
    """
    raw = (raw or "").strip()
    if not raw:
        return VersionQuery(kind=QueryKind.UNSPECIFIED)
    if raw == Constants.LATEST_QUERY:
        return VersionQuery(kind=QueryKind.LATEST, raw=raw)
    if raw in Constants.DEFAULT_QUERIES:
        return VersionQuery(kind=QueryKind.DEFAULT, raw=raw)
    if not semver.is_valid(raw):
        raise InvalidVersionError(raw)
    return VersionQuery(kind=QueryKind.EXPLICIT, raw=raw)


def parse_package_spec(token: str) -> Tuple[str, VersionQuery]:
    """Parse a CLI ``path[@query]`` token into its path and classified query."""
    if token is None or not token.strip():
        raise MissingSpecError()
    path, query = split_spec(token.strip())
    if not path:
        raise MissingSpecError(f"missing package path in spec: {token!r}")
    return path, parse_query(query)


def parse_path_version(raw: str) -> VersionQuery:
    """Parse the version given to the path command.

    Accepts a bare major (``3``) as well as ``v3``/``v3.0.0``.
    """
    raw = (raw or "").strip()
    if not raw:
        return VersionQuery(kind=QueryKind.UNSPECIFIED)
    if raw.isdigit():
        raw = "v" + raw
    if not semver.is_valid(raw):
        raise InvalidVersionError(raw)
    return VersionQuery(kind=QueryKind.EXPLICIT, raw=raw)
