"""Data models for module coordinates and version resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Tuple


class PathConvention(Enum):
    """How a module path encodes its major version."""
    STANDARD = "standard"        # example.com/mod/v2
    LEGACY_HOST = "legacy_host"  # gopkg.in/mod.v2


class QueryKind(Enum):
    """Classification of the version query following ``@`` in a package spec."""
    UNSPECIFIED = "unspecified"
    EXPLICIT = "explicit"
    LATEST = "latest"
    DEFAULT = "default"  # "master" / "default" branch aliases
    INCREMENT_MAJOR = "increment_major"


@dataclass(frozen=True)
class VersionQuery:
    """User intent for the target version."""
    kind: QueryKind
    raw: str = ""


@dataclass(frozen=True)
class ModuleCoordinate:
    """A module root: version-independent prefix plus optional major token."""
    prefix: str
    major: Optional[str] = None  # "v2", "v3", ... ; None for v0/v1


@dataclass(frozen=True)
class PackageReference:
    """A concrete import path split into module prefix, major and sub-path."""
    module_prefix: str
    major: Optional[str]
    subpath: str = ""


@dataclass(frozen=True)
class DependencyRecord:
    """A direct dependency discovered in a project."""
    module_prefix: str
    resolved_version: str
    subpath: str = ""


@dataclass(frozen=True)
class ResolvedVersion:
    """Outcome of resolving a VersionQuery against the registry."""
    version: str
    query: VersionQuery
    allow_prerelease: bool = False
    # Token to append to a fetch spec after "@"; "" means no explicit query.
    fetch_query: str = ""


# (new_path, should_rewrite)
MappingFn = Callable[[str], Tuple[str, bool]]


@dataclass(frozen=True)
class GetPlan:
    """Everything the get command needs before touching the project."""
    module_prefix: str
    subpath: str
    resolved: ResolvedVersion
    fetch_spec: str
    mapping: MappingFn


@dataclass(frozen=True)
class PathPlan:
    """Everything the path command needs before touching the project."""
    old_prefix: str
    new_prefix: str
    version: str
    new_module_path: str
    mapping: MappingFn


@dataclass(frozen=True)
class ListEntry:
    """A dependency with a newer version available."""
    path: str
    current: str
    latest: str


@dataclass(frozen=True)
class ListFailure:
    """A dependency whose registry lookup failed during a batch."""
    path: str
    error: str


@dataclass
class ListReport:
    """Batch result of the list operation; updates and failures in input order."""
    updates: list = field(default_factory=list)
    failures: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
