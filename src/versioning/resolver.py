"""Version resolution for the get, list and path operations.

Every function here is read-only: it may query the module proxy but never
touches the project on disk. A plan is returned only once the target is fully
determined, so callers can abort without leaving partial state behind.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Union

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from versioning import semver
from versioning.coords import (
    decompose,
    join_path,
    match_prefix_patterns,
    mod_major,
    mod_prefix,
    module_path_for_version,
)
from versioning.errors import GomajorError, InputError, InvalidVersionError, LookupFailure
from versioning.mapping import build_mapping
from versioning.models import (
    DependencyRecord,
    GetPlan,
    ListEntry,
    ListFailure,
    ListReport,
    PathPlan,
    QueryKind,
    ResolvedVersion,
    VersionQuery,
)
from versioning.parser import parse_package_spec, parse_path_version

logger = logging.getLogger(__name__)


def next_major(version: str) -> str:
    """Return the major token after ``version`` (absent, v0 and v1 all become ``v2``)."""
    if not version:
        version = "v1"
    try:
        return semver.next_major(version)
    except ValueError as exc:
        raise InvalidVersionError(version) from exc


class VersionResolver:
    """Turns user version queries into concrete versions using a registry client.

    ``registry`` needs ``query(path, cached)``, ``latest(path, cached)`` and
    ``query_package(path, cached)``; see ``modproxy.ModProxyClient``.
    """

    def __init__(self, registry):
        self.registry = registry

    def resolve_version(self, query: VersionQuery, module, pre: bool = False,
                        cached: bool = True) -> ResolvedVersion:
        """Resolve ``query`` for ``module`` (the module that owns the requested package)."""
        if query.kind in (QueryKind.UNSPECIFIED, QueryKind.LATEST, QueryKind.DEFAULT):
            latest = self.registry.latest(module.path, cached)
            version = latest.latest_version(pre)
            if not version:
                raise LookupFailure(f"{module.path}: no matching versions")
            fetch_query = query.raw
            if query.kind is QueryKind.LATEST:
                # pin the fetch spec to the concrete version
                fetch_query = version
            return ResolvedVersion(version=version, query=query,
                                   allow_prerelease=pre, fetch_query=fetch_query)

        if query.kind is QueryKind.EXPLICIT:
            if not semver.is_valid(query.raw):
                raise InvalidVersionError(query.raw)
            version = self._corroborate(query.raw, module, pre, cached) or query.raw
            return ResolvedVersion(version=version, query=query,
                                   allow_prerelease=pre, fetch_query=query.raw)

        raise InputError(f"unsupported version query for get: {query.kind.value}")

    def _corroborate(self, requested: str, module, pre: bool, cached: bool) -> str:
        """Find a registry version matching ``requested``, including ``+incompatible`` ones.

        Returns "" when nothing matches; the caller then uses the literal request.
        """
        version = module.max_version(requested, pre)
        if version:
            return version
        target_path = module_path_for_version(module.mod_prefix(), requested)
        if target_path == module.path:
            return ""
        other = self.registry.query(target_path, cached)
        if other is None:
            return ""
        return other.max_version(requested, pre)

    def resolve_get(self, pathspec: str, pre: bool = False, cached: bool = True) -> GetPlan:
        """Resolve a ``path[@query]`` spec into a fetch spec and import mapping."""
        pkgpath, query = parse_package_spec(pathspec)
        module = self.registry.query_package(pkgpath, cached)
        prefix = mod_prefix(module.path)
        _, subpath, _ = decompose(pkgpath, prefix)
        resolved = self.resolve_version(query, module, pre, cached)

        fetch_spec = join_path(prefix, resolved.version, subpath)
        if resolved.fetch_query:
            fetch_spec += "@" + resolved.fetch_query

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved get request",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve_get",
                    target=pkgpath,
                    outcome=resolved.version,
                ),
            )
        return GetPlan(
            module_prefix=prefix,
            subpath=subpath,
            resolved=resolved,
            fetch_spec=fetch_spec,
            mapping=build_mapping(prefix, resolved.version, subpath=subpath),
        )

    def _check_update(self, dep: DependencyRecord, pre: bool, major_only: bool,
                      cached: bool) -> Optional[ListEntry]:
        path = module_path_for_version(dep.module_prefix, dep.resolved_version)
        latest = self.registry.latest(path, cached)
        v = latest.latest_version(pre)
        if major_only and semver.compare(semver.major(v), semver.major(dep.resolved_version)) <= 0:
            return None
        if semver.compare(v, dep.resolved_version) <= 0:
            return None
        return ListEntry(path=path, current=dep.resolved_version, latest=v)

    def resolve_list(self, records: Iterable[DependencyRecord], pre: bool = False,
                     major_only: bool = False, cached: bool = True,
                     private: str = "", concurrency: Optional[int] = None) -> ListReport:
        """Check every dependency for a newer version.

        Lookups run on a bounded worker pool; a failing lookup is recorded in
        the report and does not stop the others. Results keep input order.
        """
        if concurrency is None:
            concurrency = (Constants.LIST_CONCURRENCY_CACHED if cached
                           else Constants.LIST_CONCURRENCY_UNCACHED)
        report = ListReport()
        pending: List[DependencyRecord] = []
        for dep in records:
            path = module_path_for_version(dep.module_prefix, dep.resolved_version)
            if private and match_prefix_patterns(private, path):
                logger.debug("Skipping private module %s", path)
                report.skipped.append(path)
                continue
            pending.append(dep)

        if not pending:
            return report

        with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
            futures = [
                (dep, pool.submit(self._check_update, dep, pre, major_only, cached))
                for dep in pending
            ]
            for dep, future in futures:
                path = module_path_for_version(dep.module_prefix, dep.resolved_version)
                try:
                    entry = future.result()
                except GomajorError as exc:
                    logger.warning("%s: failed: %s", path, exc)
                    report.failures.append(ListFailure(path=path, error=str(exc)))
                    continue
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    logger.warning("%s: failed: %s: %s", path, type(exc).__name__, exc)
                    report.failures.append(ListFailure(path=path, error=f"{type(exc).__name__}: {exc}"))
                    continue
                if entry is not None:
                    report.updates.append(entry)
        return report

    @staticmethod
    def resolve_path(current_module_path: str, new_module_path: str = "",
                     version: Union[str, VersionQuery, None] = None,
                     increment: bool = False) -> PathPlan:
        """Compute the new module path and import mapping for the path command.

        Without an explicit version the major currently encoded in the target
        path is kept (v1 when none); ``increment`` bumps it by one. No registry
        lookup is involved.
        """
        modpath = new_module_path or current_module_path
        if isinstance(version, VersionQuery):
            query = version
        else:
            query = parse_path_version(version or "")
        if query.kind is QueryKind.INCREMENT_MAJOR:
            increment = True

        target = query.raw
        if not target:
            target = mod_major(modpath) or "v1"
        if increment:
            target = next_major(target)
        if not semver.is_valid(target):
            raise InvalidVersionError(target)

        new_prefix = mod_prefix(modpath)
        old_prefix = mod_prefix(current_module_path)
        new_path = join_path(new_prefix, target)
        return PathPlan(
            old_prefix=old_prefix,
            new_prefix=new_prefix,
            version=target,
            new_module_path=new_path,
            mapping=build_mapping(old_prefix, target, new_prefix=new_prefix),
        )
