"""Module proxy client: version listings, latest-major discovery and package lookup."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from constants import Constants
from common.http_client import get_json, robust_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from versioning import semver
from versioning.coords import check_path, encode, escape_path, parent
from versioning.errors import LookupFailure, ModuleNotFound

from .module import Module, sort_versions

logger = logging.getLogger(__name__)


class ModProxyClient:
    """Read-only client for the GOPROXY protocol.

    Every call takes a ``cached`` flag. When set, the proxy is asked to only
    serve content it already has (``Disable-Module-Fetch``) and responses may
    come from the in-process cache; when cleared, both are bypassed.
    """

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or Constants.PROXY_URL).rstrip("/")

    def _headers(self, cached: bool) -> Dict[str, str]:
        headers = {"Accept": "text/plain, application/json"}
        if cached:
            headers[Constants.PROXY_HEADER_DISABLE_FETCH] = "true"
        return headers

    def _url(self, path: str, endpoint: str) -> str:
        return f"{self.base_url}/{escape_path(path)}/@{endpoint}"

    def request(self, path: str, cached: bool = True) -> Module:
        """Fetch the version list for ``path``.

        Raises:
            ModuleNotFound: the proxy reports the path as missing or it has no versions.
            LookupFailure: the proxy could not be reached or answered with an error.
        """
        url = self._url(path, "v/list")
        with Timer() as timer:
            status, _, body = robust_get(url, headers=self._headers(cached), use_cache=cached)
        if is_debug_enabled(logger):
            logger.debug(
                "Version list fetched",
                extra=extra_context(
                    event="proxy_response",
                    component="modproxy",
                    action="list",
                    status_code=status,
                    duration_ms=timer.duration_ms(),
                    target=safe_url(url),
                ),
            )
        if status == 0:
            raise LookupFailure(f"{path}: {body}")
        if status in Constants.PROXY_NOT_FOUND_CODES:
            raise ModuleNotFound(f"{path}: {body.strip() or status}")
        if status != 200:
            raise LookupFailure(f"{path}: unexpected status {status}: {body.strip()}")

        versions = [line.strip() for line in body.splitlines() if line.strip()]
        if not versions:
            latest = self._latest_info(path, cached)
            if latest:
                versions = [latest]
        if not versions:
            raise ModuleNotFound(f"{path}: no versions available")
        return Module(path=path, versions=sort_versions(versions))

    def _latest_info(self, path: str, cached: bool) -> str:
        """Return the version from the ``@latest`` endpoint, or "" when absent."""
        status, _, data = get_json(
            self._url(path, "latest"), headers=self._headers(cached), use_cache=cached
        )
        if status == 0:
            raise LookupFailure(f"{path}: request to @latest failed")
        if status != 200 or not isinstance(data, dict):
            return ""
        version = data.get("Version")
        if not isinstance(version, str):
            return ""
        return version if semver.is_valid(version) else ""

    def query(self, path: str, cached: bool = True) -> Optional[Module]:
        """Like request, but returns None when the module does not exist."""
        try:
            return self.request(path, cached)
        except ModuleNotFound:
            return None

    def latest(self, path: str, cached: bool = True) -> Module:
        """Return the module for the highest major version reachable from ``path``.

        Follows ``/vN+1`` paths until one is missing. Projects that adopted
        modules without moving to a new path show up as a ``+incompatible``
        maximum; for those the path for that major is tried as well.
        """
        mod = self.query(path, cached)
        if mod is None:
            raise ModuleNotFound(f"{path}: module not found")
        for _ in range(Constants.PROXY_MAX_MAJOR_HOPS):
            next_path = mod.next_major_path()
            if not next_path:
                return mod
            nxt = self.query(next_path, cached)
            if nxt is None:
                version = mod.max_version("", True)
                if semver.is_incompatible(version):
                    alt_path = encode(mod.mod_prefix(), semver.major(version))
                    if alt_path != mod.path:
                        nxt = self.query(alt_path, cached)
            if nxt is None:
                return mod
            logger.debug("Found newer major version of %s at %s", path, nxt.path)
            mod = nxt
        raise LookupFailure(f"{path}: request limit exceeded")

    def max_version(self, path: str, prefix: str = "", pre: bool = False,
                    cached: bool = True) -> str:
        """Return the highest version of ``path`` matching ``prefix`` ("" if none)."""
        mod = self.query(path, cached)
        if mod is None:
            return ""
        return mod.max_version(prefix, pre)

    def query_package(self, pkgpath: str, cached: bool = True) -> Module:
        """Find the module that provides package ``pkgpath``.

        Tries the package path itself and then each parent path.
        """
        prefix = pkgpath
        while prefix:
            if check_path(prefix):
                mod = self.query(prefix, cached)
                if mod is not None:
                    return mod
            prefix = parent(prefix)
        raise ModuleNotFound(f"failed to find module for package: {pkgpath}")
