"""CLI handler for ``gomajor get``: upgrade a dependency to another major version."""

from __future__ import annotations

import logging

from constants import Constants, ExitCodes
from gomod import go_get
from importpaths import RewriteEvent, rewrite_module
from modproxy import ModProxyClient
from versioning.errors import MissingSpecError
from versioning.resolver import VersionResolver

logger = logging.getLogger(__name__)


def print_rewrite(event: RewriteEvent) -> None:
    print(f"{event.position} {event.new_path}")


def run_get(args, client=None) -> int:
    """Resolve the requested version, run go get, then rewrite imports.

    Resolution completes before anything in the project is touched.
    """
    pathspec = getattr(args, "PATHSPEC", None)
    if not pathspec:
        raise MissingSpecError()

    client = client or ModProxyClient(Constants.PROXY_URL)
    plan = VersionResolver(client).resolve_get(pathspec, pre=args.PRE, cached=args.CACHED)
    logger.info("Resolved %s to %s", pathspec, plan.resolved.version)

    if args.GO_GET:
        print("go get", plan.fetch_spec)
        go_get(plan.fetch_spec, args.DIR)

    if not args.REWRITE:
        return ExitCodes.SUCCESS.value
    events = rewrite_module(args.DIR, plan.mapping, on_rewrite=print_rewrite)
    logger.info("Rewrote %d import(s)", len(events))
    return ExitCodes.SUCCESS.value
