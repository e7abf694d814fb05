"""CLI handler for ``gomajor list``: show direct dependencies with newer versions."""

from __future__ import annotations

import logging

from constants import Constants, ExitCodes
from gomod import direct
from modproxy import ModProxyClient
from versioning.resolver import VersionResolver

logger = logging.getLogger(__name__)


def run_list(args, client=None) -> int:
    """Print ``path: current [latest v]`` for every dependency with an update.

    Individual lookup failures are logged and do not change the exit code.
    """
    dependencies = direct(args.DIR)
    logger.info("Checking %d direct dependencies", len(dependencies))

    client = client or ModProxyClient(Constants.PROXY_URL)
    report = VersionResolver(client).resolve_list(
        dependencies,
        pre=args.PRE,
        major_only=args.MAJOR,
        cached=args.CACHED,
        private=Constants.PRIVATE_PATTERNS,
    )
    for entry in report.updates:
        print(f"{entry.path}: {entry.current} [latest {entry.latest}]")
    if report.failures:
        logger.warning("%d dependency lookup(s) failed", len(report.failures))
    return ExitCodes.SUCCESS.value
