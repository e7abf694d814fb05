"""CLI handler for ``gomajor path``: change the module path of the current module."""

from __future__ import annotations

import logging

from constants import ExitCodes
from cli_get import print_rewrite
from gomod import edit_module, find_mod_file, read_module_path
from importpaths import rewrite_module
from versioning.resolver import VersionResolver

logger = logging.getLogger(__name__)


def run_path(args) -> int:
    """Compute the new module path, update go.mod and rewrite self-imports."""
    mod_file = find_mod_file(args.DIR)
    current = read_module_path(mod_file)
    plan = VersionResolver.resolve_path(
        current,
        new_module_path=args.MODPATH or "",
        version=args.VERSION or "",
        increment=args.NEXT,
    )
    print(f"module {plan.new_module_path}")
    if not args.REWRITE:
        return ExitCodes.SUCCESS.value

    edit_module(plan.new_module_path, args.DIR)
    events = rewrite_module(args.DIR, plan.mapping, on_rewrite=print_rewrite)
    logger.info("Rewrote %d import(s)", len(events))
    return ExitCodes.SUCCESS.value
