"""Direct dependency enumeration via ``go list -m -json all``."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

from common.logging_utils import extra_context, is_debug_enabled
from versioning.coords import mod_prefix
from versioning.models import DependencyRecord

from .gocmd import run_go

logger = logging.getLogger(__name__)


def iter_json_objects(text: str) -> Iterator[Dict[str, Any]]:
    """Yield each top-level JSON object from concatenated ``go list -json`` output."""
    decoder = json.JSONDecoder()
    idx = 0
    length = len(text)
    while idx < length:
        while idx < length and text[idx].isspace():
            idx += 1
        if idx >= length:
            break
        obj, idx = decoder.raw_decode(text, idx)
        if isinstance(obj, dict):
            yield obj


def parse_modules(text: str) -> List[DependencyRecord]:
    """Keep first-order requirements: not the main module, not indirect, not replaced."""
    direct: List[DependencyRecord] = []
    seen = set()
    for mod in iter_json_objects(text):
        path = mod.get("Path")
        version = mod.get("Version")
        if not path or not version:
            continue
        if mod.get("Main") or mod.get("Indirect") or mod.get("Replace"):
            continue
        if path in seen:
            continue
        seen.add(path)
        direct.append(DependencyRecord(module_prefix=mod_prefix(path), resolved_version=version))
    return direct


def direct(directory: str) -> List[DependencyRecord]:
    """List the direct dependencies of the module in ``directory``."""
    output = run_go(["list", "-m", "-json", "all"], directory, capture=True)
    records = parse_modules(output)
    if is_debug_enabled(logger):
        logger.debug(
            "Direct dependencies enumerated",
            extra=extra_context(
                event="scan",
                component="gomod",
                action="direct",
                target=directory,
                count=len(records),
            ),
        )
    return records
