"""Rewrite import paths across a Go module.

Each file is scanned first and written afterwards, through a temporary file
in the same directory and ``os.replace``, so a file is either fully rewritten
or left untouched. All files are scanned before any is written; a scan error
aborts the run without modifying anything.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.models import MappingFn

from .scanner import ImportScanError, scan_imports

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteEvent:
    """A single rewritten import."""
    filename: str
    line: int
    column: int
    old_path: str
    new_path: str

    @property
    def position(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


OnRewrite = Callable[[RewriteEvent], None]


def plan_file(filename: str, src: str, mapping: MappingFn) -> Tuple[str, List[RewriteEvent]]:
    """Return the rewritten source of one file and the imports that changed."""
    try:
        specs = scan_imports(src)
    except ImportScanError as exc:
        raise ImportScanError(f"{filename}: {exc}") from exc

    events: List[RewriteEvent] = []
    pieces: List[str] = []
    last = 0
    for spec in specs:
        new_path, should_rewrite = mapping(spec.path)
        if not should_rewrite:
            continue
        pieces.append(src[last:spec.start])
        pieces.append(f"{spec.quote}{new_path}{spec.quote}")
        last = spec.end
        events.append(RewriteEvent(filename, spec.line, spec.column, spec.path, new_path))
    if not events:
        return src, events
    pieces.append(src[last:])
    return "".join(pieces), events


def _write_atomic(filename: str, data: str) -> None:
    directory = os.path.dirname(os.path.abspath(filename))
    fd, tmp_name = tempfile.mkstemp(prefix=".gomajor-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(data)
        shutil.copymode(filename, tmp_name)
        os.replace(tmp_name, filename)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


def _read(filename: str) -> str:
    with open(filename, encoding="utf-8", newline="") as fh:
        return fh.read()


def rewrite_file(filename: str, mapping: MappingFn,
                 on_rewrite: Optional[OnRewrite] = None) -> List[RewriteEvent]:
    """Rewrite the imports of a single file in place."""
    new_src, events = plan_file(filename, _read(filename), mapping)
    if events:
        _write_atomic(filename, new_src)
        if on_rewrite is not None:
            for event in events:
                on_rewrite(event)
    return events


def go_files(root: str) -> List[str]:
    """List the .go files belonging to the module rooted at ``root``.

    Skips vendor and testdata directories, hidden or underscore-prefixed
    directories, and nested modules.
    """
    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        kept = []
        for name in sorted(dirnames):
            if name.startswith((".", "_")) or name in Constants.SKIP_DIRS:
                continue
            if os.path.isfile(os.path.join(dirpath, name, Constants.GO_MOD_FILE)):
                continue
            kept.append(name)
        dirnames[:] = kept
        for name in sorted(filenames):
            if name.endswith(Constants.GO_SOURCE_SUFFIX) and not name.startswith((".", "_")):
                found.append(os.path.join(dirpath, name))
    return found


def rewrite_module(root: str, mapping: MappingFn,
                   on_rewrite: Optional[OnRewrite] = None) -> List[RewriteEvent]:
    """Rewrite every import under ``root`` that ``mapping`` asks to change.

    Returns the rewrite events in file order.
    """
    with Timer() as timer:
        planned = []
        for filename in go_files(root):
            new_src, events = plan_file(filename, _read(filename), mapping)
            if events:
                planned.append((filename, new_src, events))

        all_events: List[RewriteEvent] = []
        for filename, new_src, events in planned:
            _write_atomic(filename, new_src)
            all_events.extend(events)
            if on_rewrite is not None:
                for event in events:
                    on_rewrite(event)

    if is_debug_enabled(logger):
        logger.debug(
            "Import rewrite finished",
            extra=extra_context(
                event="rewrite",
                component="importpaths",
                action="rewrite_module",
                target=root,
                files=len(planned),
                count=len(all_events),
                duration_ms=timer.duration_ms(),
            ),
        )
    return all_events
