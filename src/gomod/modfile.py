"""Locating and reading go.mod files."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

from constants import Constants

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r'^\s*module\s+(?:"([^"]+)"|`([^`]+)`|(\S+))')


def find_mod_file(directory: str) -> str:
    """Return the go.mod governing ``directory``, searching parent directories.

    Raises:
        FileNotFoundError: no go.mod exists at or above ``directory``.
    """
    current = os.path.abspath(directory)
    while True:
        candidate = os.path.join(current, Constants.GO_MOD_FILE)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            raise FileNotFoundError(f"cannot find {Constants.GO_MOD_FILE} in {directory} or any parent")
        current = parent


def parse_module_path(data: str) -> Optional[str]:
    """Extract the module path from go.mod text, or None when missing."""
    for line in data.splitlines():
        line = line.split("//", 1)[0]
        m = _MODULE_RE.match(line)
        if m:
            return m.group(1) or m.group(2) or m.group(3)
    return None


def read_module_path(mod_file: str) -> str:
    """Read the module path declared in ``mod_file``.

    Raises:
        ValueError: the file has no module directive.
    """
    with open(mod_file, encoding="utf-8") as fh:
        data = fh.read()
    path = parse_module_path(data)
    if not path:
        raise ValueError(f"{mod_file}: no module declaration")
    logger.debug("Module path %s read from %s", path, mod_file)
    return path
