"""Thin wrappers around the go command."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from constants import Constants
from versioning.errors import ToolchainError

logger = logging.getLogger(__name__)


def run_go(args: List[str], directory: Optional[str] = None, capture: bool = False) -> str:
    """Run ``go <args>`` in ``directory``.

    With ``capture`` the standard output is returned; otherwise output is
    passed through to the terminal.

    Raises:
        ToolchainError: the command is missing or exits non-zero.
    """
    cmd = [Constants.GO_BINARY] + list(args)
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(  # noqa: S603
            cmd,
            cwd=directory,
            capture_output=capture,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ToolchainError(cmd, 127, str(exc)) from exc
    if result.returncode != 0:
        raise ToolchainError(cmd, result.returncode, result.stderr if capture else "")
    return result.stdout if capture else ""


def go_get(spec: str, directory: Optional[str] = None) -> None:
    """Fetch ``spec`` into the module in ``directory``."""
    run_go(["get", spec], directory)


def edit_module(module_path: str, directory: Optional[str] = None) -> None:
    """Set the module path in go.mod."""
    run_go(["mod", "edit", "-module", module_path], directory)
