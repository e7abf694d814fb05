"""go.mod discovery, dependency enumeration and go command wrappers."""

from .deps import direct
from .gocmd import edit_module, go_get, run_go
from .modfile import find_mod_file, read_module_path

__all__ = [
    "direct",
    "edit_module",
    "find_mod_file",
    "go_get",
    "read_module_path",
    "run_go",
]
