"""Import path scanning and rewriting for Go source trees."""

from .rewriter import RewriteEvent, go_files, rewrite_file, rewrite_module
from .scanner import ImportScanError, ImportSpec, scan_imports

__all__ = [
    "ImportScanError",
    "ImportSpec",
    "RewriteEvent",
    "go_files",
    "rewrite_file",
    "rewrite_module",
    "scan_imports",
]
