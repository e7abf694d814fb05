"""Client for the Go module proxy protocol."""

from .client import ModProxyClient
from .module import Module

__all__ = [
    "ModProxyClient",
    "Module",
]
