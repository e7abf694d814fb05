"""Exception hierarchy for resolution failures.

Input errors mean the request itself is unusable; lookup failures mean the
module proxy could not answer. Neither is raised for references that simply
belong to another module or for no-op rewrites.
"""


class GomajorError(Exception):
    """Base class for all errors raised by the resolution engine."""


class InputError(GomajorError):
    """The request cannot be acted on as given."""


class InvalidVersionError(InputError):
    """A version string is not a valid module version."""

    def __init__(self, version: str):
        super().__init__(f"invalid version: {version!r}")
        self.version = version


class MissingSpecError(InputError):
    """No package spec was supplied."""

    def __init__(self, message: str = "missing package spec"):
        super().__init__(message)


class LookupFailure(GomajorError):
    """The module proxy could not be reached or had no matching module."""


class ModuleNotFound(LookupFailure):
    """No module provides the requested path."""


class ToolchainError(GomajorError):
    """An external go command failed."""

    def __init__(self, args, returncode: int, output: str = ""):
        cmd = " ".join(args)
        message = f"{cmd}: exit status {returncode}"
        if output:
            message = f"{message}\n{output.rstrip()}"
        super().__init__(message)
        self.args_list = list(args)
        self.returncode = returncode
