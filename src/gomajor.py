"""GoMajor - a tool for major version upgrades of Go module dependencies.

    Returns:
        int: Exit code
"""
import logging
import sys

from args import HELP, parse_args
from cli_config import configure
from cli_get import run_get
from cli_list import run_list
from cli_path import run_path
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Commands, ExitCodes
from importpaths import ImportScanError
from versioning.errors import InputError, LookupFailure, ToolchainError

logger = logging.getLogger(__name__)

HANDLERS = {
    Commands.GET.value: run_get,
    Commands.LIST.value: run_list,
    Commands.PATH.value: run_path,
}


def run(argv=None) -> int:
    """Parse ``argv``, dispatch to the sub-command and map failures to exit codes."""
    args = parse_args(argv)
    configure_logging(getattr(args, "LOG_LEVEL", None), getattr(args, "LOG_FILE", None))

    command = getattr(args, "COMMAND", None)
    if command in (None, Commands.HELP.value):
        print(HELP)
        return ExitCodes.SUCCESS.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=command)
        )

    try:
        configure(args)
        return HANDLERS[command](args)
    except InputError as exc:
        logger.error("%s", exc)
        return ExitCodes.INPUT_ERROR.value
    except LookupFailure as exc:
        logger.error("%s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    except ToolchainError as exc:
        logger.error("%s", exc)
        return ExitCodes.TOOLCHAIN_ERROR.value
    except (OSError, ImportScanError, ValueError) as exc:
        logger.error("%s", exc)
        return ExitCodes.FILE_ERROR.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
