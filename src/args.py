"""Argument parsing functionality for gomajor."""

import argparse

from constants import Commands

HELP = """
GoMajor is a tool for major version upgrades

Usage:

    gomajor <command> [arguments]

The commands are:

    get     upgrade to a major version
    list    list available updates
    path    modify the module path
    help    show this help text
"""


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every sub-command."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dir",
                        dest="DIR",
                        help="working directory",
                        action="store", type=str,
                        default=".")
    common.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    common.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    common.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    common.add_argument("--proxy",
                        dest="PROXY",
                        help="Module proxy URL (overrides GOPROXY and config)",
                        action="store",
                        type=str)
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with its sub-commands."""
    parser = argparse.ArgumentParser(
        prog="gomajor",
        description="GoMajor - a tool for major version upgrades",
        add_help=True,
    )
    common = _common_options()
    sub = parser.add_subparsers(dest="COMMAND", metavar="<command>")

    get = sub.add_parser(Commands.GET.value, parents=[common],
                         help="upgrade to a major version",
                         usage="gomajor get <pathspec>")
    get.add_argument("PATHSPEC", nargs="?", default=None,
                     help="package path with optional @version, @latest or @master")
    get.add_argument("--pre", dest="PRE", action="store_true",
                     help="allow non-v0 prerelease versions")
    get.add_argument("--rewrite", dest="REWRITE", action=argparse.BooleanOptionalAction,
                     default=True, help="rewrite import paths")
    get.add_argument("--get", dest="GO_GET", action=argparse.BooleanOptionalAction,
                     default=True, help="run go get")
    get.add_argument("--cached", dest="CACHED", action=argparse.BooleanOptionalAction,
                     default=True, help="only fetch cached content from the module proxy")

    lst = sub.add_parser(Commands.LIST.value, parents=[common],
                         help="list available updates",
                         usage="gomajor list")
    lst.add_argument("--pre", dest="PRE", action="store_true",
                     help="allow non-v0 prerelease versions")
    lst.add_argument("--cached", dest="CACHED", action=argparse.BooleanOptionalAction,
                     default=True, help="only fetch cached content from the module proxy")
    lst.add_argument("--major", dest="MAJOR", action="store_true",
                     help="only show newer major versions")

    path = sub.add_parser(Commands.PATH.value, parents=[common],
                          help="modify the module path",
                          usage="gomajor path [modpath]")
    path.add_argument("MODPATH", nargs="?", default="",
                      help="new module path (defaults to the current one)")
    path.add_argument("--next", dest="NEXT", action="store_true",
                      help="increment the module path version")
    path.add_argument("--version", dest="VERSION", action="store", type=str, default="",
                      help="set the module path version")
    path.add_argument("--rewrite", dest="REWRITE", action=argparse.BooleanOptionalAction,
                      default=True, help="rewrite import paths")

    sub.add_parser(Commands.HELP.value, help="show this help text")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
