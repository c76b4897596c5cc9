"""Argument parsing functionality for faro."""

import argparse

from faro import __version__
from faro.constants import Constants


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faro",
        description="faro - check and apply dependency updates across package managers",
        add_help=True,
    )
    parser.add_argument("-u", "--upgrade",
                        dest="UPGRADE",
                        help="Upgrade every listed dependency.",
                        action="store_true")
    parser.add_argument("-i", "--interactive",
                        dest="INTERACTIVE",
                        help="Pick the updates to apply interactively.",
                        action="store_true")
    parser.add_argument("-f", "--filter",
                        dest="FILTER",
                        help="Only include packages whose name contains or matches this pattern.",
                        action="store",
                        type=str)
    parser.add_argument("--all",
                        dest="ALL",
                        help="Include dev, indirect and transitive dependencies.",
                        action="store_true",
                        default=None)
    parser.add_argument("-c", "--cooldown",
                        dest="COOLDOWN",
                        help="Hide updates published less than this many days ago.",
                        action="store",
                        type=int)
    parser.add_argument("--format",
                        dest="FORMAT",
                        help="Comma-delimited display modifiers: " + ", ".join(Constants.FORMAT_OPTIONS),
                        action="store",
                        type=str)
    parser.add_argument("-v", "--vulnerabilities",
                        dest="VULNERABILITIES",
                        help="Show known vulnerabilities of current and candidate versions.",
                        action="store_true",
                        default=None)
    parser.add_argument("-m", "--manager",
                        dest="MANAGER",
                        help="Package manager to use instead of auto-detection.",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_MANAGERS)
    parser.add_argument("-C", "--directory",
                        dest="DIRECTORY",
                        help="Project directory (default: current directory).",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="Path to a YAML or JSON config file.",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
