"""Command-line entry point."""

from __future__ import annotations

import logging
import sys

from faro.app import resolve_options, run
from faro.args import parse_args
from faro.common.logging_utils import configure_logging, extra_context, is_debug_enabled
from faro.config import load_config
from faro.constants import ExitCodes
from faro.errors import (
    ConfigError,
    DetectionError,
    FaroError,
    FilterCompileError,
    FormatOptionError,
    ScanError,
    UpdateError,
)

logger = logging.getLogger(__name__)

_EXIT_CODES = (
    (UpdateError, ExitCodes.UPDATE_ERROR),
    (ScanError, ExitCodes.FILE_ERROR),
    (ConfigError, ExitCodes.USAGE_ERROR),
    (DetectionError, ExitCodes.USAGE_ERROR),
    (FormatOptionError, ExitCodes.USAGE_ERROR),
    (FilterCompileError, ExitCodes.USAGE_ERROR),
)


def exit_code_for(exc: FaroError) -> ExitCodes:
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return ExitCodes.FILE_ERROR


def main(argv=None) -> None:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    if is_debug_enabled(logger):
        logger.debug("CLI start", extra=extra_context(event="function_entry", component="cli", action="main"))

    try:
        config = load_config(args.CONFIG, args.DIRECTORY or ".")
        run(resolve_options(args, config))
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        sys.exit(ExitCodes.INTERRUPTED.value)
    except FaroError as exc:
        logger.error("%s", exc)
        sys.exit(exit_code_for(exc).value)
    sys.exit(ExitCodes.SUCCESS.value)
