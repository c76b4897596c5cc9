"""Exception hierarchy shared by the scanners, updaters and the orchestrator.

Everything below the orchestrator either recovers locally or raises one of
these; ``faro.cli`` maps them to exit codes.
"""

from __future__ import annotations

from typing import Optional


class FaroError(Exception):
    """Base class for all faro errors."""


class ScanError(FaroError):
    """An adapter subprocess failed or its output could not be parsed."""


class ManifestReadError(ScanError):
    """A manifest exists but could not be read or parsed."""

    def __init__(self, path: str, reason: object):
        super().__init__(f"failed to read {path}: {reason}")
        self.path = path


class FilterCompileError(FaroError):
    """A filter pattern is not a valid regular expression where one is required."""


class UpdateError(FaroError):
    """A package manager refused to apply an update."""

    def __init__(self, message: str, output: Optional[str] = None):
        if output:
            message = f"{message}: {output.strip()}"
        super().__init__(message)
        self.output = output


class DetectionError(FaroError):
    """No (or an unsupported) package manager for the working directory."""


class FormatOptionError(FaroError):
    """Unknown ``--format`` modifier."""


class ConfigError(FaroError):
    """Configuration file is missing, unreadable or malformed."""


class VulnLookupError(FaroError):
    """Advisory lookup for one module version failed."""
