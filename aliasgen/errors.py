"""
Error types and error logging for aliasgen.

Every failure of an alias run is one of the exceptions below. The
orchestrator turns them into a user notification; the CLI logs anything
unexpected with a full stack trace while showing a clean message.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path


class AliasError(Exception):
    """Base class for alias extraction failures."""


class PreconditionError(AliasError):
    """Run cannot start: no active document, no credential, or already running."""


class CompletionError(AliasError):
    """The completion endpoint did not produce usable text."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(CompletionError):
    """Transport failure reaching the completion endpoint."""

    kind = "network"


class ApiRejectionError(CompletionError):
    """The endpoint answered with a non-success status."""

    kind = "rejected"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(CompletionError):
    """A success response without the expected choices[0].message.content."""

    kind = "malformed"


class EmptyResultError(AliasError):
    """The call succeeded but yielded no usable alias."""


class WriteError(AliasError):
    """The host refused to update the document metadata."""


def _error_log_path(config_dir: Path | None = None) -> Path:
    """Resolve error log path: explicit dir, else ALIASGEN_CONFIG_DIR, else ~/.aliasgen."""
    if config_dir is None and os.environ.get("ALIASGEN_CONFIG_DIR"):
        config_dir = Path(os.environ["ALIASGEN_CONFIG_DIR"])
    if config_dir is None:
        config_dir = Path.home() / ".aliasgen"
    return Path(config_dir).expanduser() / "aliasgen-errors.log"


def log_exception(exc: Exception, context: str = "", config_dir: Path | None = None) -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)
        config_dir: Directory for the log (e.g. from --config-dir)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path(config_dir)
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Can't write error log, don't crash over it
    return log_path
