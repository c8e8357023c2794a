"""
Root logger setup shared by the relay, the watch client and the gesture tools.

Every line carries the package version after its timestamp, so a relay log
and a client log from the same session can be lined up against a release.
"""

from __future__ import annotations

import logging

from touch_indicator import __version__

__all__ = ["DEFAULT_LOG_FORMAT", "logging_setup"]

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def logging_setup(
    level: str = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: str | None = None,
) -> None:
    """
    Route touch-indicator logging to stderr and, optionally, a file.

    Replaces any handlers installed earlier, so calling it again from a tool
    after the CLI has configured logging takes effect.

    Args:
        level:
            Level name such as "DEBUG" or "info".
        log_format:
            Format string; a version tag is inserted after `%(asctime)s`.
        log_file:
            Path to append log lines to, in addition to stderr.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    stamped = log_format.replace("%(asctime)s", f"%(asctime)s [v{__version__}]")
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=stamped,
        handlers=handlers,
        force=True,
    )
