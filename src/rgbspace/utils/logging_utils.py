from __future__ import annotations

import logging
from pathlib import Path


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
PACKAGE_LOGGER = "rgbspace"


def configure_logging(level: str, log_file: Path | None = None, package_level: str | None = None) -> None:
    """Configure root handlers; ``package_level`` overrides only the rgbspace loggers.

    Derivations and cache hits are logged at DEBUG under ``rgbspace.*``, so
    ``package_level="DEBUG"`` traces them without enabling debug output from
    other libraries.
    """

    resolved_level = getattr(logging, level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=resolved_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_level is None:
        package_logger.setLevel(logging.NOTSET)
    else:
        package_logger.setLevel(getattr(logging, package_level.upper(), resolved_level))
