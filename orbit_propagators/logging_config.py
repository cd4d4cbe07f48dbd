"""
Logging Configuration

Centralized logging configuration for the orbit propagators.
Library modules only create loggers; applications call ``configure_logging``
once to decide where the output goes.

Usage:
    from orbit_propagators.logging_config import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("J2 propagator initialized")
    logger.warning("Eccentricity clipped to zero by the drag model")
    logger.error("Kepler's equation did not converge")
"""

import logging
import os
import sys
from typing import Optional, Union

# Default logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable holding the default level name (e.g. "DEBUG")
LOG_LEVEL_ENV = "ORBIT_PROPAGATORS_LOG_LEVEL"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        return resolved
    return level


def configure_logging(level: Optional[Union[int, str]] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int or str, optional
        Logging level (e.g., logging.DEBUG or "DEBUG"). Defaults to the
        ORBIT_PROPAGATORS_LOG_LEVEL environment variable, then INFO.
    log_file : str, optional
        Path to log file. If None, logs only to console.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=_resolve_level(level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    logging.Logger
        Logger instance
    """
    return logging.getLogger(name)
