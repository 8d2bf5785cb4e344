"""Logging helpers for the taisdk.* logger hierarchy."""

import logging

LOGGER_NAMES = (
    'taisdk',
    'taisdk.client',
    'taisdk.api',
    'taisdk.upload',
    'taisdk.upload.coordinator',
    'taisdk.upload.chunk',
    'taisdk.upload.file',
    'taisdk.upload.encryption',
    'taisdk.download',
)


def get_logger(name: str) -> logging.Logger:
    """Return a propagating logger for a taisdk component.

    Records reach whatever handlers the application installs on the root
    logger. Until the application configures logging, the component only
    lets warnings through.

    Args:
        name: Dotted logger name, e.g. 'taisdk.upload.coordinator'
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)
    return logger


def configure(level: int = logging.INFO) -> None:
    """Set the level of every taisdk logger."""
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = True
