"""Logging configuration for purgetree.

Library modules only create loggers; the CLI decides where records go.
"""

import logging

LOGGER_NAME = "purgetree"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the purgetree logger.

    Args:
        verbose: Emit DEBUG records (per-node traversal and retries).
        quiet: Emit ERROR records only. Ignored when verbose is set.

    Returns:
        The configured package logger.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Replace handlers from earlier invocations (e.g. repeated CLI runs in tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
