"""
Logging
=======

Logging convenience functions.
"""

import logging


def log(
    name: str = "pymdscan",
    level: int = logging.INFO,
    console: bool = True,
    filename: str = "",
):
    """
    Log messages from `name` with `level` to any combination of console/file.

    Parameters
    ----------
    name:
        The name of the logger.
    level:
        The output level to use.
    console:
        If True, messages are logged to console.
    filename:
        If specified, messages are logged to a file with this name.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if console:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        logger.addHandler(ch)

    if filename:
        fh = logging.FileHandler(filename)
        fh.setLevel(level)
        logger.addHandler(fh)


def log_to_console(level: int = logging.INFO):
    """
    Log to console.

    Parameters
    ----------
    See the `log` method.
    """
    log(level=level, console=True)


def log_to_file(
    level: int = logging.INFO, filename: str = ".pymdscan_logging.log"
):
    """
    Log scan messages to file only.

    Parameters
    ----------
    See the `log` method.
    """
    log(level=level, console=False, filename=filename)


def log_level_active(logger: logging.Logger, level: int) -> bool:
    """Check whether the requested log level is active in any handler.

    Per-point scan summaries are costly to format, so callers can check
    first.

    Parameters
    ----------
    logger:
        The logger. Handlers of parent loggers are taken into account as
        long as records propagate.
    level:
        The requested log level.

    Returns
    --------
    active:
        Whether there is a handler registered that handles events of importance
        at least `level` and higher.
    """
    if not logger.isEnabledFor(level):
        return False
    current = logger
    while current is not None:
        for handler in current.handlers:
            # it is DEBUG=10, INFO=20, WARNING=30, ERROR=40, CRITICAL=50
            if handler.level <= level:
                return True
        if not current.propagate:
            break
        current = current.parent
    return False
