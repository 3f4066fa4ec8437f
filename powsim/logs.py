import logging

_LOG_INITIALIZED = False
_LOGGER = logging.getLogger("powsim")


def init_logging(level: str = "INFO", console: bool = True):
    """
    Configure the `powsim` logger once.

    :param level: level name ("DEBUG", "INFO", "WARN", ...).
    :param console: attach a stderr handler.
    """
    global _LOG_INITIALIZED
    if _LOG_INITIALIZED:
        return

    log_level = to_logging_level(level)
    _LOGGER.setLevel(log_level)
    _LOGGER.propagate = False

    if console:
        fmt = logging.Formatter(fmt="%(asctime)s %(levelname)-7s %(message)s", datefmt="%H:%M:%S")
        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(fmt)
        _LOGGER.addHandler(ch)

    _LOG_INITIALIZED = True


def to_logging_level(level: str) -> int:
    level = (level or "INFO").upper()
    return {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }.get(level, logging.INFO)
