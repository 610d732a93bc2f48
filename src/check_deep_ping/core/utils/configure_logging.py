import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

# logrus style level names accepted on the command line
LEVEL_ALIASES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def parse_level(level, default=logging.CRITICAL) -> int:
    """
    Resolves a level name ('debug', 'FATAL', ...) or number to a logging level.
    Raises ValueError for unknown names.
    """
    if isinstance(level, int):
        return level
    if level is None:
        return default
    try:
        return LEVEL_ALIASES[str(level).strip().lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {level!r}") from None


def configure_logger(general_level='CRITICAL', module_specific_levels=None, silenced_loggers=None):
    """
    Configures the root logger with a single stderr handler.
    stdout is reserved for the monitoring status line.
    """
    # 1. Create the handler and a standard formatter.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # 2. Configure the root logger.
    root_logger = logging.getLogger()
    root_logger.setLevel(parse_level(general_level))

    # 3. Clear any existing handlers and add the new one.
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # 4. Configure levels for specific modules.
    if module_specific_levels:
        for name, level in module_specific_levels.items():
            logging.getLogger(name).setLevel(parse_level(level, logging.INFO))

    # 5. Muzzle noisy loggers by setting their level high.
    if silenced_loggers:
        for name, level in silenced_loggers.items():
            logging.getLogger(name).setLevel(parse_level(level, logging.CRITICAL))
