import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Libraries that log every scheduler wakeup at INFO
NOISY_LOGGERS = ("apscheduler", "apscheduler.scheduler", "apscheduler.executors.default")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure piggy logging once for the process.

    Engine events are emitted as ``EVENT | key=value`` messages; this only
    decides where they go and at what level.
    """
    root_level = getattr(logging, str(level).upper(), logging.INFO)

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
