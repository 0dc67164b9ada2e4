import sys
import logging

# --------------------------------------------------------
# One logger for every pose_replay module
# --------------------------------------------------------
LOGGER_NAME = "pose_replay"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

# Avoid duplicate handlers when imported more than once
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.propagate = False


def set_verbose(enabled: bool = True):
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)
