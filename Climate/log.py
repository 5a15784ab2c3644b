"""Logging configuration."""

import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)-15s %(threadName)-12s %(name)-8s %(levelname)-8s %(message)s',
    datefmt='%b-%d %H:%M:%S'
)

# Request lines from the development server go through werkzeug.
logging.getLogger('werkzeug').setLevel(logging.INFO)

# Name the logger after the package; dataset load and lookup misses are logged at INFO.
logger = logging.getLogger(__package__)
