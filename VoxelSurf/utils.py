"""
Utility Functions
=================

Logging setup shared by the VoxelSurf modules.
"""

import logging
import VoxelSurf


def configure_logging(level=logging.INFO, logfile=None):
    """Sets up the ``VoxelSurf`` logger, called once on import.

    Messages go to the console as ``"HH:MM:SS message"`` and, when
    ``logfile`` is given, also to that file. Calling it again replaces the
    handlers of the previous call, e.g. to switch to debug output::

        VoxelSurf.utils.configure_logging(logging.DEBUG, "extraction.log")
    """
    logger = logging.getLogger(VoxelSurf.__name__)
    logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile is not None:
        file_handler = logging.FileHandler(logfile)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
