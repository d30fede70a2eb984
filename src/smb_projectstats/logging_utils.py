# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Logging helpers for SMB ProjectStats.

Library modules obtain their logger through ``get_logger(__name__)``. The
root handler is installed once, so reloading modules in development does
not duplicate output. The level is taken from the ``[logging]`` section of
the configuration file when the CLI starts.
"""

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Install the root handler (once) and set the package log level."""
    global _LOGGER_INITIALISED

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.getLogger("smb_projectstats").setLevel(level)

    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logging.getLogger().addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger."""
    return logging.getLogger(name)
