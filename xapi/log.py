# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging
import logging.config

app_logger = logging.getLogger("xapi")

# verbosity flag count -> level name
_VERBOSITY_LEVELS = ["error", "warning", "info", "debug"]


def level_from_verbosity(verbosity: int) -> str:
    """Maps the number of `-v` flags given on the command line to a log level name."""
    verbosity = max(0, min(verbosity, len(_VERBOSITY_LEVELS) - 1))
    return _VERBOSITY_LEVELS[verbosity]


def configure_logger(level: str, format: str, output_stream, error_stream) -> None:
    # NOTE According to <https://clig.dev/#the-basics>,
    #      all logging should go to stderr, so `output_stream` stays unused
    #      and is only accepted to mirror the CLI IO pair.
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "message_only": {
                "format": format
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "message_only",
                "stream": error_stream
            },
        },
        "loggers": {
            "xapi": {
                "level": level.upper(),
                "propagate": True
            },
            "urllib3": {
                "level": "WARNING" if level.lower() != "debug" else "DEBUG",
                "propagate": True
            },
        },
        "root": {
            "handlers": ["stderr"],
            "level": "ERROR",
        },
    }
    logging.config.dictConfig(logging_config)


def get_child_logger(suffix: str) -> logging.Logger:
    return app_logger.getChild(suffix)
