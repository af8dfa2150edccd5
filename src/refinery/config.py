"""Runtime settings for the refinery command line.

Settings come from environment variables, optionally seeded from a ``.env``
file in the working directory:

- ``REFINERY_DEBUG``: "1", "true" or "yes" enables debug logging
- ``REFINERY_LOG_LEVEL``: DEBUG, INFO, WARNING (default), ERROR or CRITICAL
- ``REFINERY_LOG_FILE``: optional path of a rotating log file
"""

import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from .models import RefineryBaseModel

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RefineryConfigModel(RefineryBaseModel):
    debug: bool = False
    log_level: LogLevel = "WARNING"
    log_file: Path | None = None


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def load_config(env_file: Path | None = None) -> RefineryConfigModel:
    """Load settings from the environment.

    Args:
        env_file: Explicit ``.env`` path. When omitted, ``.env`` is searched for
            from the current directory upwards. Variables already set in the
            environment win over the file.

    Raises:
        ValueError: If a variable holds an invalid value
    """
    dotenv_path = str(env_file) if env_file is not None else find_dotenv(usecwd=True)
    if dotenv_path and load_dotenv(dotenv_path, override=False):
        logger.debug(f"Loaded environment from {dotenv_path}")

    log_file = os.environ.get("REFINERY_LOG_FILE")
    try:
        return RefineryConfigModel(
            debug=get_env_flag("REFINERY_DEBUG"),
            log_level=os.environ.get("REFINERY_LOG_LEVEL", "WARNING").upper(),
            log_file=Path(log_file) if log_file else None,
        )
    except ValidationError as e:
        raise ValueError(f"Invalid refinery configuration: {e}") from e
