import os
from logging import getLogger
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from .errors import MissingConfiguration

logger = getLogger(__name__)


def load_environ(env_file: Union[str, Path, None] = ".env") -> dict[str, str]:
    """Snapshot the process environment, with defaults from a .env file.

    Variables set in the real environment take precedence over the file.
    """
    environ: dict[str, str] = {}
    if env_file is not None and Path(env_file).is_file():
        file_values = dotenv_values(env_file)
        environ.update({k: v for k, v in file_values.items() if v is not None})
        logger.debug(f"Loaded {len(environ)} values from {env_file}")
    environ.update(os.environ)
    return environ


def require_value(environ: Mapping[str, str], key: str) -> str:
    value = environ.get(key)
    if value is None or value.strip() == "":
        raise MissingConfiguration(key)
    return value.strip()


def optional_value(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()
