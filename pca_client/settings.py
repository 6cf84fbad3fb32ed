"""
Settings — Configuration for the Public Content API client.

Settings are read from environment variables, optionally loaded from a .env
file with python-dotenv. DEFAULT_SETTINGS supplies the fallback for every
variable that is not set.

Configuration precedence (highest to lowest):
  1. Explicit arguments (CLI flags, constructor parameters)
  2. Environment variables (from .env file or the process environment)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  PCA_ENDPOINT            GraphQL endpoint URL of the content service (required)
  PCA_REQUEST_TIMEOUT     Request timeout in milliseconds (0 = no timeout)
  PCA_DEBUG               Whether to log request/response details
  PCA_DEFAULT_NAMESPACE   Namespace used when a CLI call names none ("tcm" or "ish")
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .enums import ContentNamespace
from .exceptions import ConfigurationError, UnknownNamespaceError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "PCA_ENDPOINT": "",
    "PCA_REQUEST_TIMEOUT": 30000,
    "PCA_DEBUG": False,
    "PCA_DEFAULT_NAMESPACE": "tcm",
}


@dataclass
class Settings:
    endpoint: str = DEFAULT_SETTINGS["PCA_ENDPOINT"]
    request_timeout: int = DEFAULT_SETTINGS["PCA_REQUEST_TIMEOUT"]
    debug: bool = DEFAULT_SETTINGS["PCA_DEBUG"]
    default_namespace: str = DEFAULT_SETTINGS["PCA_DEFAULT_NAMESPACE"]

    def validate(self) -> List[str]:
        """Check that all required values are present and well formed.

        Returns:
            A list of error messages; empty when the settings are usable.
        """
        errors = []
        if not self.endpoint:
            errors.append("PCA_ENDPOINT is required")
        elif not self.endpoint.startswith(("http://", "https://")):
            errors.append(f"PCA_ENDPOINT must be an http(s) URL, got '{self.endpoint}'")
        if self.request_timeout < 0:
            errors.append("PCA_REQUEST_TIMEOUT must be >= 0")
        try:
            ContentNamespace.lookup(self.default_namespace)
        except UnknownNamespaceError:
            errors.append(f"PCA_DEFAULT_NAMESPACE '{self.default_namespace}' is not a known namespace")
        return errors

    @property
    def namespace(self) -> ContentNamespace:
        return ContentNamespace.lookup(self.default_namespace)


def load_settings(env_file: Optional[str] = "./.env") -> Settings:
    """Load settings from the environment.

    Args:
        env_file: Path to a .env file. If the file exists, it is loaded via
                  python-dotenv (without overriding variables already set).

    Raises:
        ConfigurationError: If PCA_REQUEST_TIMEOUT is not an integer.
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            logger.info("Loaded configuration from: %s", env_file)
        else:
            logger.debug("%s not found, using defaults/environment", env_file)

    raw_timeout = os.getenv("PCA_REQUEST_TIMEOUT", str(DEFAULT_SETTINGS["PCA_REQUEST_TIMEOUT"]))
    try:
        request_timeout = int(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"PCA_REQUEST_TIMEOUT must be an integer, got '{raw_timeout}'") from None

    return Settings(
        endpoint=os.getenv("PCA_ENDPOINT", DEFAULT_SETTINGS["PCA_ENDPOINT"]),
        request_timeout=request_timeout,
        debug=os.getenv("PCA_DEBUG", str(DEFAULT_SETTINGS["PCA_DEBUG"])).lower() == "true",
        default_namespace=os.getenv("PCA_DEFAULT_NAMESPACE", DEFAULT_SETTINGS["PCA_DEFAULT_NAMESPACE"]),
    )
