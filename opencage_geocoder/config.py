"""
Configuration loading for the OpenCage geocoder client.

Example config.toml:

    [opencage]
    api-key = "${OPENCAGE_API_KEY}"
    request-timeout = 10
    disable-rate-limit-sleep = false
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, NotRequired

import tomli

from .exceptions import ConfigError

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict

logger = logging.getLogger(__name__)

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"


# [opencage] configuration section. TOML keys use dashes, hence the functional form:
#   api-key: OpenCage API key
#   disable-rate-limit-sleep: Turn request pacing off
#   request-timeout: HTTP request timeout in seconds
#   endpoint: API base URL override
ClientConfig = TypedDict(
    "ClientConfig",
    {
        "api-key": str,
        "disable-rate-limit-sleep": NotRequired[bool],
        "request-timeout": NotRequired[float],
        "endpoint": NotRequired[str],
    },
)


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with its value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings, dicts and lists are processed, everything else is returned
    unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def loadConfig(configPath: str = "config.toml") -> Dict[str, Any]:
    """Load configuration from TOML file, dood!

    Args:
        configPath: Path to the TOML file

    Returns:
        Configuration dict with environment variables substituted

    Raises:
        ConfigError: If the file does not exist or is not valid TOML
    """
    configFile = Path(configPath)
    if not configFile.exists():
        raise ConfigError(f"Configuration file {configPath} not found")

    try:
        with open(configFile, "rb") as f:
            config = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse configuration file {configPath}: {e}") from e

    logger.info(f"Loaded config from {configPath}")
    return substituteEnvVars(config)


def getClientConfig(config: Dict[str, Any]) -> ClientConfig:
    """Get [opencage] section and validate it.

    Args:
        config: Configuration returned by loadConfig()

    Returns:
        Client configuration section

    Raises:
        ConfigError: If the section or the API key is missing
    """
    section = config.get("opencage")
    if not isinstance(section, dict):
        raise ConfigError("[opencage] section not found in configuration")

    apiKey = section.get("api-key", "")
    # An unset ${VAR} stays as is after substitution
    if not isinstance(apiKey, str) or apiKey in ("", API_KEY_PLACEHOLDER) or apiKey.startswith("${"):
        raise ConfigError("Please set opencage.api-key in configuration")

    disableSleep = section.get("disable-rate-limit-sleep", False)
    if not isinstance(disableSleep, bool):
        raise ConfigError(f"opencage.disable-rate-limit-sleep must be true or false, got {disableSleep!r}")

    requestTimeout = section.get("request-timeout", 10)
    # bool is an int subclass
    if not isinstance(requestTimeout, (int, float)) or isinstance(requestTimeout, bool) or requestTimeout <= 0:
        raise ConfigError(f"opencage.request-timeout must be a positive number, got {requestTimeout!r}")

    endpoint = section.get("endpoint", "")
    if not isinstance(endpoint, str):
        raise ConfigError(f"opencage.endpoint must be a string, got {endpoint!r}")

    return section  # type: ignore[return-value]
