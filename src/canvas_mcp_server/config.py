"""
Configuration Management for Canvas MCP Server

This module centralizes configuration loading for the Canvas MCP server.
It reads environment variables (optionally from a .env file) and exposes
them as module-level settings.
"""

import logging
import os
import re

from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1000
DEFAULT_TIMEOUT = 30000

REQUIRED_VARIABLES = ("CANVAS_API_TOKEN", "CANVAS_DOMAIN")


def normalize_domain(domain: str | None) -> str | None:
    """
    Reduce a Canvas URL to its host name.

    "https://school.instructure.com/api/v1/" becomes "school.instructure.com".
    """
    if not domain:
        return domain
    domain = re.sub(r"^https?://", "", domain.strip())
    domain = domain.rstrip("/")
    if domain.endswith("/api/v1"):
        domain = domain[: -len("/api/v1")]
    return domain.rstrip("/")


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or value < minimum:
        logger.warning(f"Invalid value for {name}: {raw!r}, using default {default}")
        return default
    return value


# Canvas API configuration
API_TOKEN = os.environ.get("CANVAS_API_TOKEN")
DOMAIN = normalize_domain(os.environ.get("CANVAS_DOMAIN"))

# Transport settings
MAX_RETRIES = _int_env("CANVAS_MAX_RETRIES", DEFAULT_MAX_RETRIES)
RETRY_DELAY = _int_env("CANVAS_RETRY_DELAY", DEFAULT_RETRY_DELAY)
TIMEOUT = _int_env("CANVAS_TIMEOUT", DEFAULT_TIMEOUT, minimum=1)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
if LOG_LEVEL not in logging.getLevelNamesMapping():
    logger.warning(f"Unknown LOG_LEVEL {LOG_LEVEL!r}, using INFO")
    LOG_LEVEL = "INFO"


def validate_config() -> list[str]:
    """
    Check that the required settings are present.

    Returns:
        Names of the missing environment variables (empty when complete)
    """
    values = {"CANVAS_API_TOKEN": API_TOKEN, "CANVAS_DOMAIN": DOMAIN}
    return [name for name in REQUIRED_VARIABLES if not values[name]]


# Export configuration variables
__all__ = [
    "API_TOKEN",
    "DOMAIN",
    "MAX_RETRIES",
    "RETRY_DELAY",
    "TIMEOUT",
    "LOG_LEVEL",
    "normalize_domain",
    "validate_config",
]
