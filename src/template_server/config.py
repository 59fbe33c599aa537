"""Configuration module for the template server.

Values come from environment variables, optionally loaded from a .env file,
and are read once at import time.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SERVER_NAME = os.getenv("TEMPLATE_SERVER_NAME", "Template MCP Server")
SERVER_VERSION = os.getenv("TEMPLATE_SERVER_VERSION", "0.1.0")

MAX_CONCURRENT_REQUESTS = int(os.getenv("MAX_CONCURRENT_REQUESTS", "100"))
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
DEBUG_MODE = _env_bool("DEBUG_MODE")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG_MODE else "INFO").upper()

SUPPORTED_FORMATS = ["json", "text", "binary"]
