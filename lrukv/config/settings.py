"""
LRU-KV Configuration Settings

This module contains all configuration constants for the LRU-KV server.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("LRUKV_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("LRUKV_PORT", "6379"))

    # Cache settings
    MAX_SIZE: int = int(os.environ.get("LRUKV_MAX_SIZE", "100"))

    # Connection settings
    READ_BUFFER_SIZE: int = 4096  # One request must fit in a single read

    # Logging settings
    DEBUG: bool = os.environ.get("LRUKV_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("LRUKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
