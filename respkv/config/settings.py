"""
RESP-KV Configuration Settings

This module contains all configuration constants for the RESP-KV server.
Values can be overridden through environment variables or CLI flags.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("RESPKV_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("RESPKV_PORT", "6379"))

    # Expiry settings
    CLEANUP_INTERVAL: float = float(os.environ.get("RESPKV_CLEANUP_INTERVAL", "0"))  # 0 disables the sweep

    # Connection settings
    READ_BUFFER_SIZE: int = 4096
    # A request still incomplete at this size gets an error and the connection is closed
    MAX_REQUEST_SIZE: int = int(os.environ.get("RESPKV_MAX_REQUEST_SIZE", str(1024 * 1024)))

    # Logging settings
    DEBUG: bool = os.environ.get("RESPKV_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("RESPKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
