"""Core module exports."""

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    GENERIC_ERROR_MESSAGE,
    AppException,
    CacheFailure,
    FetchFailure,
    InvalidInput,
    ParseFailure,
    RateLimitError,
    SynthesisFailure,
)
from app.core.logging import get_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "GENERIC_ERROR_MESSAGE",
    "AppException",
    "CacheFailure",
    "FetchFailure",
    "InvalidInput",
    "ParseFailure",
    "RateLimitError",
    "SynthesisFailure",
]
