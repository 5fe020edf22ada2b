"""
Core Submodule

This module contains core functionality used across the application:
- Encryption of personal data at rest (data_safety)
- Centralized logging configuration (logging_config)
"""

from .data_safety import DataEncryption
from .logging_config import get_logger, setup_logging

__all__ = [
    'DataEncryption',
    'get_logger',
    'setup_logging',
]
