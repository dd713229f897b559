"""
Shared library of the asset tracker services.

Packages:
    config   - environment-driven settings (pydantic-settings)
    logging  - structlog setup and context binding
    auth     - passwords, session tokens, request identity
    models   - error and health response bodies
"""

__version__ = "0.1.0"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = ["__version__", "get_logger", "settings", "setup_logging"]
