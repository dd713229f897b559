"""
Logging
=======

Usage:
    from shared.logging import bind_context, get_logger, setup_logging

    setup_logging(log_level="DEBUG", service_name="asset-tracker")
    logger = get_logger(__name__)

    bind_context(user_id=profile["id"])
    logger.info("warranty_registration_submitted", asset_id=12)
"""

from shared.logging.logger import bind_context, clear_context, get_logger, setup_logging


__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "setup_logging",
]
