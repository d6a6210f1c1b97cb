"""
Core utilities for the Newbee Match backend.

This package provides logging configuration and monitoring helpers shared by
the CRM client and the web server.
"""

from newbee_match.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
