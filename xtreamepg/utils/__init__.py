"""Utility helpers for XtreamEPG"""

from xtreamepg.utils.logging_setup import get_logger, parse_size, setup_logging

__all__ = [
    "get_logger",
    "parse_size",
    "setup_logging",
]
