"""
Utility modules for the marketplace lifecycle engine.
"""

from .formatting import clean_token, format_count, format_currency
from .dates import parse_instant
from .config import Config

__all__ = ["clean_token", "format_count", "format_currency", "parse_instant", "Config"]
