"""
Query-string parsing.
"""

from .parser import ApiQuery, ApiQueryParser, parse_order

__all__ = ["ApiQuery", "ApiQueryParser", "parse_order"]
