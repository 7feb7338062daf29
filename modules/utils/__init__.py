"""Utility modules for armforge.

This package contains utility modules for string manipulation and parameter
document handling.
"""

from .string_utils import (
    snake_to_camel,
    parse_key_value_pairs,
    join_names,
    find_case_insensitive,
)

__all__ = [
    # String utilities
    "snake_to_camel",
    "parse_key_value_pairs",
    "join_names",
    "find_case_insensitive",
]
