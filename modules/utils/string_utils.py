"""String manipulation utilities for armforge.

This module provides string processing functions for converting attribute
names into ARM property names and parsing KEY=VALUE style parameters.
"""

from typing import Dict, Iterable, Optional

from modules.exceptions import InputValidationError


def snake_to_camel(name: str) -> str:
    """Convert a snake_case attribute name to lowerCamelCase.

    Args:
        name: Attribute name (e.g., "platform_fault_domain_count")

    Returns:
        camelCase name (e.g., "platformFaultDomainCount")
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_key_value_pairs(
    pairs: Iterable[str], parameter: str = "Tag"
) -> Dict[str, str]:
    """Parse ["env=prod", "team=ops"] into {"env": "prod", "team": "ops"}.

    The value may be empty ("env=") and may itself contain "=". Later
    duplicates of a key win.

    Args:
        pairs: KEY=VALUE strings
        parameter: Parameter name used in error messages

    Returns:
        Ordered mapping of key to value

    Raises:
        InputValidationError: If an entry has no "=" or an empty key
    """
    out: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise InputValidationError(
                f"Invalid {parameter} entry '{pair}'. Expected KEY=VALUE",
                parameter=parameter,
                context={"value": pair},
            )
        out[key.strip()] = value
    return out


def join_names(names: Iterable[str], separator: str = ", ") -> str:
    """Join names for "supported values are ..." style messages."""
    return separator.join(str(n) for n in names)


def find_case_insensitive(
    name: str, candidates: Iterable[str]
) -> Optional[str]:
    """Return the candidate equal to ``name`` ignoring case, else None."""
    folded = name.casefold()
    for candidate in candidates:
        if candidate.casefold() == folded:
            return candidate
    return None
