"""
Operation ordering.

Each operation gets an integer key: its explicit order when given, otherwise
the trailing decimal digits of its attribute name (users_2 -> 2). Sorting is
stable, so operations sharing a key keep their discovery order.
"""

import re
from typing import Optional

from dbseed.errors import ConfigurationError
from dbseed.markers import Declaration


TRAILING_DIGITS = re.compile(r"[0-9]+$")


def trailing_int(name: str) -> Optional[int]:
    """Return the integer formed by the trailing digits of name, or None."""
    match = TRAILING_DIGITS.search(name)
    return int(match.group(0)) if match else None


def operation_order(declaration: Declaration) -> int:
    """
    Resolve the ordering key of an operation declaration.

    Raises:
        ConfigurationError: If there is no explicit order and the name has no trailing digits
    """
    if declaration.marker.order is not None:
        return declaration.marker.order

    order = trailing_int(declaration.name or "")
    if order is None:
        raise ConfigurationError(
            f"No order specified for operation {declaration.qualified_name} and implicit order "
            f"cannot be determined by inspecting the field name"
        )
    return order


def sort_operations(declarations: list[Declaration]) -> list[Declaration]:
    """Stable ascending sort of operation declarations by ordering key."""
    return sorted(declarations, key=operation_order)
