"""
Binder configurations - translate Python values into DB-API parameters.

A binder configuration is declared per resource. When none is declared,
DefaultBinderConfiguration.INSTANCE is used.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from enum import Enum
from typing import Any


class BinderConfiguration(ABC):
    """
    Parameterizes how operation values reach the database driver.

    Subclasses decide the placeholder syntax (driver paramstyle) and how
    individual values are converted before being bound.
    """

    @abstractmethod
    def bind(self, value: Any) -> Any:
        """Convert a Python value into a driver parameter."""
        pass

    def placeholder(self, column: str) -> str:
        """Return the parameter marker for a column (qmark by default)."""
        return "?"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(type(self))


class DefaultBinderConfiguration(BinderConfiguration):
    """
    Default binder: qmark placeholders, enums by value, temporals as ISO strings.
    """

    INSTANCE: "DefaultBinderConfiguration"

    def bind(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        return value

    def __repr__(self) -> str:
        return "DefaultBinderConfiguration()"


DefaultBinderConfiguration.INSTANCE = DefaultBinderConfiguration()
