"""
Destinations - where a setup sequence is applied.

A resource declaration may hold either a Destination or a live DB-API
connection; as_destination() normalizes both.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from dbseed.errors import ConfigurationError


def is_connection_like(value: Any) -> bool:
    """True for objects exposing the DB-API cursor() method."""
    return callable(getattr(value, "cursor", None))


class Destination(ABC):
    """
    Abstract base class for setup destinations.

    connect() yields an open DB-API connection for the duration of one launch.
    """

    @abstractmethod
    def connect(self) -> Any:
        """Context manager yielding an open DB-API connection."""
        pass


@dataclass(frozen=True)
class ConnectionDestination(Destination):
    """
    Destination backed by a connection owned by the test.

    The connection is never closed here. Two destinations are equal when they
    wrap the same connection object.
    """
    connection: Any = field(compare=False)

    @contextmanager
    def connect(self) -> Iterator[Any]:
        yield self.connection

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ConnectionDestination) and other.connection is self.connection

    def __hash__(self) -> int:
        return id(self.connection)


@dataclass(frozen=True)
class ConnectionFactoryDestination(Destination):
    """
    Destination opening a fresh connection per launch.

    Attributes:
        factory: Zero-argument callable returning a DB-API connection
    """
    factory: Callable[[], Any]

    @contextmanager
    def connect(self) -> Iterator[Any]:
        connection = self.factory()
        try:
            yield connection
        finally:
            connection.close()


def as_destination(value: Any) -> Destination:
    """
    Normalize a resource value into a Destination.

    Raises:
        ConfigurationError: If value is neither a Destination nor connection-like
    """
    if isinstance(value, Destination):
        return value
    if is_connection_like(value):
        return ConnectionDestination(value)
    raise ConfigurationError(
        f"Resource value should be a Destination or a DB-API connection, got {type(value).__name__}"
    )
