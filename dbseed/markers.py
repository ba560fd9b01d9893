"""
Declaration markers placed on test classes.

Markers turn class attributes into declarations dbseed can discover:

    @pytest.mark.dbseed
    class TestUsers:
        @resource("db")
        def db(self):
            return self.connection

        clean_0 = operation("db")(delete_all_from("users"))

        @operation("db")
        def users_1(self):
            return insert_into("users", ["id", "name"], [(1, "ada")])

        @skip_next
        def test_read_only(self):
            ...

A marker applied to a function declares an instance-bound value (read like a
property, on the resolved instance). Applied to any other value, or to a
staticmethod, it declares a static value.
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from dbseed.errors import ConfigurationError


SKIP_NEXT_ATTRIBUTE = "__dbseed_skip_next__"
SKIP_NEXT_MARK = "dbseed_skip_next"


class MarkerKind(str, Enum):
    """The three field declaration kinds."""
    RESOURCE = "resource"
    BINDER_CONFIGURATION = "binder_configuration"
    OPERATION = "operation"


@dataclass(frozen=True)
class Marker:
    """
    Marker metadata attached to a declaration.

    Attributes:
        kind: Declaration kind
        name: Resource name (resource markers only)
        sources: Target resource names (operation and binder markers)
        order: Explicit operation order, None when unspecified
    """
    kind: MarkerKind
    name: Optional[str] = None
    sources: tuple[str, ...] = ()
    order: Optional[int] = None

    def __call__(self, target: Any) -> "Declaration":
        return Declaration(self, target)


class Declaration:
    """
    A marked class attribute.

    Descriptor: reading it through an instance yields its value, reading it
    through the class yields the declaration itself.
    """

    def __init__(self, marker: Marker, target: Any):
        self.marker = marker
        if isinstance(target, staticmethod):
            self._getter: Callable[..., Any] = target.__func__
            self.is_static = True
            self._call = True
        elif inspect.isfunction(target):
            self._getter = target
            self.is_static = False
            self._call = True
        else:
            self._getter = target
            self.is_static = True
            self._call = False
        self.name: Optional[str] = getattr(target, "__name__", None) if self._call else None
        self.owner: Optional[type] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return self.read(instance)

    @property
    def function(self) -> Optional[Callable[..., Any]]:
        """The declaring function, None for plain static values."""
        return self._getter if self._call else None

    def read(self, instance: Any = None) -> Any:
        """
        Read the declared value.

        Args:
            instance: Instance of the declaring class; ignored for static declarations
        """
        if not self._call:
            return self._getter
        if self.is_static:
            return self._getter()
        return self._getter(instance)

    @property
    def qualified_name(self) -> str:
        owner = self.owner.__qualname__ if self.owner is not None else "?"
        return f"{owner}.{self.name}"

    def __repr__(self) -> str:
        return f"Declaration({self.marker.kind.value}, {self.qualified_name})"


def _sources(kind: str, sources: tuple[Any, ...]) -> tuple[str, ...]:
    for source in sources:
        if not isinstance(source, str) or not source:
            raise ConfigurationError(f"{kind}: resource names must be non-empty strings, got {source!r}")
    return tuple(sources)


def resource(name: str) -> Marker:
    """Declare a named resource (a Destination or DB-API connection)."""
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"resource: name must be a non-empty string, got {name!r}")
    return Marker(MarkerKind.RESOURCE, name=name)


def binder_configuration(*sources: str) -> Marker:
    """Declare the binder configuration for the named resources."""
    return Marker(MarkerKind.BINDER_CONFIGURATION, sources=_sources("binder_configuration", sources))


def operation(*sources: str, order: Optional[int] = None) -> Marker:
    """
    Declare a setup operation targeting the named resources.

    Args:
        sources: Target resource names
        order: Explicit non-negative position; when omitted, the trailing
            digits of the attribute name are used
    """
    if order is not None and (isinstance(order, bool) or not isinstance(order, int) or order < 0):
        raise ConfigurationError(f"operation: order must be a non-negative int, got {order!r}")
    return Marker(MarkerKind.OPERATION, sources=_sources("operation", sources), order=order)


def skip_next(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Mark a test so the setup launch before the next test is unconditional."""
    setattr(fn, SKIP_NEXT_ATTRIBUTE, True)
    return fn


def has_skip_next(test_method: Any) -> bool:
    """True when a test function carries skip_next or the dbseed_skip_next mark."""
    if test_method is None:
        return False
    test_method = getattr(test_method, "__func__", test_method)
    if getattr(test_method, SKIP_NEXT_ATTRIBUTE, False):
        return True
    return any(getattr(m, "name", None) == SKIP_NEXT_MARK for m in getattr(test_method, "pytestmark", ()))
