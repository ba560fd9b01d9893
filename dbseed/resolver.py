"""
Instance resolver - reads declarations made on enclosing classes.

Python nested classes keep no reference to an enclosing instance. The walk
from an inner test instance to the instance owning a declaration therefore
goes through an explicit list of accessors, each mapping an instance to its
enclosing instance (or None). The default accessor reads the back-reference
stored by link_enclosing().
"""

from typing import Any, Callable, Iterable, Optional

from dbseed.errors import ResolutionError
from dbseed.markers import Declaration
from dbseed.scanner import enclosing_chain


ENCLOSING_ATTRIBUTE = "__dbseed_enclosing__"

EnclosingAccessor = Callable[[Any], Optional[Any]]


def linked_enclosing(instance: Any) -> Optional[Any]:
    """Default accessor: the back-reference set by link_enclosing()."""
    return getattr(instance, "__dict__", {}).get(ENCLOSING_ATTRIBUTE)


def link_enclosing(inner: Any, outer: Any) -> Any:
    """Record outer as the enclosing instance of inner and return inner."""
    inner.__dict__[ENCLOSING_ATTRIBUTE] = outer
    return inner


def link_enclosing_chain(instance: Any) -> Any:
    """
    Create and link enclosing instances for a nested test instance.

    Each missing enclosing instance is created by calling its class with no
    arguments. Links that already exist are kept.
    """
    chain = enclosing_chain(type(instance))[:-1]
    current = instance
    for outer_class in reversed(chain):
        outer = linked_enclosing(current)
        if outer is None:
            outer = outer_class()
            link_enclosing(current, outer)
        current = outer
    return instance


class InstanceResolver:
    """
    Resolves the instance a declaration must be read from.

    Usage:
        resolver = InstanceResolver()
        value = resolver.read(declaration, test_instance)

        # custom back-references
        resolver = InstanceResolver([lambda inner: getattr(inner, "outer", None)])
    """

    def __init__(self, accessors: Optional[Iterable[EnclosingAccessor]] = None):
        self._accessors: list[EnclosingAccessor] = list(accessors) if accessors is not None else [linked_enclosing]

    def enclosing(self, instance: Any) -> Optional[Any]:
        """Return the first enclosing instance an accessor yields, or None."""
        for accessor in self._accessors:
            outer = accessor(instance)
            if outer is not None:
                return outer
        return None

    def resolve(self, declaring_class: type, instance: Any) -> Any:
        """
        Walk enclosing instances until one is an instance of declaring_class.

        Raises:
            ResolutionError: If the chain ends or loops before a match
        """
        seen: set[int] = set()
        current = instance
        while not isinstance(current, declaring_class):
            seen.add(id(current))
            outer = self.enclosing(current)
            if outer is None or id(outer) in seen:
                raise ResolutionError(
                    f"Cannot resolve enclosing instance of type {declaring_class.__qualname__} "
                    f"from {type(instance).__qualname__}"
                )
            current = outer
        return current

    def read(self, declaration: Declaration, instance: Any) -> Any:
        """Read a declaration's current value for a test instance."""
        if declaration.is_static:
            return declaration.read()
        return declaration.read(self.resolve(declaration.owner, instance))
