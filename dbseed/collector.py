"""
Declaration collector - one collection pass per declaration kind.

- Resources: at least one required, names unique -> {name: declaration}
- Binder configurations: optional -> {declaration: target names}
- Operations: optional, sorted by ordering key -> {declaration: target names}

Every declaration is checked against the capability its marker requires.
Plain values are checked directly; functions are checked through their
return annotation when it is a class. Values are checked again when read.
"""

import inspect
import logging
from typing import Any

from dbseed.engine import BinderConfiguration, Destination, Operation, is_connection_like
from dbseed.errors import ConfigurationError
from dbseed.markers import Declaration, MarkerKind
from dbseed.ordering import sort_operations
from dbseed.scanner import find_declarations

logger = logging.getLogger(__name__)


CAPABILITIES: dict[MarkerKind, str] = {
    MarkerKind.RESOURCE: "a Destination or a DB-API connection",
    MarkerKind.BINDER_CONFIGURATION: "a BinderConfiguration",
    MarkerKind.OPERATION: "an Operation",
}


def _provides(kind: MarkerKind, value: Any) -> bool:
    if kind == MarkerKind.RESOURCE:
        return isinstance(value, Destination) or is_connection_like(value)
    if kind == MarkerKind.BINDER_CONFIGURATION:
        return isinstance(value, BinderConfiguration)
    return isinstance(value, Operation)


def _type_provides(kind: MarkerKind, annotation: type) -> bool:
    if kind == MarkerKind.RESOURCE:
        return issubclass(annotation, Destination) or callable(getattr(annotation, "cursor", None))
    if kind == MarkerKind.BINDER_CONFIGURATION:
        return issubclass(annotation, BinderConfiguration)
    return issubclass(annotation, Operation)


def check_value(declaration: Declaration, value: Any) -> Any:
    """
    Check a value read from a declaration.

    Raises:
        ConfigurationError: If the value lacks the marker's capability
    """
    kind = declaration.marker.kind
    if not _provides(kind, value):
        raise ConfigurationError(
            f"@{kind.value} {declaration.qualified_name} should return {CAPABILITIES[kind]}, "
            f"got {type(value).__name__}"
        )
    return value


def check_declaration(declaration: Declaration) -> None:
    """Introspection-time capability check."""
    fn = declaration.function
    if fn is None:
        check_value(declaration, declaration.read())
        return

    annotation = inspect.signature(fn).return_annotation
    if isinstance(annotation, type) and annotation is not inspect.Signature.empty:
        kind = declaration.marker.kind
        if not _type_provides(kind, annotation):
            raise ConfigurationError(
                f"@{kind.value} {declaration.qualified_name} should return {CAPABILITIES[kind]}, "
                f"annotated as {annotation.__name__}"
            )


def collect_resources(test_class: type) -> dict[str, Declaration]:
    """
    Collect resource declarations by name, in discovery order.

    Raises:
        ConfigurationError: If none is declared or two share a name
    """
    declarations = find_declarations(test_class, MarkerKind.RESOURCE)
    if not declarations:
        raise ConfigurationError(f"No @resource found on {test_class.__qualname__}")

    resources: dict[str, Declaration] = {}
    for declaration in declarations:
        check_declaration(declaration)
        name = declaration.marker.name
        if name in resources:
            raise ConfigurationError(f"There is more than 1 @resource named: {name}")
        resources[name] = declaration
    return resources


def collect_binder_configurations(test_class: type) -> dict[Declaration, tuple[str, ...]]:
    """Collect binder configuration declarations and their target names."""
    result: dict[Declaration, tuple[str, ...]] = {}
    for declaration in find_declarations(test_class, MarkerKind.BINDER_CONFIGURATION):
        check_declaration(declaration)
        result[declaration] = declaration.marker.sources
    return result


def collect_operations(test_class: type) -> dict[Declaration, tuple[str, ...]]:
    """
    Collect operation declarations and their target names, sorted by order.

    Raises:
        ConfigurationError: If an operation's order cannot be determined
    """
    declarations = find_declarations(test_class, MarkerKind.OPERATION)
    if not declarations:
        logger.debug("There are no @operation declarations on %s", test_class.__qualname__)

    # dicts keep insertion order, so equal keys keep their sorted (stable) order
    result: dict[Declaration, tuple[str, ...]] = {}
    for declaration in sort_operations(declarations):
        check_declaration(declaration)
        if not declaration.marker.sources:
            logger.warning("@operation %s targets no resource and is ignored", declaration.qualified_name)
        result[declaration] = declaration.marker.sources
    return result
