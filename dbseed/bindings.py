"""
Resource bindings - validated, ordered view of a test class's declarations.

introspect() runs the full pipeline once per test class:
    scan -> collect -> order -> validate references -> build bindings

One ResourceBinding is produced per declared resource, in resource
discovery order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from dbseed.collector import (
    collect_binder_configurations,
    collect_operations,
    collect_resources,
)
from dbseed.errors import ConfigurationError
from dbseed.markers import Declaration
from dbseed.ordering import operation_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceBinding:
    """
    A resource with the operations and binder configuration targeting it.

    Attributes:
        name: Resource name
        resource: The resource declaration
        operations: Operation declarations in execution order
        binder_configuration: Declared binder configuration, None for the default
    """
    name: str
    resource: Declaration
    operations: tuple[Declaration, ...] = field(default_factory=tuple)
    binder_configuration: Optional[Declaration] = None

    def describe(self) -> dict[str, Any]:
        """Summarize the binding for display."""
        return {
            "resource": self.name,
            "declared_by": self.resource.qualified_name,
            "operations": [
                {"name": op.qualified_name, "order": operation_order(op)}
                for op in self.operations
            ],
            "binder_configuration": (
                self.binder_configuration.qualified_name if self.binder_configuration else "default"
            ),
        }


def validate_references(
    resources: Mapping[str, Declaration],
    declarations: Mapping[Declaration, tuple[str, ...]],
) -> None:
    """
    Check that every targeted resource name is declared.

    Raises:
        ConfigurationError: Naming the first unknown resource
    """
    for declaration, sources in declarations.items():
        for source in sources:
            if source not in resources:
                raise ConfigurationError(
                    f"This resource does not exist: {source} "
                    f"(referenced by {declaration.qualified_name})"
                )


def build_bindings(
    resources: Mapping[str, Declaration],
    binder_configurations: Mapping[Declaration, tuple[str, ...]],
    operations: Mapping[Declaration, tuple[str, ...]],
) -> list[ResourceBinding]:
    """
    Assemble one binding per resource.

    Raises:
        ConfigurationError: If more than one binder configuration targets a resource
    """
    bindings: list[ResourceBinding] = []
    for name, resource_declaration in resources.items():
        targeted = tuple(op for op, sources in operations.items() if name in sources)

        binder: Optional[Declaration] = None
        for declaration, sources in binder_configurations.items():
            if name not in sources:
                continue
            if binder is not None:
                raise ConfigurationError(
                    f"There is more than 1 binder configuration for resource: {name} "
                    f"({binder.qualified_name}, {declaration.qualified_name})"
                )
            binder = declaration

        logger.debug("Found %d operations for %s resource", len(targeted), name)
        bindings.append(ResourceBinding(name, resource_declaration, targeted, binder))
    return bindings


def introspect(test_class: type) -> list[ResourceBinding]:
    """
    Discover, validate and bind the declarations of a test class.

    Raises:
        ConfigurationError: On any declaration error
    """
    resources = collect_resources(test_class)
    binder_configurations = collect_binder_configurations(test_class)
    operations = collect_operations(test_class)

    validate_references(resources, binder_configurations)
    validate_references(resources, operations)

    return build_bindings(resources, binder_configurations, operations)
