"""
Launch orchestration - applies each binding before a test case.

For one binding:
1. No operations -> nothing is read and nothing is launched
2. Read the resource value and wrap it as a Destination
3. Read every operation value, in binding order, into one sequence
4. Read the declared binder configuration, or use the default
5. Ask the binding's tracker to launch if the setup changed
6. If the current test carries skip_next, arm the tracker so the next
   decision launches unconditionally
"""

import logging
from typing import Any

from dbseed.bindings import ResourceBinding
from dbseed.collector import check_value
from dbseed.engine import (
    BinderConfiguration,
    DbSetup,
    DbSetupTracker,
    as_destination,
    sequence_of,
)
from dbseed.resolver import InstanceResolver

logger = logging.getLogger(__name__)


def launch_binding(
    binding: ResourceBinding,
    tracker: DbSetupTracker,
    instance: Any,
    resolver: InstanceResolver,
    default_binder: BinderConfiguration,
    skip_next: bool = False,
) -> bool:
    """
    Run one binding's setup for the current test case.

    Args:
        binding: The resource binding
        tracker: Replay tracker owned by this binding
        instance: Current test instance
        resolver: Resolver for declarations on enclosing classes
        default_binder: Binder used when the binding declares none
        skip_next: Whether the current test carries the one-shot skip marker

    Returns:
        True if the setup was launched

    Raises:
        ConfigurationError: If a value cannot be resolved or lacks its capability
        LaunchError: If the execution engine fails
    """
    logger.debug("Launching %d operations for %s resource", len(binding.operations), binding.name)
    if not binding.operations:
        return False

    destination = as_destination(
        check_value(binding.resource, resolver.read(binding.resource, instance))
    )
    operations = [
        check_value(declaration, resolver.read(declaration, instance))
        for declaration in binding.operations
    ]

    if binding.binder_configuration is not None:
        binder = check_value(
            binding.binder_configuration,
            resolver.read(binding.binder_configuration, instance),
        )
    else:
        binder = default_binder

    launched = tracker.launch_if_necessary(DbSetup(destination, sequence_of(operations), binder))

    if skip_next:
        logger.debug("Next launch for %s resource will not be skipped", binding.name)
        tracker.skip_next_launch()

    return launched
