"""
SeedContext - introspection results and replay state for one test class.

A context is created once, before the first test case it serves, and is
passed explicitly to the per-test orchestration. It holds the resource
bindings and one replay tracker per binding. Contexts are never shared
between test classes (or between instances in per_instance lifecycle).
"""

import logging
from typing import Any, Callable, Optional

from dbseed.bindings import ResourceBinding, introspect
from dbseed.config import SeedConfig
from dbseed.engine import BinderConfiguration, DbSetupTracker
from dbseed.launcher import launch_binding
from dbseed.markers import has_skip_next
from dbseed.resolver import InstanceResolver

logger = logging.getLogger(__name__)


class SeedContext:
    """
    Per-instance state store.

    Usage:
        context = SeedContext.for_class(TestUsers)
        # before every test case:
        context.before_each(test_instance, test_instance.test_something)
    """

    def __init__(
        self,
        test_class: type,
        bindings: list[ResourceBinding],
        tracker_factory: Callable[[], DbSetupTracker] = DbSetupTracker,
        resolver: Optional[InstanceResolver] = None,
        default_binder: Optional[BinderConfiguration] = None,
    ):
        self.test_class = test_class
        self.bindings = tuple(bindings)
        self.trackers = tuple(tracker_factory() for _ in self.bindings)
        self.resolver = resolver or InstanceResolver()
        self.default_binder = default_binder or SeedConfig().get_default_binder()

    @classmethod
    def for_class(
        cls,
        test_class: type,
        config: Optional[SeedConfig] = None,
        tracker_factory: Callable[[], DbSetupTracker] = DbSetupTracker,
        resolver: Optional[InstanceResolver] = None,
    ) -> "SeedContext":
        """
        Introspect test_class and create its context.

        Raises:
            ConfigurationError: On any declaration error
            ConfigError: If the configured default binder cannot be resolved
        """
        config = config or SeedConfig()
        bindings = introspect(test_class)
        logger.debug("Bound %d resources for %s", len(bindings), test_class.__qualname__)
        return cls(
            test_class,
            bindings,
            tracker_factory=tracker_factory,
            resolver=resolver,
            default_binder=config.get_default_binder(),
        )

    def before_each(self, instance: Any, test_method: Any = None, skip_next: bool = False) -> list[str]:
        """
        Apply every binding's setup before one test case.

        Bindings run in discovery order. The first failure aborts the hook.

        Args:
            instance: Current test instance
            test_method: Current test function, checked for skip_next
            skip_next: Force skip_next regardless of test_method

        Returns:
            Names of the resources whose setup was launched
        """
        skip_next = skip_next or has_skip_next(test_method)
        launched = []
        for binding, tracker in zip(self.bindings, self.trackers):
            if launch_binding(binding, tracker, instance, self.resolver, self.default_binder, skip_next):
                launched.append(binding.name)
        return launched

    def __repr__(self) -> str:
        return f"SeedContext({self.test_class.__qualname__}, bindings={len(self.bindings)})"
