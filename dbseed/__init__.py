"""
dbseed - Database seeding for test classes

Binds declared resources and ordered setup operations to a hook that runs
before every test, replaying a setup sequence only when it changed.
"""

__version__ = "0.1.0"


__all__ = [
    "resource",
    "operation",
    "binder_configuration",
    "skip_next",
    "SeedContext",
    "SeedConfig",
    "load_config",
    "ConfigurationError",
    "ResolutionError",
    "LaunchError",
    "link_enclosing",
]

from .markers import resource, operation, binder_configuration, skip_next
from .context import SeedContext
from .config import SeedConfig, load_config
from .errors import ConfigurationError, ResolutionError, LaunchError
from .resolver import link_enclosing
