"""
Error classes for dbseed.

All declaration problems are detected eagerly and raised as exceptions:
- ConfigurationError: Invalid declarations on a test class (missing or duplicate
  resources, unknown resource references, undeterminable operation order)
- ResolutionError: A declaration could not be read from the test instance chain
- LaunchError: The execution engine failed while applying operations

The host runner surfaces these as test errors. Nothing here is retried.
"""


class DbSeedError(Exception):
    """Base exception for dbseed."""
    pass


class ConfigurationError(DbSeedError):
    """
    Invalid declarations on a test class.

    Examples:
    - No resource declared
    - Two resources share a name
    - An operation or binder configuration targets an unknown resource
    - More than one binder configuration targets the same resource
    - An operation has no explicit order and no trailing digits in its name
    - A declared value does not provide the capability its marker requires
    """
    pass


class ResolutionError(ConfigurationError):
    """
    A declaration could not be read at orchestration time.

    Raised when the enclosing instance holding a declaration cannot be
    reached from the current test instance.
    """
    pass


class LaunchError(DbSeedError):
    """The execution engine failed to apply a setup sequence."""
    pass
