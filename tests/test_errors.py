"""Tests for dbseed error classes.

Tests cover:
- Error hierarchy
- Exceptions can be raised and caught as DbSeedError
"""

import pytest
from dbseed.errors import DbSeedError, ConfigurationError, ResolutionError, LaunchError
from dbseed.config import ConfigError


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_base_is_exception(self):
        assert issubclass(DbSeedError, Exception)

    @pytest.mark.parametrize("error", [ConfigurationError, LaunchError, ConfigError])
    def test_subclasses_of_base(self, error):
        assert issubclass(error, DbSeedError)

    def test_resolution_error_is_configuration_error(self):
        """ResolutionError can be caught as ConfigurationError."""
        with pytest.raises(ConfigurationError):
            raise ResolutionError("no enclosing instance")

    def test_has_message(self):
        error = ConfigurationError("my message")
        assert str(error) == "my message"
