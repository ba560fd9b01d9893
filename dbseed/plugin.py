"""
pytest plugin - seeds databases before each test of opted-in classes.

    @pytest.mark.dbseed
    class TestUsers:
        ...

        @pytest.mark.dbseed_skip_next
        def test_read_only(self):
            ...

Setup runs after the test's fixtures (including setup_method), so
declarations may read attributes those fixtures assign.

ini options:
    dbseed_config          path of a dbseed.yaml file
    dbseed_lifecycle       per_class (default) or per_instance
    dbseed_link_enclosing  create enclosing instances for nested classes (true)
"""

import logging
from pathlib import Path
from typing import Optional

import pytest

from dbseed.config import SeedConfig, load_config
from dbseed.context import SeedContext
from dbseed.markers import SKIP_NEXT_MARK
from dbseed.resolver import link_enclosing_chain

logger = logging.getLogger(__name__)


CONFIG_KEY = pytest.StashKey[SeedConfig]()
CONTEXT_KEY = pytest.StashKey[SeedContext]()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini("dbseed_config", "Path of the dbseed YAML configuration file", default="")
    parser.addini("dbseed_lifecycle", "Context lifecycle: per_class or per_instance", default="")
    parser.addini(
        "dbseed_link_enclosing",
        "Create and link enclosing instances for nested test classes",
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "dbseed: seed the declared resources before each test of this class"
    )
    config.addinivalue_line(
        "markers", f"{SKIP_NEXT_MARK}: launch the setup unconditionally before the next test"
    )

    config_path: Optional[Path] = None
    if config.getini("dbseed_config"):
        config_path = config.rootpath / config.getini("dbseed_config")

    config.stash[CONFIG_KEY] = load_config(config_path).override(
        lifecycle=config.getini("dbseed_lifecycle") or None,
        link_enclosing=config.getini("dbseed_link_enclosing") or None,
    )


def _context_holder(item: pytest.Function, seed_config: SeedConfig) -> pytest.Item | pytest.Collector:
    if seed_config.lifecycle == "per_instance":
        return item
    return item.getparent(pytest.Class) or item


def get_context(item: pytest.Function) -> SeedContext:
    """Get or create the SeedContext serving a test item."""
    seed_config = item.config.stash[CONFIG_KEY]
    holder = _context_holder(item, seed_config)
    context = holder.stash.get(CONTEXT_KEY, None)
    if context is None:
        test_class = type(item.instance)
        context = SeedContext.for_class(test_class, config=seed_config)
        holder.stash[CONTEXT_KEY] = context
        logger.debug("Created %r for %s", context, holder.nodeid)
    return context


@pytest.hookimpl(wrapper=True)
def pytest_runtest_setup(item: pytest.Item):
    result = yield
    if not isinstance(item, pytest.Function) or item.get_closest_marker("dbseed") is None:
        return result
    if item.instance is None:
        return result

    if item.config.stash[CONFIG_KEY].link_enclosing:
        link_enclosing_chain(item.instance)

    skip_next = item.get_closest_marker(SKIP_NEXT_MARK) is not None
    get_context(item).before_each(item.instance, item.function, skip_next=skip_next)
    return result
