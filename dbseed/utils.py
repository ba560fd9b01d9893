"""
Utility functions for dbseed.

Includes logging setup and target loading for the CLI.
"""

import importlib
import importlib.util
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


# Global console for pretty output
console = Console()


def setup_logging(log_level: str = "WARNING", pretty: bool = True) -> logging.Logger:
    """
    Set up logging for the dbseed logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        pretty: Rich console output; JSON lines otherwise

    Returns:
        Configured logger
    """
    logger = logging.getLogger("dbseed")
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers = []  # Clear existing handlers

    if pretty:
        handler: logging.Handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=False)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())

    logger.addHandler(handler)
    return logger


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def load_class(target: str) -> type:
    """
    Load a class from a CLI target.

    Accepted forms:
        path/to/test_file.py::Class::Inner
        package.module:Class.Inner

    Raises:
        ValueError: If the target is malformed or does not name a class
    """
    if "::" in target:
        file_part, *names = target.split("::")
        path = Path(file_part).resolve()
        if not path.exists():
            raise ValueError(f"File not found: {file_part}")
        module_name = path.stem
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ValueError(f"Cannot import {file_part}")
        module = importlib.util.module_from_spec(spec)
        # nested class lookup goes through sys.modules
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    elif ":" in target:
        module_name, _, attribute = target.partition(":")
        module = importlib.import_module(module_name)
        names = attribute.split(".")
    else:
        raise ValueError(f"Expected 'file.py::Class' or 'module:Class', got {target!r}")

    obj = module
    for name in names:
        if not hasattr(obj, name):
            raise ValueError(f"{name} not found in {target}")
        obj = getattr(obj, name)
    if not isinstance(obj, type):
        raise ValueError(f"{target} is not a class")
    return obj
