"""
dbseed.engine - Execution engine applying setup sequences to databases.

Destination -> Operation -> BinderConfiguration -> DbSetup -> DbSetupTracker
"""

from .binder import BinderConfiguration, DefaultBinderConfiguration
from .destination import (
    Destination,
    ConnectionDestination,
    ConnectionFactoryDestination,
    as_destination,
    is_connection_like,
)
from .operations import (
    Operation,
    SqlOperation,
    Insert,
    DeleteAll,
    SequenceOperation,
    sql,
    insert_into,
    delete_all_from,
    sequence_of,
)
from .tracker import DbSetup, DbSetupTracker

__all__ = [
    # Binding
    "BinderConfiguration",
    "DefaultBinderConfiguration",
    # Destinations
    "Destination",
    "ConnectionDestination",
    "ConnectionFactoryDestination",
    "as_destination",
    "is_connection_like",
    # Operations
    "Operation",
    "SqlOperation",
    "Insert",
    "DeleteAll",
    "SequenceOperation",
    "sql",
    "insert_into",
    "delete_all_from",
    "sequence_of",
    # Launching
    "DbSetup",
    "DbSetupTracker",
]
