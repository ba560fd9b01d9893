"""
Operations - units of seeding work applied to a connection.

Operations are immutable value objects. Two operations built from the same
arguments compare equal, which is what lets DbSetupTracker recognize an
unchanged setup sequence.

Helpers:
- sql(*statements): raw statements
- insert_into(table, columns, rows): parameterized inserts
- delete_all_from(*tables): DELETE FROM each table, in the given order
- sequence_of(*operations): one operation running the others in order
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .binder import BinderConfiguration


class Operation(ABC):
    """
    Abstract base class for seeding operations.

    Operations receive an open DB-API connection and the binder configuration
    of the resource they run against. Commit and rollback are handled by
    DbSetup, never by the operation.
    """

    @abstractmethod
    def execute(self, connection: Any, binder_configuration: BinderConfiguration) -> None:
        """
        Apply this operation.

        Args:
            connection: Open DB-API connection
            binder_configuration: Binder configuration of the target resource
        """
        pass


@dataclass(frozen=True)
class SqlOperation(Operation):
    """Executes raw SQL statements in order."""
    statements: tuple[str, ...]

    def execute(self, connection: Any, binder_configuration: BinderConfiguration) -> None:
        cursor = connection.cursor()
        try:
            for statement in self.statements:
                cursor.execute(statement)
        finally:
            cursor.close()


@dataclass(frozen=True)
class Insert(Operation):
    """
    Inserts rows into a table.

    Attributes:
        table: Target table name
        columns: Column names, in the order values appear in each row
        rows: Row values; each row has one value per column
    """
    table: str
    columns: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...]

    def __post_init__(self):
        for row in self.rows:
            if len(row) != len(self.columns):
                raise ValueError(
                    f"Insert into {self.table}: row {row!r} has {len(row)} values "
                    f"for {len(self.columns)} columns"
                )

    def execute(self, connection: Any, binder_configuration: BinderConfiguration) -> None:
        if not self.rows:
            return
        markers = ", ".join(binder_configuration.placeholder(c) for c in self.columns)
        statement = f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({markers})"
        cursor = connection.cursor()
        try:
            for row in self.rows:
                cursor.execute(statement, tuple(binder_configuration.bind(v) for v in row))
        finally:
            cursor.close()


@dataclass(frozen=True)
class DeleteAll(Operation):
    """Deletes every row of each table, in order."""
    tables: tuple[str, ...]

    def execute(self, connection: Any, binder_configuration: BinderConfiguration) -> None:
        cursor = connection.cursor()
        try:
            for table in self.tables:
                cursor.execute(f"DELETE FROM {table}")
        finally:
            cursor.close()


@dataclass(frozen=True)
class SequenceOperation(Operation):
    """Runs a fixed sequence of operations in order."""
    operations: tuple[Operation, ...]

    def execute(self, connection: Any, binder_configuration: BinderConfiguration) -> None:
        for op in self.operations:
            op.execute(connection, binder_configuration)

    def __len__(self) -> int:
        return len(self.operations)


def sql(*statements: str) -> SqlOperation:
    """Build an operation executing raw SQL statements."""
    return SqlOperation(tuple(statements))


def insert_into(table: str, columns: Iterable[str], rows: Iterable[Iterable[Any]]) -> Insert:
    """Build an insert of rows into table."""
    return Insert(table, tuple(columns), tuple(tuple(r) for r in rows))


def delete_all_from(*tables: str) -> DeleteAll:
    """Build an operation deleting all rows from the given tables."""
    return DeleteAll(tuple(tables))


def sequence_of(*operations: Operation | Iterable[Operation]) -> SequenceOperation:
    """
    Compose operations into one sequence.

    Nested sequences and iterables of operations are flattened so that
    equal content always yields equal sequences.

    Raises:
        TypeError: If an element is not an Operation
    """
    flat: list[Operation] = []
    for item in operations:
        if isinstance(item, SequenceOperation):
            flat.extend(item.operations)
        elif isinstance(item, Operation):
            flat.append(item)
        elif isinstance(item, Iterable) and not isinstance(item, (str, bytes)):
            flat.extend(sequence_of(*item).operations)
        else:
            raise TypeError(f"Not an Operation: {item!r}")
    return SequenceOperation(tuple(flat))
