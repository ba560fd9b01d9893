"""End-to-end tests for SeedContext.

Tests cover:
- Implicit ordering from field names
- Nested classes reading declarations of enclosing instances
- Replay only when the composed sequence changed
- One-shot skip_next
"""

import sqlite3

import pytest

from dbseed import SeedConfig, SeedContext, link_enclosing, skip_next
from dbseed.config import ConfigError
from dbseed.engine import delete_all_from, insert_into, sequence_of, sql
from dbseed.errors import ConfigurationError, ResolutionError
from dbseed.markers import operation, resource


class ImplicitOrder:
    def __init__(self, conn):
        self.conn = conn

    @resource("db")
    def db(self):
        return self.conn

    insert_3 = operation("db")(sql("three"))
    insert_1 = operation("db")(sql("one"))
    insert_2 = operation("db")(sql("two"))


class UserSeeds:
    def __init__(self, conn=None):
        self.conn = conn

    @resource("db")
    def db(self):
        return self.conn

    clean_0 = operation("db")(delete_all_from("orders", "users"))

    class Orders:
        @operation("db")
        def orders_2(self):
            return insert_into("orders", ["id", "user_id", "total"], [(1, 1, 9.5)])

    users_1 = operation("db")(insert_into("users", ["id", "name"], [(1, "ada")]))


class Readers:
    def __init__(self, conn):
        self.conn = conn

    @resource("db")
    def db(self):
        return self.conn

    users_1 = operation("db")(insert_into("users", ["id", "name"], [(1, "ada")]))

    def test_plain(self):
        pass

    @skip_next
    def test_skipping(self):
        pass


class Broken:
    op_1 = operation("nowhere")(sql("x"))


class LateSeeds:
    def __init__(self, conn):
        self.conn = conn

    @resource("db")
    def db(self):
        return self.conn


def _late_users(self):
    return insert_into("users", ["id", "name"], [(7, "late")])


LateSeeds.users_1 = operation("db")(_late_users)


def _count(conn, table):
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestImplicitOrder:

    def test_composed_sequence_follows_trailing_digits(self, connection, recording_trackers):
        context = SeedContext.for_class(ImplicitOrder, tracker_factory=recording_trackers)
        context.before_each(ImplicitOrder(connection))

        (tracker,) = recording_trackers.created
        assert tracker.launched[0].operation == sequence_of(sql("one"), sql("two"), sql("three"))


class TestNestedClasses:

    def test_enclosing_instance_resolved(self, connection):
        context = SeedContext.for_class(UserSeeds.Orders)
        inner = link_enclosing(UserSeeds.Orders(), UserSeeds(connection))

        assert context.before_each(inner) == ["db"]
        assert _count(connection, "users") == 1
        assert _count(connection, "orders") == 1

    def test_operation_order_across_nesting(self):
        (binding,) = SeedContext.for_class(UserSeeds.Orders).bindings
        assert [op.name for op in binding.operations] == ["clean_0", "users_1", "orders_2"]

    def test_missing_link_fails(self, connection):
        context = SeedContext.for_class(UserSeeds.Orders)
        with pytest.raises(ResolutionError):
            context.before_each(UserSeeds.Orders())
        assert _count(connection, "users") == 0


class TestReplay:

    def test_unchanged_sequence_replayed_once(self, connection):
        context = SeedContext.for_class(Readers)
        instance = Readers(connection)

        assert context.before_each(instance) == ["db"]
        connection.execute("DELETE FROM users")
        connection.commit()
        assert context.before_each(instance) == []
        assert _count(connection, "users") == 0

    def test_skip_next_forces_following_replay_only(self, connection, recording_trackers):
        context = SeedContext.for_class(Readers, tracker_factory=recording_trackers)
        instance = Readers(connection)

        assert context.before_each(instance, instance.test_plain) == ["db"]
        assert context.before_each(instance, instance.test_skipping) == []
        assert context.before_each(instance, instance.test_plain) == ["db"]
        assert context.before_each(instance, instance.test_plain) == []

    def test_explicit_skip_next_flag(self, connection, recording_trackers):
        context = SeedContext.for_class(Readers, tracker_factory=recording_trackers)
        instance = Readers(connection)

        context.before_each(instance, skip_next=True)
        assert context.before_each(instance) == ["db"]
        assert context.before_each(instance) == []

    def test_new_connection_replays(self, connection):
        context = SeedContext.for_class(Readers)
        context.before_each(Readers(connection))

        other = sqlite3.connect(":memory:")
        try:
            other.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
            assert context.before_each(Readers(other)) == ["db"]
            assert _count(other, "users") == 1
        finally:
            other.close()


class TestForClass:

    def test_introspection_errors_surface(self):
        with pytest.raises(ConfigurationError, match="No @resource found"):
            SeedContext.for_class(Broken)

    def test_one_tracker_per_binding(self, recording_trackers):
        context = SeedContext.for_class(Readers, tracker_factory=recording_trackers)
        assert len(context.trackers) == len(context.bindings) == 1

    def test_contexts_do_not_share_trackers(self):
        first = SeedContext.for_class(Readers)
        second = SeedContext.for_class(Readers)
        assert first.trackers[0] is not second.trackers[0]

    def test_bad_default_binder_fails(self):
        with pytest.raises(ConfigError):
            SeedContext.for_class(Readers, config=SeedConfig(default_binder="dbseed.engine:sql"))

    def test_operation_assigned_after_class_creation(self, connection):
        context = SeedContext.for_class(LateSeeds)
        (binding,) = context.bindings
        assert [op.name for op in binding.operations] == ["users_1"]

        assert context.before_each(LateSeeds(connection)) == ["db"]
        assert connection.execute("SELECT name FROM users").fetchall() == [("late",)]
