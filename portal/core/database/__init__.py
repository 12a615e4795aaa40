"""Database connection module for the student portal."""

from portal.core.database.cassandra import (
    AsyncCassandraConnection,
    CassandraStore,
    init_async_cassandra,
    shutdown_async_cassandra,
)


__all__ = [
    "AsyncCassandraConnection",
    "CassandraStore",
    "init_async_cassandra",
    "shutdown_async_cassandra",
]
