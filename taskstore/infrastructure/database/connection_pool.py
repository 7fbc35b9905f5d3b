"""
Connection pooling with health checks and monitoring.

This module wraps a SQLAlchemy engine and its pool in a capability object that
is handed explicitly to every component needing store access. It never retries
or reconnects on its own; acquisition failures surface as
DatabaseConnectionError and the caller decides what to do next.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from sqlalchemy import Connection, Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from taskstore.core.config import normalize_database_url
from taskstore.domain.shared.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


@dataclass
class PoolMetrics:
    """Metrics for connection pool monitoring."""

    connections_created: int = 0
    connections_closed: int = 0
    connections_failed: int = 0
    checkout_time_total: float = 0
    checkout_count: int = 0
    wait_time_total: float = 0
    wait_count: int = 0
    slow_queries: int = 0
    health_checks_passed: int = 0
    health_checks_failed: int = 0
    last_health_check: datetime | None = None

    @property
    def avg_checkout_time(self) -> float:
        """Average time a connection stays checked out."""
        return (
            (self.checkout_time_total / self.checkout_count)
            if self.checkout_count > 0
            else 0
        )

    @property
    def avg_wait_time(self) -> float:
        """Average wait time for a connection."""
        return (self.wait_time_total / self.wait_count) if self.wait_count > 0 else 0

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            "connections_created": self.connections_created,
            "connections_closed": self.connections_closed,
            "connections_failed": self.connections_failed,
            "avg_checkout_time_ms": self.avg_checkout_time * 1000,
            "checkout_count": self.checkout_count,
            "avg_wait_time_ms": self.avg_wait_time * 1000,
            "wait_count": self.wait_count,
            "slow_queries": self.slow_queries,
            "health_checks_passed": self.health_checks_passed,
            "health_checks_failed": self.health_checks_failed,
            "last_health_check": self.last_health_check.isoformat()
            if self.last_health_check
            else None,
        }


class DatabaseConnectionPool:
    """
    Pooled set of connections to the backing store.

    Safe for concurrent use: checkout and checkin are the only synchronization
    points and both are handled by the SQLAlchemy pool.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: float = 30.0,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        log_slow_queries: bool = True,
        slow_query_threshold: float = 1.0,
    ):
        self.database_url = normalize_database_url(database_url)
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping
        self.echo = echo
        self.log_slow_queries = log_slow_queries
        self.slow_query_threshold = slow_query_threshold

        self.metrics = PoolMetrics()
        self.is_healthy = True
        self._lock = Lock()

        self.engine = self._create_engine()
        self._setup_event_listeners()
        logger.info(f"Connection pool created for {self.masked_url}")

    @property
    def masked_url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def _create_engine(self) -> Engine:
        """Create the SQLAlchemy engine, rejecting malformed URLs up front."""
        try:
            url = make_url(self.database_url)
        except (ArgumentError, ValueError) as e:
            raise DatabaseConnectionError(
                f"Malformed database URL: {e}", {"reason": "malformed_url"}
            ) from e

        # In-memory SQLite lives inside a single connection, share it
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            engine_kwargs: dict[str, Any] = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        elif url.get_backend_name() == "sqlite":
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
        else:
            engine_kwargs = {
                "poolclass": QueuePool,
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping,
            }

        try:
            return create_engine(url, echo=self.echo, **engine_kwargs)
        except (ArgumentError, ImportError) as e:
            raise DatabaseConnectionError(
                f"Cannot create connection pool for {url.render_as_string(hide_password=True)}: {e}",
                {"reason": "engine_creation_failed"},
            ) from e

    def _setup_event_listeners(self) -> None:
        """Setup SQLAlchemy event listeners for monitoring."""

        @event.listens_for(self.engine, "connect")
        def receive_connect(dbapi_conn, connection_record):
            """Track connection creation."""
            with self._lock:
                self.metrics.connections_created += 1

            if self.is_sqlite:
                # SQLite ignores FOREIGN KEY ... ON DELETE CASCADE without this
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys = ON")
                cursor.close()

        @event.listens_for(self.engine, "close")
        def receive_close(dbapi_conn, connection_record):
            """Track connection closing."""
            with self._lock:
                self.metrics.connections_closed += 1

        @event.listens_for(self.engine, "checkout")
        def receive_checkout(dbapi_conn, connection_record, connection_proxy):
            """Track connection checkout."""
            connection_record.info["checkout_time"] = time.perf_counter()
            with self._lock:
                self.metrics.checkout_count += 1

        @event.listens_for(self.engine, "checkin")
        def receive_checkin(dbapi_conn, connection_record):
            """Track connection checkin."""
            if "checkout_time" in connection_record.info:
                checkout_duration = (
                    time.perf_counter() - connection_record.info["checkout_time"]
                )
                with self._lock:
                    self.metrics.checkout_time_total += checkout_duration
                del connection_record.info["checkout_time"]

        @event.listens_for(self.engine.pool, "invalidate")
        def pool_invalidate(dbapi_conn, connection_record, exception):
            """Handle connection invalidation."""
            with self._lock:
                self.metrics.connections_failed += 1
            logger.warning(f"Connection invalidated: {exception}")

        if not self.log_slow_queries:
            return

        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(
            conn, cursor, statement, parameters, context, executemany
        ):
            context._query_start_time = time.perf_counter()

        @event.listens_for(self.engine, "after_cursor_execute")
        def after_cursor_execute(
            conn, cursor, statement, parameters, context, executemany
        ):
            total_time = time.perf_counter() - context._query_start_time
            if total_time > self.slow_query_threshold:
                with self._lock:
                    self.metrics.slow_queries += 1
                logger.warning(
                    f"Slow query detected ({total_time:.2f}s): {statement[:200]}",
                    extra={"duration": total_time, "query": statement[:500]},
                )

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """
        Acquire a connection for one unit of work.

        The connection runs inside a single transaction that commits when the
        block exits normally and rolls back otherwise. It is returned to the
        pool on every exit path.

        Raises:
            DatabaseConnectionError: If no connection could be acquired
        """
        wait_start = time.perf_counter()
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            with self._lock:
                self.metrics.connections_failed += 1
            logger.error(f"Could not acquire connection from {self.masked_url}: {e}")
            raise DatabaseConnectionError(
                f"Could not acquire database connection: {e}",
                {"reason": type(e).__name__},
            ) from e

        wait_time = time.perf_counter() - wait_start
        if wait_time > 0.1:  # Only record significant waits
            with self._lock:
                self.metrics.wait_time_total += wait_time
                self.metrics.wait_count += 1

        try:
            with conn.begin():
                yield conn
        finally:
            conn.close()

    def probe(self) -> None:
        """
        Perform one round trip to verify the store is reachable.

        Raises:
            DatabaseConnectionError: If the store cannot be reached
        """
        try:
            with self.connection() as conn:
                conn.execute(text("SELECT 1")).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Database probe failed for {self.masked_url}: {e}")
            raise DatabaseConnectionError(
                f"Database is unreachable: {e}", {"reason": type(e).__name__}
            ) from e

    def health_check(self) -> dict[str, Any]:
        """Check connectivity and report the result instead of raising."""
        start_time = time.perf_counter()
        try:
            self.probe()
        except DatabaseConnectionError as e:
            with self._lock:
                self.is_healthy = False
                self.metrics.health_checks_failed += 1
                self.metrics.last_health_check = datetime.now(timezone.utc)
            logger.error(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "message": f"Database connection failed: {e.message}",
                "execution_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            }

        with self._lock:
            self.is_healthy = True
            self.metrics.health_checks_passed += 1
            self.metrics.last_health_check = datetime.now(timezone.utc)
        return {
            "status": "healthy",
            "message": "Database connection successful",
            "execution_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
        }

    def get_metrics(self) -> dict[str, Any]:
        """Get current pool metrics."""
        with self._lock:
            metrics = self.metrics.to_dict()

        metrics.update(self.get_pool_status())
        metrics["is_healthy"] = self.is_healthy
        return metrics

    def get_pool_status(self) -> dict[str, Any]:
        """Current checkout state of the underlying pool."""
        pool_impl = self.engine.pool
        if not isinstance(pool_impl, QueuePool):
            return {"pool_class": type(pool_impl).__name__}

        return {
            "pool_class": type(pool_impl).__name__,
            "pool_size": pool_impl.size(),
            "checked_in": pool_impl.checkedin(),
            "checked_out": pool_impl.checkedout(),
            "overflow": pool_impl.overflow(),
        }

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info(f"Connection pool disposed for {self.masked_url}")
