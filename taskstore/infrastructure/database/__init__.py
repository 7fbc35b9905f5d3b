from .connection_pool import DatabaseConnectionPool, PoolMetrics
from .schema import create_schema, drop_schema

__all__ = ["DatabaseConnectionPool", "PoolMetrics", "create_schema", "drop_schema"]
