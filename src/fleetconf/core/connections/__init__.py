"""Connection descriptor synthesis for PostgreSQL and Redis."""

from .cache import (
    TEST_ENVIRONMENT,
    build_message_bus_descriptor,
    build_redis_descriptor,
    failover_driver_available,
    load_tls_params,
    tls_requested,
)
from .database import build_database_descriptor, cdn_hostnames
from .filesystem import LocalFileSystem, PrivilegedCopyError
from .models import DatabaseDescriptor, RedisDescriptor, RedisTlsParams, ReplicaEndpoint
from .services import S3Settings, smtp_settings
from .tls import TlsMaterialError

__all__ = [
    "TEST_ENVIRONMENT",
    "DatabaseDescriptor",
    "RedisDescriptor",
    "RedisTlsParams",
    "ReplicaEndpoint",
    "LocalFileSystem",
    "PrivilegedCopyError",
    "TlsMaterialError",
    "S3Settings",
    "build_database_descriptor",
    "build_message_bus_descriptor",
    "build_redis_descriptor",
    "cdn_hostnames",
    "failover_driver_available",
    "load_tls_params",
    "smtp_settings",
    "tls_requested",
]
