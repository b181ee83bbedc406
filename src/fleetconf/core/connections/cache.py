"""
Coordination cache (Redis) descriptor synthesis.

Builds the connection settings for the main Redis and for the optional
message bus Redis. When TLS is requested, client certificate material is
loaded and attached; any problem with that material is logged and the
descriptor is returned without it, so a misconfigured certificate volume
surfaces as a TLS handshake error at connect time instead of a crash at boot.
"""

import importlib.util
import logging
import ssl
from collections.abc import Mapping

from ..config.coercion import ConfigValue, is_present
from ..config.settings import ResolvedSettings
from .filesystem import LocalFileSystem
from .models import RedisDescriptor, RedisTlsParams, ReplicaEndpoint
from .tls import TlsMaterialError, existing_path, parse_client_material, read_client_material, resolve_tls_paths

logger = logging.getLogger(__name__)

TEST_ENVIRONMENT = "test"
TEST_REDIS_DB = 1

REDIS_TLS_ENV = {
    "cert": ("REDIS_SSL_CERT", "REDIS_CLIENT_CERT", "REDIS_TLS_CERT"),
    "key": ("REDIS_SSL_KEY", "REDIS_CLIENT_KEY", "REDIS_TLS_KEY"),
    "ca": ("REDIS_SSL_CA", "REDIS_CA_FILE", "REDIS_TLS_CA"),
}

REDIS_TLS_SETTINGS = {
    "cert": "redis_ssl_cert",
    "key": "redis_ssl_key",
    "ca": "redis_ssl_ca",
}


def failover_driver_available() -> bool:
    """Whether a replica-aware redis client can be used."""
    return importlib.util.find_spec("redis.sentinel") is not None


def _truthy_flag(value: ConfigValue) -> bool:
    return value is True or (isinstance(value, str) and value.strip().lower() == "true")


def tls_requested(settings: ResolvedSettings) -> bool:
    """Whether Redis TLS is enabled.

    Accepts boolean ``True`` or the string ``"true"`` (any case) in either
    ``redis_use_ssl`` or the legacy ``redis_ssl`` setting.
    """
    return _truthy_flag(settings.get("redis_use_ssl")) or _truthy_flag(settings.get("redis_ssl"))


def _replica_setting(settings: ResolvedSettings, prefix: str, field: str) -> ConfigValue:
    value = settings.get(f"{prefix}_replica_{field}")
    if is_present(value):
        return value
    legacy = settings.get(f"{prefix}_slave_{field}")
    if is_present(legacy):
        return legacy
    return None


def _base_fields(settings: ResolvedSettings, prefix: str, environment: str) -> dict:
    fields: dict = {}

    host = settings.get(f"{prefix}_host")
    if host is not None:
        fields["host"] = host
    port = settings.get(f"{prefix}_port")
    if port is not None:
        fields["port"] = port

    username = settings.get(f"{prefix}_username")
    if is_present(username):
        fields["username"] = username
    password = settings.get(f"{prefix}_password")
    if is_present(password):
        fields["password"] = password

    db = settings.get(f"{prefix}_db")
    if db is not None and db != 0:
        fields["db"] = db
    if environment == TEST_ENVIRONMENT:
        fields["db"] = TEST_REDIS_DB

    fields["skip_client_commands"] = bool(settings.get(f"{prefix}_skip_client_commands"))
    return fields


def _replica(
    settings: ResolvedSettings, prefix: str, failover_available: bool
) -> ReplicaEndpoint | None:
    replica_host = _replica_setting(settings, prefix, "host")
    replica_port = _replica_setting(settings, prefix, "port")
    if replica_host is None or replica_port is None:
        return None
    if not failover_available:
        logger.debug(f"{prefix} replica configured but no failover driver is available")
        return None
    return ReplicaEndpoint(replica_host=replica_host, replica_port=replica_port)


def load_tls_params(
    settings: ResolvedSettings,
    environ: Mapping[str, str] | None = None,
    fs: LocalFileSystem | None = None,
) -> RedisTlsParams | None:
    """Load client certificate material for Redis mutual TLS.

    Returns None, after logging a warning where appropriate, when material is
    not configured or cannot be loaded.
    """
    fs = fs or LocalFileSystem()
    paths = resolve_tls_paths(REDIS_TLS_ENV, settings, REDIS_TLS_SETTINGS, environ)

    if not (paths.cert and paths.key and fs.exists(paths.cert) and fs.exists(paths.key)):
        logger.debug("Redis TLS enabled without readable client certificate paths")
        return None

    try:
        material = read_client_material(paths.cert, paths.key, fs, label="redis-client")
        certificate, private_key = parse_client_material(material.cert_pem, material.key_pem)
    except (TlsMaterialError, OSError) as e:
        logger.warning(f"Redis TLS certificates not loaded: {e}")
        return None

    cert_file = key_file = None
    if material.copied:
        logger.warning(
            f"Redis client certificate {paths.cert} is only readable through a privileged copy, "
            "the redis client will connect without it"
        )
    else:
        cert_file, key_file = paths.cert, paths.key

    return RedisTlsParams(
        cert=certificate,
        key=private_key,
        cert_file=cert_file,
        key_file=key_file,
        verify_mode=ssl.CERT_REQUIRED,
        ca_file=existing_path(paths.ca, fs),
    )


def build_redis_descriptor(
    settings: ResolvedSettings,
    environment: str = "production",
    environ: Mapping[str, str] | None = None,
    fs: LocalFileSystem | None = None,
    failover_available: bool | None = None,
) -> RedisDescriptor:
    """Build the main Redis descriptor from resolved settings."""
    if failover_available is None:
        failover_available = failover_driver_available()

    fields = _base_fields(settings, "redis", environment)
    fields["replica"] = _replica(settings, "redis", failover_available)

    if tls_requested(settings):
        fields["ssl"] = True
        fields["ssl_params"] = load_tls_params(settings, environ, fs)

    return RedisDescriptor(**fields)


def build_message_bus_descriptor(
    settings: ResolvedSettings,
    environment: str = "production",
    environ: Mapping[str, str] | None = None,
    fs: LocalFileSystem | None = None,
    failover_available: bool | None = None,
) -> RedisDescriptor:
    """Build the message bus Redis descriptor.

    Falls back to the main Redis descriptor unless ``message_bus_redis_enabled``.
    The message bus connection never carries client certificates.
    """
    if not settings.get("message_bus_redis_enabled"):
        return build_redis_descriptor(settings, environment, environ, fs, failover_available)

    if failover_available is None:
        failover_available = failover_driver_available()

    fields = _base_fields(settings, "message_bus_redis", environment)
    fields["replica"] = _replica(settings, "message_bus_redis", failover_available)
    if _truthy_flag(settings.get("redis_use_ssl")):
        fields["ssl"] = True

    return RedisDescriptor(**fields)
