"""PostgreSQL connection descriptor synthesis."""

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from ..config.coercion import is_present
from ..config.settings import ResolvedSettings
from .filesystem import LocalFileSystem
from .models import DatabaseDescriptor
from .tls import existing_path, resolve_tls_paths

logger = logging.getLogger(__name__)

DB_VARIABLES_PREFIX = "db_variables_"

COPIED_DB_SETTINGS = (
    "pool",
    "connect_timeout",
    "socket",
    "host",
    "backup_host",
    "port",
    "backup_port",
    "username",
    "password",
    "replica_host",
    "replica_port",
)

VERIFYING_SSL_MODES = ("require", "verify-full", "verify-ca")

POSTGRES_TLS_ENV = {
    "cert": ("POSTGRES_SSL_CERT", "POSTGRES_CLIENT_CERT"),
    "key": ("POSTGRES_SSL_KEY", "POSTGRES_CLIENT_KEY"),
    "ca": ("POSTGRES_SSL_CA", "POSTGRES_CA_FILE"),
}


def cdn_hostnames(settings: ResolvedSettings) -> list[str]:
    """Hostnames of the configured CDN (URL host and origin hostname)."""
    hostnames = []
    cdn_url = settings.get("cdn_url")
    if is_present(cdn_url):
        host = urlparse(str(cdn_url)).hostname
        if host:
            hostnames.append(host)
    origin = settings.get("cdn_origin_hostname")
    if is_present(origin):
        hostnames.append(str(origin))
    return hostnames


def build_database_descriptor(
    settings: ResolvedSettings,
    variables_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    fs: LocalFileSystem | None = None,
) -> DatabaseDescriptor:
    """Build the PostgreSQL descriptor from resolved settings.

    Args:
        settings: Resolved settings.
        variables_overrides: Session variables that win over ``db_variables_*`` settings.
        environ: Environment used for certificate paths, defaults to ``os.environ``.
        fs: Filesystem boundary used for certificate existence checks.
    """
    fs = fs or LocalFileSystem()
    fields: dict[str, Any] = {}

    for name in COPIED_DB_SETTINGS:
        value = settings.get(f"db_{name}")
        if is_present(value):
            fields[name] = value

    hostnames = []
    hostname = settings.get("hostname")
    if hostname is not None:
        hostnames.append(str(hostname))
    backup_hostname = settings.get("backup_hostname")
    if is_present(backup_hostname):
        hostnames.append(str(backup_hostname))
    # CDN hosts are unrelated to the database connection but consumers of
    # host_names expect them.
    hostnames.extend(cdn_hostnames(settings))
    fields["host_names"] = hostnames

    fields["database"] = settings.get("db_name")
    fields["prepared_statements"] = bool(settings.get("db_prepared_statements"))
    fields["advisory_locks"] = bool(settings.get("db_advisory_locks"))

    reaper_age = settings.get("connection_reaper_age")
    if is_present(reaper_age):
        fields["idle_timeout"] = reaper_age
    reaper_interval = settings.get("connection_reaper_interval")
    if is_present(reaper_interval):
        fields["reaping_frequency"] = reaper_interval

    variables: dict[str, Any] | None = None
    variable_keys = settings.keys_with_prefix(DB_VARIABLES_PREFIX)
    if variable_keys:
        variables = {key[len(DB_VARIABLES_PREFIX) :]: settings.get(key) for key in variable_keys}
    for key, value in (variables_overrides or {}).items():
        if variables is None:
            variables = {}
        variables[str(key)] = value
    fields["variables"] = variables

    sslmode = settings.get("db_sslmode")
    if is_present(sslmode):
        fields["sslmode"] = sslmode
        if sslmode in VERIFYING_SSL_MODES:
            paths = resolve_tls_paths(POSTGRES_TLS_ENV, environ=environ)
            fields["sslcert"] = existing_path(paths.cert, fs)
            fields["sslkey"] = existing_path(paths.key, fs)
            fields["sslrootcert"] = existing_path(paths.ca, fs)
            missing = [name for name in ("sslcert", "sslkey", "sslrootcert") if fields[name] is None]
            if missing:
                logger.debug(f"sslmode={sslmode} without {', '.join(missing)}")

    return DatabaseDescriptor(**fields)
