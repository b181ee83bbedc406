"""Pydantic models for synthesized connection descriptors.

Descriptors are plain data: they are built fresh on every synthesis call and
handed to the connection pool or driver, which owns them from then on.
"""

import ssl
from typing import Any

from pydantic import ConfigDict, Field

from fleetconf.models import FleetBaseModel

ConfigScalar = str | int | bool


class DatabaseDescriptor(FleetBaseModel):
    """PostgreSQL connection settings.

    ``host_names`` lists the hostnames the application is allowed to serve
    from. It also carries CDN hostnames, which have nothing to do with the
    database connection itself; downstream consumers rely on finding them here.
    """

    adapter: str = "postgresql"
    pool: ConfigScalar | None = None
    connect_timeout: ConfigScalar | None = None
    socket: ConfigScalar | None = None
    host: ConfigScalar | None = None
    backup_host: ConfigScalar | None = None
    port: ConfigScalar | None = None
    backup_port: ConfigScalar | None = None
    username: ConfigScalar | None = None
    password: ConfigScalar | None = None
    replica_host: ConfigScalar | None = None
    replica_port: ConfigScalar | None = None
    host_names: list[str] = Field(default_factory=list)
    database: ConfigScalar | None = None
    prepared_statements: bool = False
    advisory_locks: bool = False
    idle_timeout: ConfigScalar | None = None
    reaping_frequency: ConfigScalar | None = None
    variables: dict[str, Any] | None = None
    sslmode: str | None = None
    sslcert: str | None = None
    sslkey: str | None = None
    sslrootcert: str | None = None


class ReplicaEndpoint(FleetBaseModel):
    """Replica metadata consumed by a failover-capable redis client."""

    client_implementation: str = "failover"
    replica_host: ConfigScalar
    replica_port: ConfigScalar


class RedisTlsParams(FleetBaseModel):
    """Client certificate material for mutual TLS.

    ``cert`` and ``key`` are parsed cryptography objects. ``cert_file`` and
    ``key_file`` are only set when this process can read the originals
    directly, since drivers load certificate chains from disk themselves.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    cert: Any
    key: Any
    cert_file: str | None = None
    key_file: str | None = None
    verify_mode: ssl.VerifyMode = ssl.CERT_REQUIRED
    ca_file: str | None = None


class RedisDescriptor(FleetBaseModel):
    """Coordination cache (Redis) connection settings."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    host: ConfigScalar | None = None
    port: ConfigScalar | None = None
    username: ConfigScalar | None = None
    password: ConfigScalar | None = None
    db: ConfigScalar | None = None
    skip_client_commands: bool = False
    ssl: bool = False
    replica: ReplicaEndpoint | None = None
    ssl_params: RedisTlsParams | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments in the shape redis-py's ``Redis`` client accepts.

        ``skip_client_commands`` maps to ``lib_name=None`` and
        ``lib_version=None``, which stops redis-py from issuing
        ``CLIENT SETINFO`` on connect (proxies often reject CLIENT commands).
        """
        kwargs: dict[str, Any] = {}
        for field in ("host", "port", "username", "password", "db"):
            value = getattr(self, field)
            if value is not None:
                kwargs[field] = value
        if self.skip_client_commands:
            kwargs["lib_name"] = None
            kwargs["lib_version"] = None
        if self.ssl:
            kwargs["ssl"] = True
            if self.ssl_params is not None:
                kwargs["ssl_cert_reqs"] = "required"
                if self.ssl_params.cert_file and self.ssl_params.key_file:
                    kwargs["ssl_certfile"] = self.ssl_params.cert_file
                    kwargs["ssl_keyfile"] = self.ssl_params.key_file
                if self.ssl_params.ca_file:
                    kwargs["ssl_ca_certs"] = self.ssl_params.ca_file
        return kwargs
