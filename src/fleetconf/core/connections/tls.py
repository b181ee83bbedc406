"""TLS material discovery and loading.

Certificate paths are looked up in a prioritized list of environment variables
first (entrypoint scripts export writable copies there), then in settings.
Client certificate material is parsed with ``cryptography``.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from ..config.coercion import is_present
from ..config.settings import ResolvedSettings
from .filesystem import LocalFileSystem

logger = logging.getLogger(__name__)


class TlsMaterialError(Exception):
    """Client certificate material could not be read or parsed."""


@dataclass(frozen=True)
class TlsPaths:
    cert: str | None = None
    key: str | None = None
    ca: str | None = None


def first_env(names: Sequence[str], environ: Mapping[str, str] | None = None) -> str | None:
    """Return the first non-blank environment variable among ``names``."""
    environ = os.environ if environ is None else environ
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value
    return None


def resolve_tls_paths(
    env_names: Mapping[str, Sequence[str]],
    settings: ResolvedSettings | None = None,
    setting_keys: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> TlsPaths:
    """Resolve cert, key and CA paths, environment first then settings.

    Args:
        env_names: Environment variable names per field (``cert``, ``key``, ``ca``)
                   in priority order.
        settings: Optional settings used as fallback.
        setting_keys: Setting key per field consulted when no variable is set.
        environ: Environment mapping, defaults to ``os.environ``.
    """
    resolved: dict[str, str | None] = {}
    for field in ("cert", "key", "ca"):
        value = first_env(env_names.get(field, ()), environ)
        if value is None and settings is not None and setting_keys and field in setting_keys:
            candidate = settings.get(setting_keys[field])
            if is_present(candidate):
                value = str(candidate)
        resolved[field] = value
    return TlsPaths(**resolved)


def existing_path(path: str | None, fs: LocalFileSystem) -> str | None:
    if path and fs.exists(path):
        return path
    return None


@dataclass(frozen=True)
class ClientMaterial:
    cert_pem: bytes
    key_pem: bytes
    copied: bool = False


def read_client_material(
    cert_path: str | Path, key_path: str | Path, fs: LocalFileSystem, label: str = "client"
) -> ClientMaterial:
    """Read certificate and key bytes, copying them aside once if access is denied.

    ``copied`` on the result tells whether the temporary copy was needed, in
    which case the original paths are unusable by this process.

    Raises:
        TlsMaterialError: If the files cannot be read even through the copy.
    """
    try:
        return ClientMaterial(fs.read_bytes(cert_path), fs.read_bytes(key_path))
    except PermissionError as e:
        logger.info(f"Permission denied reading TLS material ({e}), retrying through a temporary copy")

    try:
        with fs.temporary_copy(cert_path, label, ".crt", mode=0o644) as cert_copy:
            with fs.temporary_copy(key_path, label, ".key", mode=0o600) as key_copy:
                return ClientMaterial(fs.read_bytes(cert_copy), fs.read_bytes(key_copy), copied=True)
    except OSError as e:
        raise TlsMaterialError(f"Unable to read TLS material from {cert_path} and {key_path}: {e}") from e


def parse_client_material(cert_pem: bytes, key_pem: bytes) -> tuple[Any, Any]:
    """Parse PEM encoded certificate and private key."""
    try:
        certificate = x509.load_pem_x509_certificate(cert_pem)
        private_key = serialization.load_pem_private_key(key_pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise TlsMaterialError(f"Invalid TLS client material: {e}") from e
    return certificate, private_key
