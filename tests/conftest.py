"""
Global pytest configuration and fixtures.
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from fleetconf.core.config import DefaultsRegistry, FileProvider, ResolvedSettings


class FakeStore:
    """In-memory coordination store recording every call."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.gets = 0
        self.sets = []

    def get(self, name):
        self.gets += 1
        return self.data.get(name)

    def set(self, name, value):
        self.sets.append((name, value))
        self.data[name] = value


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def settings_from(text: str, defaults: dict | None = None) -> ResolvedSettings:
    """Resolved settings over an in-memory settings file."""
    return ResolvedSettings(FileProvider.from_text(text), DefaultsRegistry(defaults or {}))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def client_pem():
    """Self-signed client certificate and RSA key as PEM bytes."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "fleetconf-test-client")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM)
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )
    return cert_pem, key_pem


@pytest.fixture
def tls_files(tmp_path, client_pem):
    """Client certificate, key and CA files on disk."""
    cert_pem, key_pem = client_pem
    cert = tmp_path / "client.crt"
    key = tmp_path / "client.key"
    ca = tmp_path / "ca.crt"
    cert.write_bytes(cert_pem)
    key.write_bytes(key_pem)
    ca.write_bytes(cert_pem)
    return cert, key, ca


@pytest.fixture
def make_settings():
    return settings_from


@pytest.fixture
def make_store():
    return FakeStore
