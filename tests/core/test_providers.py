"""Tests for settings source providers and value coercion."""

import os
from unittest import mock

import pytest

from fleetconf.core.config import BlankProvider, EnvProvider, FileProvider, coerce, is_present


class TestCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("true", True),
            ("false", False),
            ("42", 42),
            (" 42 ", 42),
            ("", ""),
            ("4.2", "4.2"),
            ("True", "True"),
            ("db.internal", "db.internal"),
            (None, None),
            (7, 7),
        ],
    )
    def test_coerce(self, raw, expected):
        result = coerce(raw)
        assert result == expected
        assert type(result) is type(expected)

    def test_is_present(self):
        assert is_present("x")
        assert is_present(0)
        assert is_present(True)
        assert not is_present(None)
        assert not is_present(False)
        assert not is_present("")
        assert not is_present("   ")


class TestFileProvider:
    def test_parses_quoted_bare_and_comments(self):
        provider = FileProvider.from_text(
            "\n".join(
                [
                    "# fleet settings",
                    'db_host = "db.internal"',
                    "db_name = 'fleet'",
                    "db_pool = 25   # per process",
                    "db_password = \"has # hash\"",
                    "db_prepared_statements = false",
                    "not a setting",
                    "Upper_Case = ignored",
                ]
            )
        )

        assert provider.keys() == {
            "db_host",
            "db_name",
            "db_pool",
            "db_password",
            "db_prepared_statements",
        }
        assert provider.lookup("db_host", None) == "db.internal"
        assert provider.lookup("db_name", None) == "fleet"
        assert provider.lookup("db_pool", None) == 25
        assert provider.lookup("db_password", None) == "has # hash"
        assert provider.lookup("db_prepared_statements", True) is False

    def test_explicit_empty_value_overrides_default(self):
        provider = FileProvider.from_text("db_host =\n")
        assert provider.lookup("db_host", "fallback") == ""

    def test_missing_key_returns_coerced_default(self):
        provider = FileProvider.from_text("")
        assert provider.lookup("db_pool", "8") == 8
        assert provider.lookup("db_host", None) is None

    def test_from_path_missing_file(self, tmp_path):
        assert FileProvider.from_path(tmp_path / "missing.conf") is None

    def test_from_path_reads_file(self, tmp_path):
        path = tmp_path / "fleet.conf"
        path.write_text("redis_host = cache.internal\n")
        provider = FileProvider.from_path(path)
        assert provider is not None
        assert provider.lookup("redis_host", None) == "cache.internal"


class TestEnvProvider:
    @mock.patch.dict(os.environ, {"FLEETCONF_DB_HOST": "alpha", "FLEETCONF_DB_POOL": "12"}, clear=True)
    def test_lookup(self):
        provider = EnvProvider()
        assert provider.lookup("db_host", "localhost") == "alpha"
        assert provider.lookup("db_pool", 5) == 12
        assert provider.lookup("db_name", "fleet") == "fleet"

    @mock.patch.dict(os.environ, {"FLEETCONF_DB_HOST": ""}, clear=True)
    def test_empty_variable_wins_over_default(self):
        assert EnvProvider().lookup("db_host", "localhost") == ""

    @mock.patch.dict(
        os.environ,
        {"FLEETCONF_DB_HOST": "alpha", "FLEETCONF_DB_VARIABLES_STATEMENT_TIMEOUT": "5s", "PATH": "/bin"},
        clear=True,
    )
    def test_keys_scans_prefix(self):
        assert EnvProvider().keys() == {"db_host", "db_variables_statement_timeout"}

    @mock.patch.dict(os.environ, {"APP_DB_HOST": "beta"}, clear=True)
    def test_custom_prefix(self):
        provider = EnvProvider(prefix="APP_")
        assert provider.lookup("db_host", None) == "beta"
        assert provider.keys() == {"db_host"}


class TestBlankProvider:
    @mock.patch.dict(os.environ, {"FLEETCONF_DB_HOST": "alpha"}, clear=True)
    def test_returns_defaults(self):
        provider = BlankProvider()
        assert provider.lookup("db_host", "localhost") == "localhost"
        assert provider.lookup("db_pool", "8") == 8
        assert provider.keys() == set()

    @mock.patch.dict(os.environ, {"FLEETCONF_REDIS_PORT": "6390"}, clear=True)
    def test_redis_port_reads_environment(self):
        assert BlankProvider().lookup("redis_port", 6379) == 6390

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_redis_port_without_environment(self):
        assert BlankProvider().lookup("redis_port", 6379) == 6379

    @mock.patch.dict(os.environ, {"FLEETCONF_REDIS_PORT": ""}, clear=True)
    def test_redis_port_empty_variable_wins(self):
        assert BlankProvider().lookup("redis_port", 6379) == ""
