"""Tests for the centralized version module."""

from fleetconf.core import PACKAGE_NAME, PACKAGE_VERSION, get_package_info


def test_package_name():
    assert PACKAGE_NAME == "fleetconf"


def test_get_package_info():
    name, version = get_package_info()
    assert name == PACKAGE_NAME
    assert version == PACKAGE_VERSION


def test_package_imports_with_version():
    import fleetconf

    assert fleetconf.__version__ == PACKAGE_VERSION
    assert fleetconf.ConfigContext.__name__ == "ConfigContext"
