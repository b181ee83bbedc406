"""Tests for the filesystem boundary used for TLS material."""

import os
import shutil
import stat
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from fleetconf.core.connections import LocalFileSystem, PrivilegedCopyError


def test_copy_command_without_sudo():
    fs = LocalFileSystem(use_sudo=False)
    assert fs.copy_command("/certs/a.crt", "/tmp/b.crt") == ["cp", "--", "/certs/a.crt", "/tmp/b.crt"]


def test_copy_command_with_sudo():
    fs = LocalFileSystem(use_sudo=True)
    assert fs.copy_command("/certs/a.crt", "/tmp/b.crt")[:3] == ["sudo", "-n", "cp"]


def test_temporary_path_is_process_scoped(tmp_path):
    fs = LocalFileSystem(temp_dir=tmp_path)
    path = fs.temporary_path("redis-client", ".key")
    assert path.parent == tmp_path
    assert path.name.startswith(f"fleetconf-redis-client-{os.getpid()}-")
    assert path.suffix == ".key"


def test_temporary_copy_is_removed(tmp_path):
    source = tmp_path / "source.key"
    source.write_bytes(b"material")
    fs = LocalFileSystem(temp_dir=tmp_path / "scratch", use_sudo=False)
    (tmp_path / "scratch").mkdir()

    with fs.temporary_copy(source, "redis-client", ".key", mode=0o600) as copy:
        assert copy.read_bytes() == b"material"
        assert stat.S_IMODE(copy.stat().st_mode) == 0o600

    assert not copy.exists()
    assert list((tmp_path / "scratch").iterdir()) == []


def test_temporary_copy_removed_when_body_raises(tmp_path):
    source = tmp_path / "source.crt"
    source.write_bytes(b"material")
    fs = LocalFileSystem(temp_dir=tmp_path, use_sudo=False)

    with pytest.raises(RuntimeError):
        with fs.temporary_copy(source, "redis-client", ".crt") as copy:
            raise RuntimeError("boom")

    assert not copy.exists()


def test_failed_copy_raises_and_leaves_nothing(tmp_path):
    fs = LocalFileSystem(temp_dir=tmp_path / "scratch", use_sudo=False)
    (tmp_path / "scratch").mkdir()

    with pytest.raises(PrivilegedCopyError):
        with fs.temporary_copy(tmp_path / "missing.crt", "redis-client", ".crt"):
            pass

    assert list((tmp_path / "scratch").iterdir()) == []


class FakeSudo:
    """Stands in for ``subprocess.run``; ``cp`` and ``rm`` work, ``chown`` can be refused."""

    def __init__(self, chown_allowed=True):
        self.chown_allowed = chown_allowed
        self.commands = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        args = command[2:] if command[:2] == ["sudo", "-n"] else command
        returncode, stderr = 0, ""
        if args[0] == "cp":
            shutil.copyfile(args[2], args[3])
        elif args[0] == "chown" and not self.chown_allowed:
            returncode, stderr = 1, "sudo: a password is required"
        elif args[0] == "rm":
            Path(args[-1]).unlink(missing_ok=True)
        return subprocess.CompletedProcess(command, returncode, "", stderr)


def test_sudo_copy_is_removed_through_sudo(tmp_path):
    source = tmp_path / "source.key"
    source.write_bytes(b"material")
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    fake_run = FakeSudo()
    fs = LocalFileSystem(temp_dir=scratch, use_sudo=True)

    with mock.patch("fleetconf.core.connections.filesystem.subprocess.run", fake_run):
        with fs.temporary_copy(source, "redis-client", ".key") as copy:
            assert copy.read_bytes() == b"material"

    assert ["sudo", "-n", "rm", "-f", "--", str(copy)] in fake_run.commands
    assert list(scratch.iterdir()) == []


def test_refused_chown_raises_and_removes_copy(tmp_path):
    source = tmp_path / "source.key"
    source.write_bytes(b"material")
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    fake_run = FakeSudo(chown_allowed=False)
    fs = LocalFileSystem(temp_dir=scratch, use_sudo=True)

    with mock.patch("fleetconf.core.connections.filesystem.subprocess.run", fake_run):
        with pytest.raises(PrivilegedCopyError, match="Could not take ownership"):
            with fs.temporary_copy(source, "redis-client", ".key"):
                pass

    assert [command[2] for command in fake_run.commands] == ["cp", "chown", "rm"]
    assert list(scratch.iterdir()) == []


def test_failed_privileged_delete_raises(tmp_path):
    fs = LocalFileSystem(temp_dir=tmp_path, use_sudo=True)
    refused = subprocess.CompletedProcess([], 1, "", "not allowed")
    with mock.patch("fleetconf.core.connections.filesystem.subprocess.run", return_value=refused):
        with pytest.raises(PrivilegedCopyError, match="Removal"):
            fs.delete(tmp_path / "copy.key", privileged=True)
