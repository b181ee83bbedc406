"""Filesystem boundary used while collecting TLS material.

Certificate volumes are frequently mounted read-only and owned by root. When a
direct read is refused, the material is copied once to a process scoped
temporary file through a helper process, read from there, and the copy is
removed on every exit path.
"""

import logging
import os
import shutil
import subprocess
import tempfile
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


class PrivilegedCopyError(OSError):
    """The helper process could not copy a restricted file."""


class LocalFileSystem:
    """Filesystem operations needed by the descriptor synthesizers."""

    def __init__(self, temp_dir: str | Path | None = None, use_sudo: bool | None = None):
        self.temp_dir = Path(temp_dir or tempfile.gettempdir())
        self._use_sudo = use_sudo

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def read_bytes(self, path: str | Path) -> bytes:
        return Path(path).read_bytes()

    def delete(self, path: str | Path, privileged: bool = False) -> None:
        """Remove a file; ``privileged`` goes through ``sudo -n rm`` for root-owned copies."""
        if not privileged:
            Path(path).unlink(missing_ok=True)
            return
        result = self._run(["sudo", "-n", "rm", "-f", "--", str(path)])
        if result.returncode != 0:
            raise PrivilegedCopyError(
                f"Removal of {path} failed with exit code {result.returncode}: {result.stderr.strip()}"
            )

    def copy_command(self, source: str | Path, destination: str | Path) -> Sequence[str]:
        command = ["cp", "--", str(source), str(destination)]
        if self.needs_sudo():
            command = ["sudo", "-n", *command]
        return command

    def needs_sudo(self) -> bool:
        if self._use_sudo is not None:
            return self._use_sudo
        return os.geteuid() != 0 and shutil.which("sudo") is not None

    def privileged_copy(self, source: str | Path, destination: str | Path, mode: int) -> None:
        """Copy a file we may not be allowed to read and make the copy readable."""
        result = self._run(self.copy_command(source, destination))
        if result.returncode != 0:
            raise PrivilegedCopyError(
                f"Copy of {source} failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
        if self.needs_sudo():
            result = self._run(["sudo", "-n", "chown", str(os.geteuid()), str(destination)])
            if result.returncode != 0:
                raise PrivilegedCopyError(
                    f"Could not take ownership of {destination} (exit code {result.returncode}): "
                    f"{result.stderr.strip()}"
                )
        os.chmod(destination, mode)
        logger.debug(f"Copied {source} to {destination}")

    def temporary_path(self, label: str, suffix: str) -> Path:
        """Process and time scoped path under the temp directory."""
        return self.temp_dir / f"fleetconf-{label}-{os.getpid()}-{int(time.time())}{suffix}"

    @contextmanager
    def temporary_copy(
        self, source: str | Path, label: str, suffix: str, mode: int = 0o600
    ) -> Iterator[Path]:
        """Yield a readable copy of ``source`` that is deleted on exit.

        Copies made through sudo are removed through sudo as well, since a
        root-owned file cannot be unlinked by us in a sticky temp directory.
        """
        destination = self.temporary_path(label, suffix)
        try:
            self.privileged_copy(source, destination, mode)
            yield destination
        finally:
            self.delete(destination, privileged=self.needs_sudo())

    @staticmethod
    def _run(command: Sequence[str]) -> subprocess.CompletedProcess:
        return subprocess.run(command, capture_output=True, text=True, check=False)
