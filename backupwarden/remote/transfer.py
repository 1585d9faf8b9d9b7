"""Remote transfer: list and copy backups from the VPS over ssh/scp.

Bridge boundary
---------------
The OpenSSH client binaries do the actual work; this module only builds
argument lists and interprets exit codes. Nothing is run through a local
shell. The single remote command (the directory listing) is quoted with
``shlex.join`` so that paths and patterns reach ``find`` verbatim.

Credentials live in an explicit ``RemoteSession``. Authentication is
key-based (``BatchMode=yes``), so no password prompt can block a cron run.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict

from backupwarden.core.errors import RemoteArtifactNotFoundError, RemoteTransferError
from backupwarden.models.artifacts import DEFAULT_DIGEST_SUFFIX, Artifact, RemoteFile

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class RemoteSession(BaseModel):
    """Connection parameters for one remote host, passed explicitly."""

    model_config = ConfigDict(frozen=True)

    host: str
    user: str = ""
    port: int = 22
    identity_file: Path | None = None
    ssh_binary: str = "ssh"
    scp_binary: str = "scp"
    connect_timeout: int = 10
    batch_mode: bool = True

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}" if self.user else self.host

    def _common_options(self) -> list[str]:
        opts = ["-o", f"ConnectTimeout={self.connect_timeout}"]
        if self.batch_mode:
            opts += ["-o", "BatchMode=yes"]
        if self.identity_file is not None:
            opts += ["-i", str(self.identity_file)]
        return opts

    def ssh_argv(self, remote_argv: list[str]) -> list[str]:
        """``ssh`` invocation running ``remote_argv`` on the host."""
        return [
            self.ssh_binary,
            "-p", str(self.port),
            *self._common_options(),
            self.destination,
            shlex.join(remote_argv),
        ]

    def scp_argv(self, remote_path: str, local_path: Path) -> list[str]:
        """``scp -p`` invocation copying one remote file (mtime preserved)."""
        return [
            self.scp_binary,
            "-p",
            "-P", str(self.port),
            *self._common_options(),
            f"{self.destination}:{remote_path}",
            str(local_path),
        ]


class RemoteTransfer:
    """Lists and fetches backup files on a remote host.

    Parameters
    ----------
    session:
        Host and client settings.
    runner:
        ``subprocess.run``-compatible callable; injectable for tests.
    timeout:
        Upper bound in seconds for any single ssh/scp invocation.
    digest_suffix:
        Sidecar naming convention, shared with the local verifier.
    """

    def __init__(
        self,
        session: RemoteSession,
        runner: Runner = subprocess.run,
        timeout: int = 1800,
        digest_suffix: str = DEFAULT_DIGEST_SUFFIX,
    ) -> None:
        self._session = session
        self._run = runner
        self._timeout = timeout
        self._suffix = digest_suffix

    @property
    def session(self) -> RemoteSession:
        return self._session

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_artifacts(self, remote_dir: str, pattern: str) -> list[RemoteFile]:
        """Files in ``remote_dir`` matching ``pattern``, newest first.

        Sidecars are excluded. Raises ``RemoteTransferError`` if ssh fails.
        """
        remote_argv = [
            "find", remote_dir,
            "-maxdepth", "1",
            "-type", "f",
            "-name", pattern,
            "-printf", r"%T@ %s %f\n",
        ]
        result = self._invoke(self._session.ssh_argv(remote_argv), "list")
        files = [
            f for f in self._parse_listing(result.stdout)
            if not f.name.endswith(self._suffix)
        ]
        files.sort(key=lambda f: f.name)
        files.sort(key=lambda f: f.modified_at, reverse=True)
        logger.debug(
            "Remote %s:%s has %d file(s) matching %r",
            self._session.host, remote_dir, len(files), pattern,
        )
        return files

    def remote_file_exists(self, remote_path: str) -> bool:
        result = self._invoke(
            self._session.ssh_argv(["test", "-f", remote_path]), "stat", check=False
        )
        if result.returncode == 255:
            raise RemoteTransferError(
                f"ssh to {self._session.host} failed: {_stderr_of(result)}"
            )
        return result.returncode == 0

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch_latest_artifact(
        self,
        remote_dir: str,
        pattern: str,
        local_dir: Path | str,
        fetch_digest: bool = True,
    ) -> Artifact:
        """Copy the newest matching remote file into ``local_dir``.

        The file name is preserved. When ``fetch_digest`` is set and the
        producer left a sidecar next to it, the sidecar is copied as well,
        unless a local one already exists (a local record is never replaced).

        Raises ``RemoteArtifactNotFoundError`` when nothing matches and
        ``RemoteTransferError`` when the copy fails.
        """
        files = self.list_artifacts(remote_dir, pattern)
        if not files:
            raise RemoteArtifactNotFoundError(
                f"no file matching {pattern!r} in {self._session.host}:{remote_dir}"
            )
        newest = files[0]
        target_dir = Path(local_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        remote_path = str(PurePosixPath(remote_dir) / newest.name)
        local_path = target_dir / newest.name
        logger.info("Fetching %s:%s -> %s", self._session.host, remote_path, local_path)
        self._copy_into_place(remote_path, local_path, "copy")

        if fetch_digest:
            self._fetch_digest(remote_path, local_path)

        try:
            return Artifact.from_path(local_path)
        except OSError as exc:
            raise RemoteTransferError(f"copied file missing at {local_path}: {exc}") from exc

    def _fetch_digest(self, remote_path: str, local_path: Path) -> None:
        local_record = local_path.with_name(local_path.name + self._suffix)
        if local_record.exists():
            logger.debug("Keeping existing digest record %s", local_record)
            return
        remote_record = remote_path + self._suffix
        if not self.remote_file_exists(remote_record):
            logger.info("No remote digest record for %s", remote_path)
            return
        self._copy_into_place(remote_record, local_record, "copy digest", exclusive=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _copy_into_place(
        self, remote_path: str, local_path: Path, action: str, exclusive: bool = False
    ) -> None:
        """scp into a hidden ``.<name>.part`` file, then move it to ``local_path``.

        A failed or interrupted copy never leaves a file under the final name.
        With ``exclusive`` an existing ``local_path`` is kept and the copy is
        discarded.
        """
        part_path = local_path.with_name(f".{local_path.name}.part")
        try:
            self._invoke(self._session.scp_argv(remote_path, part_path), action)
            if exclusive:
                try:
                    os.link(part_path, local_path)
                except FileExistsError:
                    logger.debug("Keeping existing %s", local_path)
            else:
                os.replace(part_path, local_path)
        except OSError as exc:
            raise RemoteTransferError(f"cannot move copy into {local_path}: {exc}") from exc
        finally:
            try:
                part_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove partial download %s: %s", part_path, exc)

    def _invoke(
        self, argv: list[str], action: str, check: bool = True
    ) -> subprocess.CompletedProcess:
        logger.debug("Running %s", shlex.join(argv))
        try:
            result = self._run(
                argv,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise RemoteTransferError(
                f"{action} on {self._session.host} timed out after {exc.timeout}s"
            ) from exc
        except OSError as exc:
            raise RemoteTransferError(f"cannot run {argv[0]}: {exc}") from exc

        if check and result.returncode != 0:
            raise RemoteTransferError(
                f"{action} on {self._session.host} failed "
                f"(exit {result.returncode}): {_stderr_of(result)}"
            )
        return result

    @staticmethod
    def _parse_listing(stdout: str) -> list[RemoteFile]:
        files: list[RemoteFile] = []
        for line in stdout.splitlines():
            if not line.strip():
                continue
            parts = line.split(" ", 2)
            if len(parts) != 3:
                raise RemoteTransferError(f"unexpected listing line: {line!r}")
            mtime, size, name = parts
            try:
                files.append(
                    RemoteFile(
                        name=name,
                        modified_at=datetime.fromtimestamp(float(mtime), tz=timezone.utc),
                        size_bytes=int(size),
                    )
                )
            except ValueError as exc:
                raise RemoteTransferError(f"unexpected listing line: {line!r}") from exc
        return files


def _stderr_of(result: Any) -> str:
    return (result.stderr or "").strip() or "no output"
