"""Runtime configuration: env-driven via pydantic-settings.

Reads from a ``.env`` file and ``BACKUPWARDEN_*`` environment variables.
CLI options fall back to these values when not given explicitly.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class WardenConfig(BaseSettings):
    """Backupwarden configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BACKUPWARDEN_BACKUP_DIR=/srv/backups/db
        export BACKUPWARDEN_KEEP_COUNT=14
        export BACKUPWARDEN_REMOTE_HOST=app.example.org

    Or via .env file::

        BACKUPWARDEN_PATTERN=db_*.sql.gz
        BACKUPWARDEN_PROBE_FORMAT=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BACKUPWARDEN_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Local retention set
    backup_dir: Path = Path("backups")
    pattern: str = "backup_*.gz"
    keep_count: int = 7

    # Verification
    probe_format: bool = False
    digest_suffix: str = ".sha256"
    probe_bytes: int = 4096
    chunk_size: int = 1024 * 1024

    # Remote host (nightly backups are produced there)
    remote_host: str = ""
    remote_user: str = ""
    remote_port: int = 22
    remote_dir: str = "/var/backups/postgres"
    identity_file: Path | None = None
    ssh_binary: str = "ssh"
    scp_binary: str = "scp"
    connect_timeout: int = 10
    transfer_timeout: int = 1800


# Module-level singleton; import as `from backupwarden.config import config`
config = WardenConfig()
