"""Backupwarden CLI: Typer-based command-line interface.

Provides the ``backupwarden`` command with subcommands for locating,
verifying, pruning and fetching backups. Exit codes follow
``OverallResult.exit_code`` so the commands can drive cron and monitoring.

All output uses Rich for formatted terminal display.
"""
