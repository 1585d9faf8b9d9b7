"""Remote side of the downloader: the VPS that produces the nightly dump.

Modules
-------
transfer
    ``RemoteSession`` (explicit connection settings) and ``RemoteTransfer``,
    which lists a remote backup directory over ``ssh`` and copies the newest
    file, plus its producer-side ``.sha256`` sidecar, over ``scp``.

Everything here shells out to the OpenSSH client binaries with argument
lists; there is no local shell and no global credential state.
"""

from backupwarden.remote.transfer import RemoteSession, RemoteTransfer

__all__ = ["RemoteSession", "RemoteTransfer"]
