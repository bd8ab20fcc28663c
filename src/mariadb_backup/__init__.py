"""cf-mariadb-backup-plugin - manage MariaDB service backups from the cf CLI."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cf-mariadb-backup-plugin")
except PackageNotFoundError:
    __version__ = "0.1.0"
