"""Plugin metadata reported to the cf CLI.

Each command registers its help and usage text here, so the click help
and the metadata the host CLI sees stay in sync.
"""

from dataclasses import dataclass, field

from mariadb_backup import __version__

PLUGIN_NAME = "cf-mariadb-backup-plugin"
AUTHOR_EMAIL = "gsm@machados.org"
PROJECT_URL = "http://github.com/gsmachado/cf-mariadb-backup-plugin"
MIN_CLI_VERSION = (6, 7, 0)

UNINSTALL_COMMAND = "CLI-MESSAGE-UNINSTALL"


@dataclass
class CommandMeta:
    """Help and usage of a plugin command.

    Attributes:
        name: Command name as typed after ``cf``
        help_text: One-line description
        usage: Usage line(s) shown by ``cf help <command>``
    """

    name: str
    help_text: str
    usage: str


@dataclass
class PluginMetadata:
    """Name, version and commands of the plugin."""

    name: str
    version: tuple[int, int, int]
    min_cli_version: tuple[int, int, int]
    commands: list[CommandMeta] = field(default_factory=list)

    def command(self, name: str) -> CommandMeta:
        for meta in self.commands:
            if meta.name == name:
                return meta
        raise KeyError(name)


def _version_tuple(value: str) -> tuple[int, int, int]:
    parts = [int(p) for p in value.split(".")[:3] if p.isdigit()]
    parts += [0] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


PLUGIN_METADATA = PluginMetadata(
    name=PLUGIN_NAME,
    version=_version_tuple(__version__),
    min_cli_version=MIN_CLI_VERSION,
    commands=[
        CommandMeta(
            name="list-mariadb-backups",
            help_text="List all backups of a specific MariaDB service.",
            usage="list-mariadb-backups:\n   cf list-mariadb-backups -s SERVICE_NAME",
        ),
        CommandMeta(
            name="create-mariadb-backup",
            help_text=(
                "Create a backup of a specific MariaDB service. You can specify the max "
                "amount of backups before rotation (delete the oldest)."
            ),
            usage="create-mariadb-backup:\n   cf create-mariadb-backup -s SERVICE_NAME [-m MAX_BACKUPS_ROTATION]",
        ),
        CommandMeta(
            name="delete-mariadb-backup",
            help_text="Delete the backup of a specific MariaDB service.",
            usage="delete-mariadb-backup:\n   cf delete-mariadb-backup -s SERVICE_NAME -b BACKUP_GUID",
        ),
    ],
)
