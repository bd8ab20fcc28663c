"""Exceptions raised by the MariaDB backup plugin."""


class MariaDBBackupError(Exception):
    """Base exception for plugin errors."""

    code = "MARIADB_BACKUP_ERROR"

    def __init__(self, message: str, code: str | None = None, suggestion: str | None = None):
        self.code = code or self.code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


class ArgumentError(MariaDBBackupError):
    """A required flag is missing or invalid."""

    code = "ARGUMENT_ERROR"


class ServiceLookupError(MariaDBBackupError):
    """The service instance could not be resolved or is not MariaDB."""

    code = "SERVICE_LOOKUP"


class TargetError(MariaDBBackupError):
    """The current org or space target is not available."""

    code = "TARGET_ERROR"


class TransportError(MariaDBBackupError):
    """A call through the cf CLI failed."""

    code = "TRANSPORT_ERROR"


class DecodeError(MariaDBBackupError):
    """A response body was not valid JSON for the expected shape."""

    code = "DECODE_ERROR"


class BusinessError(MariaDBBackupError):
    """The API answered, but the operation did not succeed."""

    code = "BUSINESS_ERROR"
