"""Data records mirroring the backup API JSON shapes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from mariadb_backup.errors import DecodeError

# Absent timestamps decode to the earliest representable UTC time
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


class BackupStatus(str, Enum):
    """Known backup states. Unknown server values are kept as plain strings."""

    CREATE_SUCCEEDED = "CREATE_SUCCEEDED"
    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"


class RestoreStatus(str, Enum):
    """Known restore states."""

    SUCCEEDED = "SUCCEEDED"


def _status(value: Any, enum_cls: type[Enum]) -> Any:
    """Map a raw status to its enum member, keeping unknown values as strings."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"Invalid status value: {value!r}")
    try:
        return enum_cls(value)
    except ValueError:
        return value


def status_value(status: Any) -> str:
    """Return the raw string of a status, enum member or not."""
    if isinstance(status, Enum):
        return status.value
    return str(status)


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp as sent by the API.

    A missing value gives ``ZERO_TIME``; a timestamp without a UTC offset
    is rejected.
    """
    if value is None:
        return ZERO_TIME
    if not isinstance(value, str):
        raise DecodeError(f"Invalid timestamp: {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        result = datetime.fromisoformat(value)
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp {value!r}: {e}")
    if result.tzinfo is None:
        raise DecodeError(f"Timestamp {value!r} has no UTC offset")
    return result


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"Expected a string for '{key}', got {value!r}")
    return value


@dataclass(frozen=True)
class Metadata:
    """Identity of a backup or restore record."""

    guid: str
    url: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_dict(cls, data: Any) -> "Metadata":
        data = _require_dict(data, "metadata")
        return cls(
            guid=_optional_str(data, "guid") or "",
            url=_optional_str(data, "url") or "",
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "guid": self.guid,
            "url": self.url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class RestoreEntity:
    """Body of a restore attempt."""

    backup_id: str
    status: RestoreStatus | str

    @classmethod
    def from_dict(cls, data: Any) -> "RestoreEntity":
        data = _require_dict(data, "restore entity")
        return cls(
            backup_id=_optional_str(data, "backup_id") or "",
            status=_status(data.get("status"), RestoreStatus),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"backup_id": self.backup_id, "status": status_value(self.status)}


@dataclass(frozen=True)
class BackupRestore:
    """A restore attempt nested under a backup."""

    metadata: Metadata
    entity: RestoreEntity

    @classmethod
    def from_dict(cls, data: Any) -> "BackupRestore":
        data = _require_dict(data, "restore")
        return cls(
            metadata=Metadata.from_dict(data.get("metadata")),
            entity=RestoreEntity.from_dict(data.get("entity")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": self.metadata.to_dict(), "entity": self.entity.to_dict()}


@dataclass(frozen=True)
class BackupEntity:
    """Body of a backup record."""

    service_instance_id: str
    status: BackupStatus | str
    restores: list[BackupRestore] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "BackupEntity":
        data = _require_dict(data, "backup entity")
        restores = data.get("restores") or []
        if not isinstance(restores, list):
            raise DecodeError("Expected a list for 'restores'")
        return cls(
            service_instance_id=_optional_str(data, "service_instance_id") or "",
            status=_status(data.get("status"), BackupStatus),
            restores=[BackupRestore.from_dict(r) for r in restores],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_instance_id": self.service_instance_id,
            "status": status_value(self.status),
            "restores": [r.to_dict() for r in self.restores],
        }


@dataclass(frozen=True)
class ServiceInstanceBackup:
    """A backup as returned by the API.

    Both parts are optional: a create call that did not succeed comes back
    without an ``entity``.
    """

    metadata: Metadata | None = None
    entity: BackupEntity | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ServiceInstanceBackup":
        data = _require_dict(data, "backup")
        metadata = data.get("metadata")
        entity = data.get("entity")
        return cls(
            metadata=Metadata.from_dict(metadata) if metadata is not None else None,
            entity=BackupEntity.from_dict(entity) if entity is not None else None,
        )

    @property
    def guid(self) -> str:
        return self.metadata.guid if self.metadata else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "entity": self.entity.to_dict() if self.entity else None,
        }


@dataclass
class ServiceInstanceResults:
    """One page of backups, or the accumulation of all pages."""

    total_results: int = 0
    total_pages: int = 0
    prev_url: str | None = None
    next_url: str | None = None
    resources: list[ServiceInstanceBackup] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ServiceInstanceResults":
        data = _require_dict(data, "results page")
        resources = data.get("resources") or []
        if not isinstance(resources, list):
            raise DecodeError("Expected a list for 'resources'")
        try:
            total_results = int(data.get("total_results") or 0)
            total_pages = int(data.get("total_pages") or 0)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid page totals: {e}")
        return cls(
            total_results=total_results,
            total_pages=total_pages,
            prev_url=_optional_str(data, "prev_url"),
            next_url=_optional_str(data, "next_url"),
            resources=[ServiceInstanceBackup.from_dict(r) for r in resources],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_results": self.total_results,
            "total_pages": self.total_pages,
            "prev_url": self.prev_url,
            "next_url": self.next_url,
            "resources": [r.to_dict() for r in self.resources],
        }
