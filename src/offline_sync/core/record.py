"""Record data structure and the field schema shared by storage and wire."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from offline_sync.utils.timeutils import parse_timestamp, utcnow

# Mutable domain fields, in canonical order. Storage columns, queue snapshots
# and the remote wire format all use exactly these names.
RECORD_FIELDS: tuple[str, ...] = ("name", "email", "department", "position")

# Field constrained unique across all live records
UNIQUE_FIELD = "email"

# Fields compared by the merge rule
TRACKED_FIELDS: tuple[str, ...] = ("name", "email")


@dataclass(frozen=True)
class Record:
    """
    An employee record held both locally and by the remote store.

    Records are immutable; edits produce a new instance via with_fields().

    Attributes:
        id: Identifier assigned by the store on creation (0 = not yet assigned)
        name: Display name
        email: Unique contact address
        department: Organisational unit
        position: Job title
        updated_at: Naive UTC timestamp used as a coarse recency signal
    """

    id: int = 0
    name: str = ""
    email: str = ""
    department: str = ""
    position: str = ""
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        department: str = "",
        position: str = "",
        updated_at: datetime | None = None,
    ) -> Record:
        """Build an unsaved record (id is assigned by the store)."""
        return cls(
            id=0,
            name=name,
            email=email,
            department=department,
            position=position,
            updated_at=updated_at or utcnow(),
        )

    @property
    def unique_value(self) -> str:
        """Value of the uniqueness-constrained field."""
        value: str = getattr(self, UNIQUE_FIELD)
        return value

    def fields(self) -> dict[str, str]:
        """Return the mutable domain fields as a dict."""
        return {name: getattr(self, name) for name in RECORD_FIELDS}

    def with_fields(self, **changes: Any) -> Record:
        """Return a copy with the given domain fields replaced.

        Raises:
            ValueError: If an unknown field name is passed
        """
        unknown = set(changes) - set(RECORD_FIELDS) - {"id", "updated_at"}
        if unknown:
            raise ValueError(f"Unknown record fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def differs_from(self, other: Record, fields: tuple[str, ...] = TRACKED_FIELDS) -> bool:
        """Check whether any of the given fields differ between two records."""
        return any(getattr(self, name) != getattr(other, name) for name in fields)

    def to_dict(self, *, include_id: bool = True) -> dict[str, Any]:
        """Serialize to the flat field mapping used on the wire and in the queue."""
        data: dict[str, Any] = {}
        if include_id:
            data["id"] = self.id
        data.update(self.fields())
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        """Deserialize from the flat field mapping.

        Missing fields default to empty strings; a missing timestamp
        defaults to now.
        """
        updated_at = parse_timestamp(data.get("updated_at")) or utcnow()
        return cls(
            id=int(data.get("id") or 0),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            department=str(data.get("department") or ""),
            position=str(data.get("position") or ""),
            updated_at=updated_at,
        )
