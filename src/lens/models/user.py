"""
User profile model for the Lens application.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


@dataclass
class UserProfile:
    """Public profile of a registered user."""

    uid: str
    username: str
    full_name: str = ""
    email: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create_new(cls, uid: str, username: str, full_name: str, email: str) -> "UserProfile":
        now = datetime.now(UTC)
        return cls(
            uid=uid,
            username=username.lower(),
            full_name=full_name,
            email=email,
            created_at=now,
            updated_at=now,
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        updated_at = data.get("updated_at")
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)

        return cls(
            uid=data["uid"],
            username=data.get("username") or "",
            full_name=data.get("full_name") or "",
            email=data.get("email") or "",
            created_at=created_at,
            updated_at=updated_at,
        )
