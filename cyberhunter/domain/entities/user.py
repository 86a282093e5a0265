"""Domain entity representing a user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .role import Role


@dataclass
class User:
    """Core attributes describing a marketplace account."""

    id: int | None
    name: str
    email: str
    password: str
    role: Role
    bio: str | None = None
    avatar: str | None = None
    skills: list[str] = field(default_factory=list)
    points: int = 0
    completed_projects: int = 0
    is_verified: bool = False
    is_active: bool = True
    last_active: datetime | None = None
    verification_token: str | None = None
    verification_expires_at: datetime | None = None
    reset_password_token: str | None = None
    reset_password_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted: bool = False
    deleted_at: datetime | None = None

    def has_role(self, role: Role | str) -> bool:
        """Return ``True`` when the user holds ``role``."""

        return self.role == Role(role)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)


__all__ = ["User"]
