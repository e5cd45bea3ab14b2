"""User Entity - immutable identity and profile record.

Invariants:
    - A User is never mutated after construction (frozen dataclass)
    - Equality and hashing use id only: two snapshots of one account compare equal

Design Decisions:
    - Dataclass over Pydantic model: the repository owns parsing, the pipeline
      only references records it was handed
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from userquery.core.domain_types import UserRole


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """User record as returned by the repository."""
    id: str
    name: str = field(compare=False)
    email: str = field(compare=False)
    role: UserRole = field(default=UserRole.USER, compare=False)
    is_active: bool = field(default=True, compare=False)
    created_at: datetime = field(default_factory=_utcnow, compare=False)
    updated_at: datetime = field(default_factory=_utcnow, compare=False)
    avatar_url: str | None = field(default=None, compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def is_moderator(self) -> bool:
        """Moderator rights; admins have them too."""
        return self.role in (UserRole.MODERATOR, UserRole.ADMIN)
