"""Domain Types - enums and constants shared by every stage of the pipeline.

Invariants:
    - MIN_LIMIT..MAX_LIMIT (1..1000) is the only valid page size range
    - UserRole.priority is a total order: admin (1) < moderator (2) < user (3)
    - All selectors encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON and telemetry parameters without custom encoders
    - UserSortBy keeps camelCase values (createdAt, updatedAt) because callers
      send them verbatim from the client
"""

from enum import Enum


# ─── Pagination ──────────────────────────────────────────────────

MIN_LIMIT: int = 1
MAX_LIMIT: int = 1000
DEFAULT_LIMIT: int = 100
DEFAULT_OFFSET: int = 0
DEFAULT_CACHE_TTL_SECONDS: int = 300

# UserFilter.ALL fetches a single bounded page, never the full table
FILTER_ALL_CAP: int = 1000


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account role. priority drives the role sort (lower sorts first)."""
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"

    @property
    def priority(self) -> int:
        return _ROLE_PRIORITY[self]

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY[self]


_ROLE_PRIORITY = {
    UserRole.ADMIN: 1,
    UserRole.MODERATOR: 2,
    UserRole.USER: 3,
}

_ROLE_DISPLAY = {
    UserRole.ADMIN: "Administrator",
    UserRole.MODERATOR: "Moderator",
    UserRole.USER: "User",
}


class UserFilter(str, Enum):
    """Categorical selector for the filter entry point. Pure, no state."""
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"

    @property
    def display_name(self) -> str:
        return _FILTER_DISPLAY[self]


_FILTER_DISPLAY = {
    UserFilter.ALL: "All Users",
    UserFilter.ACTIVE: "Active Users",
    UserFilter.INACTIVE: "Inactive Users",
    UserFilter.ADMIN: "Administrators",
    UserFilter.MODERATOR: "Moderators",
    UserFilter.USER: "Regular Users",
}


class UserSortBy(str, Enum):
    """Sort keys. name/email ascending, role by priority, timestamps newest first."""
    NAME = "name"
    EMAIL = "email"
    ROLE = "role"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY[self]


_SORT_DISPLAY = {
    UserSortBy.NAME: "Name",
    UserSortBy.EMAIL: "Email",
    UserSortBy.ROLE: "Role",
    UserSortBy.CREATED_AT: "Created Date",
    UserSortBy.UPDATED_AT: "Updated Date",
}
