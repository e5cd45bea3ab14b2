"""Basic User Validator - default structural checks on fetched records.

Invariants:
    - Collects every problem for a record before raising (one failure per user)
    - Pure: no IO, no availability lookups

Design Decisions:
    - Only shape checks live here; uniqueness and business rules belong to a
      richer validator injected through the UserValidator protocol
"""

from userquery.core.errors import UserValidationFailure
from userquery.core.user import User


def find_user_problems(user: User) -> list[str]:
    problems = []
    if not user.id:
        problems.append("User ID cannot be empty")
    if not user.name:
        problems.append("Name cannot be empty")
    if not user.email:
        problems.append("Email cannot be empty")
    elif "@" not in user.email:
        problems.append("Email must contain @ symbol")
    elif "." not in user.email.rsplit("@", 1)[1]:
        problems.append("Email must contain domain")
    return problems


class BasicUserValidator:
    """UserValidator used when none is injected."""

    def validate_user(self, user: User) -> None:
        problems = find_user_problems(user)
        if problems:
            raise UserValidationFailure(user.id, problems)
