"""Parameter Validation - rejects malformed pagination before any IO.

Invariants:
    - Limit is checked before offset: a call that breaks both raises InvalidLimitError
    - Pure: raises or returns None, touches nothing else

Design Decisions:
    - validate_filter is a permissive no-op. Every UserFilter member is a valid
      request; the hook exists so filter rules have one place to land
"""

from userquery.core.domain_types import MIN_LIMIT, MAX_LIMIT, UserFilter
from userquery.core.errors import InvalidLimitError, InvalidOffsetError
from userquery.core.query_types import GetUsersOptions


def validate_pagination(limit: int, offset: int) -> None:
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise InvalidLimitError(
            f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT} (got {limit})",
        )
    if offset < 0:
        raise InvalidOffsetError(f"Offset must be non-negative (got {offset})")


def validate_options(options: GetUsersOptions) -> None:
    validate_pagination(options.limit, options.offset)


def validate_filter(user_filter: UserFilter) -> None:
    """Accepts every filter."""
    return None
