"""
Caller role resolution for FastAPI routes.

The board has no accounts. A client declares whether it is acting as a
Leader or a Head through the ``X-Role`` header; requests without the header
act as Leader.
"""

from fastapi import Header

from taskboard.exceptions import ValidationError, field_error
from taskboard.logging_config import get_logger
from taskboard.schemas.task import UserRole

logger = get_logger(__name__)

ROLE_HEADER = "X-Role"


async def get_current_role(
    x_role: str | None = Header(default=None, alias=ROLE_HEADER),
) -> UserRole:
    """
    Resolve the acting role.

    Raises:
        ValidationError: If the header holds an unknown role.
    """
    if not x_role or not x_role.strip():
        return UserRole.LEADER

    value = x_role.strip().lower()
    for role in UserRole:
        if role.value.lower() == value:
            return role

    logger.warning(f"Unknown role header: {x_role!r}")
    raise ValidationError(
        f"Unknown role '{x_role}'",
        details=[field_error(["header", ROLE_HEADER], "Expected Leader or Head")],
    )
