"""Record identifier parsing."""

from uuid import UUID

from .exceptions import BadRequest


def parse_id(raw: str | UUID | None) -> UUID:
    """
    Parse a record identifier.

    Raises:
        BadRequest: If ``raw`` is empty or not a well-formed UUID
    """
    if isinstance(raw, UUID):
        return raw
    if not raw:
        raise BadRequest("Invalid Id")
    try:
        return UUID(raw)
    except ValueError:
        raise BadRequest("Invalid Id") from None
