"""
One-time code helpers shared by the sign-up and order verification flows.
"""

import secrets
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Default service clock."""
    return datetime.now(timezone.utc)


def generate_code(digits: int = 6) -> str:
    """
    Generate a cryptographically secure numeric code.

    Returns string to preserve leading zeros.
    """
    return "".join(secrets.choice("0123456789") for _ in range(digits))


def codes_match(expected: str, submitted: str) -> bool:
    """Constant-time code comparison."""
    return secrets.compare_digest(expected.encode(), submitted.encode())
