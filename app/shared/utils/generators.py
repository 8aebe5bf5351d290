"""ID generators."""

import uuid


def generate_uuid() -> str:
    """Generate a random UUID4 as a string (primary keys for roles, users, assignments).

    Returns:
        A new UUID string.
    """
    return str(uuid.uuid4())
