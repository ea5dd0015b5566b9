"""Helpers shared by the collection services."""

# Keys are 32-bit INTEGER columns on every supported backend
MAX_KEY = 2**31 - 1


def parse_key(local_id: str | int | None) -> int | None:
    """
    Convert a client-facing local ID to a primary key.

    Anything that is not a decimal integer within the key range cannot name
    a stored record, so it maps to None and lookups report absence instead
    of failing.
    """
    if local_id is None or isinstance(local_id, bool):
        return None
    if isinstance(local_id, str):
        if not local_id.isascii() or not local_id.isdigit():
            return None
        local_id = int(local_id)
    return local_id if 1 <= local_id <= MAX_KEY else None
