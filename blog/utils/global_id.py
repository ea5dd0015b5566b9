"""
Global ID Utilities

Opaque identifiers exposed to API clients. A global ID is the standard
base64 encoding of "<TypeName>:<LocalId>", so it is self-describing enough
to route a lookup to the right collection without leaking raw storage keys.
"""

import base64
import binascii
import logging
from typing import NamedTuple

from blog.exceptions import GlobalIdDecodeError

logger = logging.getLogger(__name__)

SEPARATOR = ":"


class ResolvedGlobalId(NamedTuple):
    """Decoded global ID"""

    type_name: str
    local_id: str


def to_global_id(type_name: str, local_id: str | int) -> str:
    """
    Encode a type name and local ID into a global ID.

    Args:
        type_name: GraphQL type name (must not contain ':')
        local_id: Identifier of the record within its collection

    Returns:
        Base64 encoded global ID string
    """
    if not type_name or SEPARATOR in type_name:
        raise ValueError(f"Invalid type name for global ID: {type_name!r}")
    if local_id is None or str(local_id) == "":
        raise ValueError("Global ID requires a non-empty local ID")
    payload = f"{type_name}{SEPARATOR}{local_id}"
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def from_global_id(global_id: str) -> ResolvedGlobalId:
    """
    Decode a global ID.

    Only tokens produced by `to_global_id` are accepted: the input must be
    canonical base64 of UTF-8 text with a non-empty type name and local ID.

    Args:
        global_id: Token received from a client

    Returns:
        ResolvedGlobalId with the type name and local ID

    Raises:
        GlobalIdDecodeError if the token is malformed
    """
    if not isinstance(global_id, str) or not global_id:
        raise GlobalIdDecodeError(global_id, "empty or non-string token")

    try:
        raw = base64.b64decode(global_id.encode("ascii"), validate=True)
        payload = raw.decode("utf-8")
    except (UnicodeError, binascii.Error, ValueError) as e:
        logger.debug(f"Rejected global ID {global_id!r}: {e}")
        raise GlobalIdDecodeError(global_id, "not valid base64 text") from e

    # Reject alternative spellings of the same bytes (missing padding, etc.)
    if base64.b64encode(raw).decode("ascii") != global_id:
        raise GlobalIdDecodeError(global_id, "non-canonical encoding")

    type_name, separator, local_id = payload.partition(SEPARATOR)
    if not separator or not type_name or not local_id:
        raise GlobalIdDecodeError(global_id, "expected '<type>:<id>'")

    return ResolvedGlobalId(type_name=type_name, local_id=local_id)
