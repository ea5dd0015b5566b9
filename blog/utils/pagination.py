"""
Pagination Utilities

Relay-style connections over an in-memory snapshot of a collection.

Cursors encode the zero-based position of an element in the list the
connection was built from, so a cursor is only meaningful against the same
(or an equivalent) list. There is no keyset stability across concurrent
writes.

Policies for arguments the connection model leaves open:
- `first` and `last` must be non-negative; when both are given, `first`
  wins and `last` is ignored.
- Cursors pointing outside the list are clamped to its bounds.
- A cursor that cannot be decoded is an argument error.
"""

import base64
import binascii
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from blog.exceptions import PaginationArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")

CURSOR_PREFIX = "arrayconnection:"


@dataclass
class Edge(Generic[T]):
    """An element of a connection and the cursor pointing at it"""

    cursor: str
    node: T


@dataclass
class PageInfo:
    """Pagination metadata for a connection window"""

    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None = None
    end_cursor: str | None = None


@dataclass
class Connection(Generic[T]):
    """A window of edges plus its page info"""

    edges: list[Edge[T]]
    page_info: PageInfo


def offset_to_cursor(offset: int) -> str:
    """Encode a list position as an opaque cursor."""
    return base64.b64encode(f"{CURSOR_PREFIX}{offset}".encode()).decode("ascii")


def cursor_to_offset(cursor: str) -> int:
    """
    Decode a cursor back into a list position.

    Args:
        cursor: Cursor produced by `offset_to_cursor`

    Returns:
        The encoded position (may lie outside the current list)

    Raises:
        PaginationArgumentError if the cursor is malformed
    """
    try:
        payload = base64.b64decode(cursor.encode("ascii"), validate=True).decode("utf-8")
        if not payload.startswith(CURSOR_PREFIX):
            raise ValueError("missing cursor prefix")
        return int(payload[len(CURSOR_PREFIX) :])
    except (AttributeError, UnicodeError, binascii.Error, ValueError) as e:
        logger.warning(f"Invalid cursor {cursor!r}: {e}")
        raise PaginationArgumentError(f"Invalid pagination cursor '{cursor}'", argument="cursor") from e


def cursor_for_object_in_list(
    items: Sequence[T],
    obj: T,
    key: Callable[[T], Any] | None = None,
) -> str | None:
    """
    Cursor of `obj` within `items`, or None if it is not there.

    Args:
        items: The list the cursor should be valid against
        obj: Element to look up
        key: Optional function used to compare elements (e.g. by primary key)
    """
    target = key(obj) if key else obj
    for offset, item in enumerate(items):
        if (key(item) if key else item) == target:
            return offset_to_cursor(offset)
    return None


def _validate_count(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        raise PaginationArgumentError(f"Argument '{name}' must be a non-negative integer, got {value}", argument=name)


def _clamp(offset: int, length: int) -> int:
    return max(0, min(offset, length))


def connection_from_list(
    items: Sequence[T],
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
) -> Connection[T]:
    """
    Slice a list into a connection window.

    The window is computed in order: drop everything up to and including
    `after`, drop everything from `before` on, then take `first` elements
    from the front or, failing that, `last` elements from the back.

    Args:
        items: Ordered snapshot of the collection
        first: Maximum number of elements from the front of the window
        after: Cursor of the element preceding the window
        last: Maximum number of elements from the back of the window
        before: Cursor of the element following the window

    Returns:
        Connection whose edge cursors are absolute positions in `items`

    Raises:
        PaginationArgumentError for negative counts or malformed cursors
    """
    _validate_count("first", first)
    _validate_count("last", last)

    items = list(items)
    length = len(items)

    start, end = 0, length
    if after is not None:
        start = _clamp(cursor_to_offset(after) + 1, length)
    if before is not None:
        end = _clamp(cursor_to_offset(before), length)
    if end < start:
        end = start

    if first is not None:
        end = min(end, start + first)
    elif last is not None:
        start = max(start, end - last)

    edges = [Edge(cursor=offset_to_cursor(offset), node=items[offset]) for offset in range(start, end)]

    page_info = PageInfo(
        has_next_page=end < length,
        has_previous_page=start > 0,
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
    )
    return Connection(edges=edges, page_info=page_info)
