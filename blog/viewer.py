"""
The authenticated caller.

There is no authentication model: every request acts as one statically
configured viewer.
"""

from dataclasses import dataclass

from blog.config import settings
from blog.models.node_kind import NodeKind


@dataclass(frozen=True)
class Viewer:
    id: str

    node_kind = NodeKind.USER


def get_viewer() -> Viewer:
    return Viewer(id=settings.viewer_id)
