"""Image gallery entry model."""

from __future__ import annotations

from pydantic import BaseModel


class GalleryImage(BaseModel):
    """One image of a gallery; ``path`` is absolute or root-relative."""

    name: str
    path: str
