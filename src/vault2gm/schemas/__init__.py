"""Shared schemas for vault2gm."""

from vault2gm.schemas.gallery import GalleryImage
from vault2gm.schemas.session import Category, Page, Session

__all__ = ["Category", "GalleryImage", "Page", "Session"]
