"""Media-type categories and their bundled seed datasets."""

from __future__ import annotations

from enum import Enum
from functools import cache
from importlib import resources


class Category(Enum):
    """Top-level media-type groups published by the IANA registry.

    Member order is the order seed loading and refresh walk the catalog.
    """

    APPLICATION = "application"
    AUDIO = "audio"
    FONT = "font"
    IMAGE = "image"
    MESSAGE = "message"
    MODEL = "model"
    MULTIPART = "multipart"
    TEXT = "text"
    VIDEO = "video"

    def __str__(self) -> str:
        return self.value

    def source_url(self, base_url: str) -> str:
        """Return the registry CSV location for this category."""
        return f"{base_url.rstrip('/')}/{self.value}.csv"

    def seed_text(self) -> str:
        """Return the bundled CSV snapshot for this category."""
        return _read_seed(self.value)


@cache
def _read_seed(name: str) -> str:
    source = resources.files(__package__).joinpath("resources", f"{name}.csv")
    return source.read_bytes().decode("utf-8")
