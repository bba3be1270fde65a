"""Collaborator interfaces consumed by the listing parser.

The parser never reaches for global state: favorites, downloads,
category names, detail links and thumbnail URLs are all resolved
through objects passed to `ListingParser`. Implementations must be safe
to call from several threads at once; the in-memory stores below are
backed by frozensets for that reason.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Protocol

from .models import Category


class DetailLink(NamedTuple):
    gid: int
    token: str


class DetailLinkParser(Protocol):
    def __call__(self, href: str) -> Optional[DetailLink]:
        ...


class CategoryMapper(Protocol):
    def __call__(self, label: str) -> Category:
        ...


class ThumbnailUrlNormalizer(Protocol):
    def __call__(self, raw_url: str) -> str:
        ...


class LocalFavoritesStore(Protocol):
    def contains(self, gid: int) -> bool:
        """Return True if the gallery is saved in local favorites."""
        ...


class DownloadRegistry(Protocol):
    def contains(self, gid: int) -> bool:
        """Return True if the gallery has a download entry."""
        ...


class InMemoryIdSet:
    """Read-only set of gallery ids satisfying both store protocols."""

    def __init__(self, gids: Iterable[int] = ()):
        self._gids = frozenset(int(g) for g in gids)

    def contains(self, gid: int) -> bool:
        return gid in self._gids


class InMemoryFavoritesStore(InMemoryIdSet):
    pass


class InMemoryDownloadRegistry(InMemoryIdSet):
    pass


@dataclass(frozen=True)
class ListingContext:
    """Bundle of collaborators handed to every template."""

    link_parser: DetailLinkParser
    category_mapper: CategoryMapper
    thumb_normalizer: ThumbnailUrlNormalizer
    favorites: LocalFavoritesStore
    downloads: DownloadRegistry
