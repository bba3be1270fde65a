"""Result types for parsed listing pages.

`SummaryRecord` and `PageListResult` are frozen so a parsed page can be
handed across threads and compared structurally. `RecordBuilder`
assembles a record field by field, substituting defaults for anything a
template could not read and keeping a list of what was missing.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple


class Category(IntEnum):
    """Gallery category bit flags as used by the site's search filters."""

    MISC = 0x1
    DOUJINSHI = 0x2
    MANGA = 0x4
    ARTIST_CG = 0x8
    GAME_CG = 0x10
    IMAGE_SET = 0x20
    COSPLAY = 0x40
    ASIAN_PORN = 0x80
    NON_H = 0x100
    WESTERN = 0x200
    PRIVATE = 0x400
    UNKNOWN = 0x800


# Favorite slot sentinels
FAV_LOCAL_ONLY = -1
FAV_NONE = -2

RATING_UNKNOWN = -1.0


@dataclass(frozen=True)
class SummaryRecord:
    gid: int
    token: str
    title: str
    category: Category = Category.UNKNOWN
    posted_date: str = ''
    thumbnail_url: str = ''
    thumbnail_width: int = 0
    thumbnail_height: int = 0
    rating: float = RATING_UNKNOWN
    rated: bool = False
    uploader: str = ''
    favorite_slot: int = FAV_NONE
    favorite_name: str = ''
    downloaded: bool = False
    simple_language: Optional[str] = None


@dataclass(frozen=True)
class PageListResult:
    page_count: int
    records: Tuple[SummaryRecord, ...] = ()
    diagnostics: Tuple[str, ...] = field(default=(), compare=False)


REQUIRED_FIELDS = ('gid', 'token', 'title')

_DEFAULTS: Dict[str, Any] = {
    f.name: f.default for f in fields(SummaryRecord) if f.name not in REQUIRED_FIELDS
}


class RecordBuilder:
    """Collect `(field, value)` pairs and finalize them into a `SummaryRecord`.

    `put(name, None)` stores the field's default and records an issue
    string such as ``'rating:missing'``. Issues accumulate on
    `diagnostics` and never affect the built record.
    """

    def __init__(self):
        self._values: Dict[str, Any] = {}
        self.diagnostics: List[str] = []

    def put(self, name: str, value: Any, reason: str = 'missing') -> 'RecordBuilder':
        if name not in _DEFAULTS and name not in REQUIRED_FIELDS:
            raise KeyError(f'unknown record field: {name}')
        if value is None:
            if name not in REQUIRED_FIELDS:
                self._values[name] = _DEFAULTS[name]
            self.diagnostics.append(f'{name}:{reason}')
        else:
            self._values[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def build(self) -> SummaryRecord:
        missing = [name for name in REQUIRED_FIELDS if self._values.get(name) is None]
        if missing:
            raise ValueError(f'cannot build record without {", ".join(missing)}')
        return SummaryRecord(**self._values)
