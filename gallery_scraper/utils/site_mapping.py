"""Default collaborators that know the site's conventions.

Category labels, detail-page links, thumbnail URL sizes and title
language markers. The parser only sees these through the callables in
`gallery_scraper.ports`, so any of them can be swapped out.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Pattern, Tuple

from ..models import Category
from ..ports import DetailLink

_DETAIL_URL_RE = re.compile(r'https?://[^/\s]+/(?:g|mpv)/(\d+)/([0-9a-f]{10})')
_LABEL_CLEAN_RE = re.compile(r'\s+')

_UINT64_MAX = 2 ** 64 - 1


class CategoryMapper:
    """Map category labels (icon alt text or titles) to `Category` codes.

    List pages use compact labels (``artistcg``) while thumbnail pages
    use display names (``Artist CG``); both are accepted.
    """

    LABELS: Dict[str, Category] = {
        'misc': Category.MISC,
        'doujinshi': Category.DOUJINSHI,
        'manga': Category.MANGA,
        'artistcg': Category.ARTIST_CG,
        'gamecg': Category.GAME_CG,
        'imageset': Category.IMAGE_SET,
        'cosplay': Category.COSPLAY,
        'asianporn': Category.ASIAN_PORN,
        'non-h': Category.NON_H,
        'western': Category.WESTERN,
        'private': Category.PRIVATE,
    }

    def __call__(self, label: Optional[str]) -> Category:
        if not label:
            return Category.UNKNOWN
        key = _LABEL_CLEAN_RE.sub('', label.lower())
        return self.LABELS.get(key, Category.UNKNOWN)


get_category = CategoryMapper()


def parse_detail_url(href: Optional[str]) -> Optional[DetailLink]:
    """Extract ``(gid, token)`` from a gallery detail link."""
    if not href:
        return None
    m = _DETAIL_URL_RE.search(href)
    if not m:
        return None
    gid = int(m.group(1))
    if gid > _UINT64_MAX:
        return None
    return DetailLink(gid, m.group(2))


class ThumbnailUrlNormalizer:
    """Clean up thumbnail URLs and optionally request a different size.

    Thumbnail files are named ``<hash>_<size>.<ext>``; with `resolution`
    set, the size component is replaced, e.g. ``..._l.jpg`` becomes
    ``..._250.jpg``.
    """

    def __init__(self, resolution: Optional[str] = None):
        self.resolution = resolution or None

    def __call__(self, raw_url: Optional[str]) -> str:
        url = (raw_url or '').strip()
        if not url:
            return ''
        if url.startswith('//'):
            url = 'https:' + url
        if self.resolution is None:
            return url
        index1 = url.rfind('_')
        index2 = url.rfind('.')
        if 0 <= index1 < index2:
            return url[:index1 + 1] + self.resolution + url[index2:]
        return url


# (code, pattern) checked in order; first match wins
_LANGUAGE_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (code, re.compile(pattern, re.I))
    for code, pattern in (
        ('EN', r'[(\[]eng(?:lish)?[)\]]|英訳'),
        ('ZH', r'[(\[]ch(?:inese)?[)\]]|[汉漢]化|中[国國][语語]|中文|中国翻訳'),
        ('ES', r'[(\[]spanish[)\]]|[(\[]español[)\]]|スペイン翻訳'),
        ('KO', r'[(\[]korean?[)\]]|韓国翻訳'),
        ('RU', r'[(\[]rus(?:sian)?[)\]]|ロシア翻訳'),
        ('FR', r'[(\[]fr(?:ench)?[)\]]|フランス翻訳'),
        ('PT', r'[(\[]portuguese|ポルトガル翻訳'),
        ('TH', r'[(\[]thai(?: ภาษาไทย)?[)\]]|แปลไทย|タイ翻訳'),
        ('DE', r'[(\[]german[)\]]|ドイツ翻訳'),
        ('IT', r'[(\[]italiano?[)\]]|イタリア翻訳'),
        ('VI', r'[(\[]vietnamese(?: tiếng việt)?[)\]]|ベトナム翻訳'),
        ('PL', r'[(\[]polish[)\]]|ポーランド翻訳'),
        ('HU', r'[(\[]hun(?:garian)?[)\]]|ハンガリー翻訳'),
        ('NL', r'[(\[]dutch[)\]]|オランダ翻訳'),
    )
)


def detect_language(title: Optional[str]) -> Optional[str]:
    """Return a two-letter language code from translation markers in a title."""
    if not title:
        return None
    for code, pattern in _LANGUAGE_PATTERNS:
        if pattern.search(title):
            return code
    return None


__all__ = ['CategoryMapper', 'ThumbnailUrlNormalizer', 'detect_language', 'get_category', 'parse_detail_url']
