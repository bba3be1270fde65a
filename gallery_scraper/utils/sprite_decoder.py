from __future__ import annotations

import re
from typing import Optional


# Pre-compiled regex for performance
_RATING_OFFSET_RE = re.compile(r'\d+px')
_FAVORITE_SLOT_RE = re.compile(r'background-position:0px -(\d+)px;')
_THUMB_SIZE_RE = re.compile(r'height:(\d+)px; width:(\d+)px')

# Offsets are 32-bit ints on the site; anything wider is treated as garbage
_INT_MAX = 2 ** 31 - 1


def _parse_int(text: str, default: Optional[int] = None) -> Optional[int]:
    try:
        value = int(text)
    except (TypeError, ValueError):
        return default
    if value > _INT_MAX:
        return default
    return value


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class SpriteDecoder:
    """Decode presentation details the site encodes as CSS sprite offsets.

    The star rating, favorite badge and legacy thumbnail references are
    only present as background positions or `~`-delimited strings in the
    markup. The arithmetic below mirrors the site's stylesheet and must
    not be "fixed": truncating division, the 21px half-star row and the
    19px badge pitch are what the pages actually use.

    Methods return None when a value cannot be decoded.
    """

    STARS = 5
    STAR_WIDTH = 16
    HALF_STAR_ROW = 21
    BADGE_TOP = 2
    BADGE_PITCH = 19
    # Substituted for an unreadable badge offset; decodes to "not favorited"
    BAD_BADGE_OFFSET = -36
    SPRITE_SCHEME = 'http://'

    @classmethod
    def decode_rating(cls, style: Optional[str]) -> Optional[float]:
        if not style:
            return None
        matches = _RATING_OFFSET_RE.findall(style)
        if len(matches) < 2:
            return None
        num1 = _parse_int(matches[0][:-2])
        num2 = _parse_int(matches[1][:-2])
        if num1 is None or num2 is None:
            return None
        rate = cls.STARS - _trunc_div(num1, cls.STAR_WIDTH)
        if num2 == cls.HALF_STAR_ROW:
            rate -= 1
            text = f'{rate}.5'
        else:
            text = str(rate)
        try:
            return float(text)
        except ValueError:
            return None

    @classmethod
    def decode_favorite_slot(cls, style: Optional[str]) -> Optional[int]:
        if not style:
            return None
        m = _FAVORITE_SLOT_RE.search(style)
        if not m:
            return None
        offset = _parse_int(m.group(1), cls.BAD_BADGE_OFFSET)
        return _trunc_div(offset - cls.BADGE_TOP, cls.BADGE_PITCH)

    @classmethod
    def decode_thumb_size(cls, style: Optional[str]) -> Optional[tuple]:
        """Return ``(width, height)`` from an inline thumbnail style."""
        if not style:
            return None
        m = _THUMB_SIZE_RE.search(style)
        if not m:
            return None
        # the site writes height first
        return _parse_int(m.group(2), 0), _parse_int(m.group(1), 0)

    @classmethod
    def resolve_sprite_thumb(cls, markup: Optional[str]) -> Optional[str]:
        """Rebuild a thumbnail URL from legacy ``init~host~path~...`` markup.

        Returns the un-normalized URL, or None when the markup does not
        carry two `~` delimiters.
        """
        if not markup:
            return None
        index1 = markup.find('~')
        index2 = markup.find('~', index1 + 1) if index1 >= 0 else -1
        if index1 < index2:
            return cls.SPRITE_SCHEME + markup[index1 + 1:index2].replace('~', '/')
        return None


# Convenience wrapper functions

def parse_rating(style: Optional[str]) -> Optional[float]:
    """Decode a star rating from a background-position style."""
    return SpriteDecoder.decode_rating(style)


def parse_favorite_slot(style: Optional[str]) -> Optional[int]:
    """Decode a favorite slot index from a badge style."""
    return SpriteDecoder.decode_favorite_slot(style)


def parse_thumb_size(style: Optional[str]) -> Optional[tuple]:
    return SpriteDecoder.decode_thumb_size(style)


def parse_sprite_thumb(markup: Optional[str]) -> Optional[str]:
    return SpriteDecoder.resolve_sprite_thumb(markup)


__all__ = ['SpriteDecoder', 'parse_rating', 'parse_favorite_slot', 'parse_thumb_size', 'parse_sprite_thumb']
