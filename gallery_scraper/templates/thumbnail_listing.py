"""Thumbnail grid layout.

Each direct child of ``.itg`` is one gallery tile. Tiles have no posted
date, uploader or thumbnail size, and the rating badge carries no
"rated by me" marker.
"""
from typing import List, Optional, Tuple

from bs4 import Tag

from ..models import RecordBuilder, SummaryRecord
from ..utils.sprite_decoder import parse_rating
from .base import ListingTemplate
from .utils import attr, element_children, element_text, find_first_by_class, first_child


class ThumbnailListing(ListingTemplate):
    name = 'thumbnail_listing'

    def rows(self, grid: Tag) -> List[Tag]:
        return element_children(grid)

    def parse_item(self, row: Tag) -> Tuple[Optional[SummaryRecord], List[str]]:
        builder = RecordBuilder()

        # Title (required)
        id2 = find_first_by_class(row, 'id2')
        if id2 is None:
            builder.put('title', None)
            return None, builder.diagnostics
        builder.put('title', element_text(id2))

        # gid, token (required)
        a = first_child(id2)
        if a is None:
            builder.put('gid', None, reason='no-link')
            return None, builder.diagnostics
        link = self.context.link_parser(attr(a, 'href'))
        if link is None:
            builder.put('gid', None, reason='unparsed')
            return None, builder.diagnostics
        builder.put('gid', link.gid)
        builder.put('token', link.token)

        # container > link > img
        img = first_child(first_child(find_first_by_class(row, 'id3')))
        if img is not None:
            builder.put('thumbnail_url', self.context.thumb_normalizer(attr(img, 'src')))
        else:
            builder.put('thumbnail_url', None)

        id41 = find_first_by_class(row, 'id41')
        if id41 is not None:
            builder.put('category', self.context.category_mapper(attr(id41, 'title').strip()))
        else:
            builder.put('category', None)

        id43 = find_first_by_class(row, 'id43')
        if id43 is not None:
            builder.put('rating', parse_rating(attr(id43, 'style')), reason='unparsed')
        else:
            builder.put('rating', None)

        # badges sit one level deeper than in the table layout
        self._favorite(builder, first_child(find_first_by_class(row, 'id44')))

        return self._finish(builder), builder.diagnostics
