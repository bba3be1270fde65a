"""Table listing layout.

The default list view renders galleries as table rows under
``.itg``. The first row is the column header. Each row carries:

- ``.ic``   category icon (label in `alt`)
- ``.itd``  posted date
- ``.it2``  thumbnail container (size in `style`, `<img>` or legacy
            ``init~host~path~`` sprite text)
- ``.it5``  title cell whose first child is the detail link (required)
- ``.it4r`` star rating sprite
- ``.itu``  uploader
- ``.it3``  favorite badges
"""
from typing import List, Optional, Tuple

from bs4 import Tag

from ..models import RecordBuilder, SummaryRecord
from ..utils.sprite_decoder import parse_rating, parse_sprite_thumb, parse_thumb_size
from .base import ListingTemplate
from .utils import (
    attr,
    element_text,
    find_first_by_class,
    first_child,
    has_any_class,
    inner_html,
    table_rows,
)

# Rating badge classes that mark the user's own vote
RATED_CLASSES = ('irr', 'irg', 'irb')


class NormalListing(ListingTemplate):
    name = 'normal_listing'

    def rows(self, grid: Tag) -> List[Tag]:
        # first row is the table header
        return table_rows(grid)[1:]

    def _thumbnail(self, builder: RecordBuilder, row: Tag) -> None:
        it2 = find_first_by_class(row, 'it2')
        if it2 is None:
            builder.put('thumbnail_width', None)
            builder.put('thumbnail_height', None)
            builder.put('thumbnail_url', None)
            return

        size = parse_thumb_size(attr(it2, 'style'))
        if size is not None:
            builder.put('thumbnail_width', size[0])
            builder.put('thumbnail_height', size[1])
        else:
            builder.put('thumbnail_width', None, reason='unparsed')
            builder.put('thumbnail_height', None, reason='unparsed')

        img = first_child(it2)
        if img is not None:
            builder.put('thumbnail_url', self.context.thumb_normalizer(attr(img, 'src')))
            return
        sprite_url = parse_sprite_thumb(inner_html(it2))
        if sprite_url is not None:
            builder.put('thumbnail_url', self.context.thumb_normalizer(sprite_url))
        else:
            builder.put('thumbnail_url', None, reason='unparsed')

    def _rating(self, builder: RecordBuilder, row: Tag) -> None:
        it4r = find_first_by_class(row, 'it4r')
        if it4r is None:
            builder.put('rating', None)
            return
        builder.put('rating', parse_rating(attr(it4r, 'style')), reason='unparsed')
        # TODO: the gallery may also be rated when none of these classes is present;
        # find the marker the site uses for that case
        builder.put('rated', has_any_class(it4r, *RATED_CLASSES))

    def parse_item(self, row: Tag) -> Tuple[Optional[SummaryRecord], List[str]]:
        builder = RecordBuilder()

        ic = find_first_by_class(row, 'ic')
        if ic is not None:
            builder.put('category', self.context.category_mapper(attr(ic, 'alt').strip()))
        else:
            builder.put('category', None)

        builder.put('posted_date', element_text(find_first_by_class(row, 'itd')))

        self._thumbnail(builder, row)

        # Title (required)
        it5 = find_first_by_class(row, 'it5')
        if it5 is None:
            builder.put('title', None)
            return None, builder.diagnostics
        a = first_child(it5)
        if a is None:
            builder.put('title', None, reason='no-link')
            return None, builder.diagnostics
        link = self.context.link_parser(attr(a, 'href'))
        if link is None:
            builder.put('gid', None, reason='unparsed')
            return None, builder.diagnostics
        builder.put('gid', link.gid)
        builder.put('token', link.token)
        builder.put('title', element_text(a))

        self._rating(builder, row)

        builder.put('uploader', element_text(find_first_by_class(row, 'itu')))

        self._favorite(builder, find_first_by_class(row, 'it3'))

        return self._finish(builder), builder.diagnostics
