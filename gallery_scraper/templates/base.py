"""Base class for listing layout templates.

A template knows how one page layout lays out its rows and how to read
a `SummaryRecord` out of a single row. Templates never raise for a bad
row: `parse_item` returns None and the reason is reported through the
issues list.
"""
import logging
from typing import List, Optional, Tuple

from bs4 import Tag

from ..models import FAV_LOCAL_ONLY, FAV_NONE, RecordBuilder, SummaryRecord
from ..ports import ListingContext
from ..utils.site_mapping import detect_language
from ..utils.sprite_decoder import parse_favorite_slot
from .utils import attr, element_children

logger = logging.getLogger(__name__)


class ListingTemplate:
    name = 'listing'

    def __init__(self, context: ListingContext):
        self.context = context

    def rows(self, grid: Tag) -> List[Tag]:
        """Row elements of the item grid that may hold a gallery."""
        raise NotImplementedError()

    def parse_item(self, row: Tag) -> Tuple[Optional[SummaryRecord], List[str]]:
        """Return ``(record, issues)``; record is None when the row is skipped."""
        raise NotImplementedError()

    def parse_items(self, grid: Tag) -> Tuple[List[SummaryRecord], List[str]]:
        records: List[SummaryRecord] = []
        issues: List[str] = []
        for index, row in enumerate(self.rows(grid)):
            record, row_issues = self.parse_item(row)
            issues.extend(f'{self.name} row {index}: {issue}' for issue in row_issues)
            if record is None:
                logger.warning('%s: skipped row %d (%s)', self.name, index, ', '.join(row_issues))
            else:
                records.append(record)
        return records, issues

    # Shared steps

    def _favorite(self, builder: RecordBuilder, badges: Optional[Tag]) -> None:
        """Decode the first favorite badge under `badges`, else ask local favorites."""
        slot = FAV_NONE
        for element in element_children(badges):
            if element.get('class') != ['i']:
                continue
            decoded = parse_favorite_slot(attr(element, 'style'))
            if decoded is not None:
                slot = decoded
                builder.put('favorite_name', attr(element, 'title'))
                break
        if slot == FAV_NONE:
            gid = builder.get('gid')
            slot = FAV_LOCAL_ONLY if self.context.favorites.contains(gid) else FAV_NONE
        builder.put('favorite_slot', slot)

    def _finish(self, builder: RecordBuilder) -> SummaryRecord:
        gid = builder.get('gid')
        builder.put('downloaded', self.context.downloads.contains(gid))
        language = detect_language(builder.get('title'))
        if language:
            builder.put('simple_language', language)
        return builder.build()
