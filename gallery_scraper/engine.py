"""Listing page parser.

Reads the page count, then tries each item layout in
`ALL_TEMPLATES` order until one yields records. The parser holds only
its collaborators, so one instance can be shared between worker
threads.
"""
from typing import List, Optional, Dict, Any
from pathlib import Path
import logging

from .exceptions import ParseError
from .models import PageListResult, SummaryRecord
from .ports import (
    CategoryMapper,
    DetailLinkParser,
    DownloadRegistry,
    InMemoryDownloadRegistry,
    InMemoryFavoritesStore,
    ListingContext,
    LocalFavoritesStore,
    ThumbnailUrlNormalizer,
)
from .templates.all_templates import ALL_TEMPLATES
from .templates.pagination_count import PaginationCountTemplate
from .templates.utils import find_first_by_class, first_child, make_soup
from .utils import site_mapping

logger = logging.getLogger(__name__)


class ListingParser:
    """Parse gallery listing pages into `PageListResult` values.

    Example usage:
        parser = ListingParser(favorites=InMemoryFavoritesStore([123]))
        result = parser.parse(html)
    """

    def __init__(
        self,
        favorites: Optional[LocalFavoritesStore] = None,
        downloads: Optional[DownloadRegistry] = None,
        category_mapper: Optional[CategoryMapper] = None,
        link_parser: Optional[DetailLinkParser] = None,
        thumb_normalizer: Optional[ThumbnailUrlNormalizer] = None,
    ):
        self.context = ListingContext(
            link_parser=link_parser or site_mapping.parse_detail_url,
            category_mapper=category_mapper or site_mapping.get_category,
            thumb_normalizer=thumb_normalizer or site_mapping.ThumbnailUrlNormalizer(),
            favorites=favorites if favorites is not None else InMemoryFavoritesStore(),
            downloads=downloads if downloads is not None else InMemoryDownloadRegistry(),
        )
        self.pagination = PaginationCountTemplate()
        self.templates = [cls(self.context) for cls in ALL_TEMPLATES]

    def parse(self, body: str) -> PageListResult:
        soup = make_soup(body)

        pages = self.pagination.get_page_count(soup, body)
        if pages is None:
            return PageListResult(page_count=0, records=())

        # the grid needs at least one child element (the header row or a tile)
        grid = find_first_by_class(soup, 'itg')
        if grid is None or first_child(grid) is None:
            raise ParseError("Can't parse gallery list", body)

        records: List[SummaryRecord] = []
        diagnostics: List[str] = []
        for tpl in self.templates:
            records, issues = tpl.parse_items(grid)
            diagnostics.extend(issues)
            if records:
                logger.debug('Parsed %d galleries with %s', len(records), tpl.name)
                break
            logger.info('No galleries found with %s', tpl.name)

        for issue in diagnostics:
            logger.debug('Degraded field: %s', issue)

        return PageListResult(
            page_count=pages,
            records=tuple(records),
            diagnostics=tuple(diagnostics),
        )

    def parse_file(self, file_path: Path) -> PageListResult:
        html = file_path.read_text(encoding='utf-8', errors='ignore')
        return self.parse(html)

    def parse_samples(self, samples_dir: Path) -> List[Dict[str, Any]]:
        """Parse every saved ``.html`` page in `samples_dir`.

        A page that fails structurally is reported with its error instead
        of aborting the batch.
        """
        out = []
        for p in sorted(samples_dir.glob('*.html')):
            entry: Dict[str, Any] = {'sample': p.name}
            try:
                entry['result'] = self.parse_file(p)
            except ParseError as e:
                logger.warning('Failed to parse sample %s: %s', p.name, e)
                entry['error'] = str(e)
            out.append(entry)
        return out


def parse(body: str, **ports) -> PageListResult:
    """Parse one listing page with a throwaway `ListingParser`."""
    return ListingParser(**ports).parse(body)
