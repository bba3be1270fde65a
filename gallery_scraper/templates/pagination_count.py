"""Total page count from the ``.ptt`` pagination table.

The table is a single row: ``<`` then one cell per page link then
``>``. The second-to-last cell therefore holds the last page number.
"""
from __future__ import annotations

import logging
import re
from typing import Optional, Pattern

from bs4 import BeautifulSoup

from ..exceptions import ParseError
from .utils import element_children, element_text, find_first_by_class, first_child

logger = logging.getLogger(__name__)

# Literal text the site renders instead of a result grid
NO_HITS_MARKER = 'No hits found</p>'

_PAGE_NUMBER_RE: Pattern[str] = re.compile(r'[+-]?\d+')
_INT_MAX = 2 ** 31 - 1


class PaginationCountTemplate:
    name = 'pagination_count'

    def _read_pages(self, soup: BeautifulSoup) -> Optional[int]:
        ptt = find_first_by_class(soup, 'ptt')
        if ptt is None:
            return None
        row = ptt.find('tr')
        if row is None:
            row = first_child(ptt)
        cells = element_children(row)
        if len(cells) < 2:
            return None
        text = element_text(cells[-2]) or ''
        if not _PAGE_NUMBER_RE.fullmatch(text):
            return None
        pages = int(text)
        if not -_INT_MAX - 1 <= pages <= _INT_MAX:
            return None
        return pages

    def get_page_count(self, soup: BeautifulSoup, body: str) -> Optional[int]:
        """Return the page count, or None when the page reports no hits.

        The no-hits marker wins over anything else on the page. Raises
        ParseError when there is neither the marker nor a readable
        pagination control.
        """
        if NO_HITS_MARKER in body:
            logger.info('Listing reports no hits')
            return None
        pages = self._read_pages(soup)
        if pages is None:
            raise ParseError("Can't parse gallery list pages", body)
        return pages
