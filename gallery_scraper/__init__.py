"""gallery_scraper package init.

This module configures a small warnings filter to silence a known
DeprecationWarning emitted by BeautifulSoup's lxml builder on some
versions of lxml. Listing pages are always parsed with `lxml`, so the
warning is noise for callers.
"""
import warnings

# Suppress lxml HTMLParser 'strip_cdata' deprecation noise coming from
# BeautifulSoup's lxml builder internals. The message text can vary
# between versions, so match substring with a regex.
warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    message=r".*strip_cdata.*",
)

from .exceptions import ParseError  # noqa: E402
from .models import Category, PageListResult, SummaryRecord  # noqa: E402
from .engine import ListingParser, parse  # noqa: E402

__all__ = [
    "Category",
    "ListingParser",
    "PageListResult",
    "ParseError",
    "SummaryRecord",
    "parse",
]
