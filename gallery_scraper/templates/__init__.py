"""Template package for gallery listing pages.

Item templates read one gallery per row of the ``.itg`` grid; the
pagination template reads the total page count.
"""
from .base import ListingTemplate

# Item layouts
from .normal_listing import NormalListing
from .thumbnail_listing import ThumbnailListing

# Pagination
from .pagination_count import PaginationCountTemplate

# Provide the authoritative template set export
from .all_templates import ALL_TEMPLATES

__all__ = [
    "ListingTemplate",
    # layouts
    "NormalListing",
    "ThumbnailListing",
    # pagination
    "PaginationCountTemplate",
    # aggregator
    "ALL_TEMPLATES",
]
