"""Aggregator for the item layout templates.

Provides a single place that lists the layouts the engine tries, in
order, so we can import one module to get the full set.
"""
from .normal_listing import NormalListing
from .thumbnail_listing import ThumbnailListing


# Detection order: the table layout first, the thumbnail grid as fallback
ALL_TEMPLATES = [
    NormalListing,
    ThumbnailListing,
]

__all__ = ["ALL_TEMPLATES"]
