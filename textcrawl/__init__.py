from .config import CrawlConfig
from .engine import Crawler, crawl_website
from .errors import (
    CrawlError,
    ExtractionError,
    ListingError,
    MalformedReferenceError,
    MalformedUrlError,
    TransportError,
)
from .modes import CrawlMode
from .types import Page

__all__ = [
    "CrawlConfig",
    "CrawlError",
    "CrawlMode",
    "Crawler",
    "ExtractionError",
    "ListingError",
    "MalformedReferenceError",
    "MalformedUrlError",
    "Page",
    "TransportError",
    "crawl_website",
]
