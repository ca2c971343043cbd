class CrawlError(Exception):
    """Base class for errors that end a crawl."""


class MalformedUrlError(CrawlError, ValueError):
    def __init__(self, url: str, reason: str = "missing scheme or host"):
        self.url = url
        super().__init__(f"Malformed URL {url!r}: {reason}")


class TransportError(CrawlError):
    """A page fetch failed at the network level. Recoverable unless break_on_error is set."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class ListingError(CrawlError):
    """The repository tree listing could not be retrieved. Always fatal."""

    def __init__(self, owner: str, repo: str, ref: str, reason: str):
        self.owner = owner
        self.repo = repo
        self.ref = ref
        self.reason = reason
        super().__init__(f"Failed to list {owner}/{repo}@{ref}: {reason}")


class ExtractionError(CrawlError):
    def __init__(self, url: str, selector: str):
        self.url = url
        self.selector = selector
        super().__init__(f"Selector {selector!r} matched nothing on {url}")


class MalformedReferenceError(ValueError):
    # Raised for unparseable anchor hrefs; the worker drops these links.
    def __init__(self, href: str):
        self.href = href
        super().__init__(f"Unparseable link reference {href!r}")
