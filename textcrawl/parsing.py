import re
from typing import Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, quote, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from .errors import ExtractionError, MalformedReferenceError, MalformedUrlError
from .markdown import MarkdownRenderer


_EXTENSION_RE = re.compile(r"\.[^.]+$")
_INDEX_DOCUMENT_RE = re.compile(r"/index\.(html|htm)$")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_PATH_SAFE = "/%:@!$&'()*+,;=~"


class UrlTools:
    @staticmethod
    def canonical_netloc(parsed: SplitResult) -> str:
        """Lowercase the host and drop the scheme's default port.

        Raises ValueError for an out-of-range or non-numeric port.
        """
        host = parsed.hostname or ""
        if ":" in host:
            host = f"[{host}]"
        port = parsed.port
        if port is not None and port != _DEFAULT_PORTS.get(parsed.scheme.lower()):
            host = f"{host}:{port}"
        userinfo, sep, _ = parsed.netloc.rpartition("@")
        return f"{userinfo}{sep}{host}"

    @staticmethod
    def canonical_path(path: str) -> str:
        return quote(path or "/", safe=_PATH_SAFE)

    @staticmethod
    def normalize_start(url: str) -> str:
        """Return the directory URL of ``url`` with query and fragment removed.

        ``https://a.com/b/c?x=1#y`` becomes ``https://a.com/b/``. Host case, default
        ports and path escaping are canonicalized the same way as discovered links,
        since the result is both the base for relative paths and the scope prefix.
        """
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.netloc:
            raise MalformedUrlError(url)
        try:
            netloc = UrlTools.canonical_netloc(parsed)
        except ValueError as exc:
            raise MalformedUrlError(url, str(exc)) from exc
        path = UrlTools.canonical_path(parsed.path)
        path = path[: path.rfind("/") + 1] or "/"
        return urlunsplit((parsed.scheme.lower(), netloc, path, "", ""))

    @staticmethod
    def resolve_link(location: str, href: str) -> Tuple[str, str]:
        """Resolve ``href`` against ``location``; return (absolute URL, path)."""
        try:
            parsed = urlsplit(urljoin(location, href.strip()))
            if not parsed.scheme or not parsed.netloc:
                raise MalformedReferenceError(href)
            netloc = UrlTools.canonical_netloc(parsed)
        except MalformedReferenceError:
            raise
        except ValueError as exc:
            raise MalformedReferenceError(href) from exc
        path = UrlTools.canonical_path(parsed.path)
        absolute = urlunsplit((parsed.scheme.lower(), netloc, path, parsed.query, parsed.fragment))
        return absolute, path

    @staticmethod
    def should_exclude(link: str, exclude: Iterable[str]) -> bool:
        if "#" in link:
            return True
        name = link[:-1] if link.endswith("/") else link
        name = name.split("/")[-1].lower()
        for exclude_name in exclude:
            exclude_name = exclude_name.lower()
            if _EXTENSION_RE.search(exclude_name):
                matched = exclude_name == name
            else:
                matched = exclude_name == _EXTENSION_RE.sub("", name)
            if matched:
                return True
        return False

    @staticmethod
    def strip_index_document(path: str) -> str:
        return _INDEX_DOCUMENT_RE.sub("/", path)

    @staticmethod
    def links_match(a: str, b: str) -> bool:
        """True when two frontier paths name the same document.

        ``/docs/`` and ``/docs/index.html`` (or ``index.htm``) are equivalent.
        """
        strip = UrlTools.strip_index_document
        return a == b or a == strip(b) or strip(a) == b


class Extractor:
    def __init__(
        self,
        base_url: str,
        exclude: Iterable[str] = (),
        extract_selector: Optional[str] = None,
        renderer: Optional[MarkdownRenderer] = None,
    ):
        self.base_url = base_url
        self.exclude = tuple(exclude)
        self.extract_selector = extract_selector
        self.renderer = renderer or MarkdownRenderer()

    def links(self, location: str, soup: BeautifulSoup) -> Tuple[str, ...]:
        links: List[str] = []
        for a in soup.find_all("a", href=True):
            href = a["href"]
            if not href or href.startswith("#"):
                continue
            try:
                absolute, path = UrlTools.resolve_link(location, href)
            except MalformedReferenceError:
                continue
            if not absolute.startswith(self.base_url):
                continue
            if UrlTools.should_exclude(path, self.exclude):
                continue
            links.append(path)
        return tuple(dict.fromkeys(links))

    def text(self, location: str, soup: BeautifulSoup) -> str:
        if not self.extract_selector:
            return self.renderer.render_tree(soup)
        node = soup.select_one(self.extract_selector)
        if node is None:
            raise ExtractionError(location, self.extract_selector)
        return self.renderer.render_tree(node, inner=True)

    def extract(self, location: str, html: str) -> Tuple[str, Tuple[str, ...]]:
        soup = BeautifulSoup(html, "html.parser")
        # links first: rendering decomposes removed elements in place
        links = self.links(location, soup)
        return self.text(location, soup), links
