import enum
import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from .config import CrawlConfig
from .github import GitHubClient
from .markdown import MarkdownRenderer
from .parsing import Extractor, UrlTools
from .types import RepositoryClientProtocol


logger = logging.getLogger(__name__)

GITHUB_TREE_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+)/tree/([^/]+)")
RAW_CONTENT_URL = "https://raw.githubusercontent.com"
DOCUMENT_EXTENSION = ".md"


class CrawlMode(enum.Enum):
    GENERIC_SITE = "generic-site"
    REPOSITORY_TREE = "repository-tree"


class SiteStrategy:
    """Follow hyperlinks from a single start page."""

    mode = CrawlMode.GENERIC_SITE

    def __init__(self, start_url: str, extractor: Extractor):
        self.start_url = start_url
        self.extractor = extractor

    def seed_paths(self) -> List[str]:
        return [UrlTools.canonical_path(urlsplit(self.start_url).path)]

    def extract(self, location: str, body: str) -> Tuple[str, Tuple[str, ...]]:
        return self.extractor.extract(location, body)


class RepositoryTreeStrategy:
    """Enumerate every markdown document of a repository tree up front."""

    mode = CrawlMode.REPOSITORY_TREE

    def __init__(
        self,
        start_url: str,
        client: RepositoryClientProtocol,
        exclude: Tuple[str, ...] = (),
        log_enabled: bool = True,
    ):
        # owner, repo, "tree", ref, then the optional root subpath
        parts = urlsplit(start_url).path.split("/")
        self.owner, self.repo, self.ref = parts[1], parts[2], parts[4]
        self.root_path = "/".join(parts[5:])
        self.client = client
        self.exclude = exclude
        self.log_enabled = log_enabled

    def _is_document(self, path: str) -> bool:
        return (
            path.lower().endswith(DOCUMENT_EXTENSION)
            and path.startswith(self.root_path)
            and not UrlTools.should_exclude(path, self.exclude)
        )

    def raw_url(self, path: str) -> str:
        return f"{RAW_CONTENT_URL}/{self.owner}/{self.repo}/{self.ref}/{path}"

    def seed_paths(self) -> List[str]:
        entries = self.client.list_tree(self.owner, self.repo, self.ref, recursive=True)
        paths = [self.raw_url(e.path) for e in entries if e.type == "blob" and self._is_document(e.path)]
        if self.log_enabled:
            logger.info("Resolved %d documents from %s/%s@%s", len(paths), self.owner, self.repo, self.ref)
        return paths

    def extract(self, location: str, body: str) -> Tuple[str, Tuple[str, ...]]:
        return body, ()


def select_mode(base_url: str) -> CrawlMode:
    if GITHUB_TREE_RE.match(base_url):
        return CrawlMode.REPOSITORY_TREE
    return CrawlMode.GENERIC_SITE


def select_strategy(
    start_url: str,
    base_url: str,
    config: CrawlConfig,
    repo_client: Optional[RepositoryClientProtocol] = None,
    renderer: Optional[MarkdownRenderer] = None,
):
    mode = select_mode(base_url)
    if mode is CrawlMode.REPOSITORY_TREE:
        client = repo_client or GitHubClient(token=config.github_token)
        return RepositoryTreeStrategy(start_url, client, config.exclude, config.log_enabled)
    extractor = Extractor(base_url, config.exclude, config.extract_selector, renderer)
    return SiteStrategy(start_url, extractor)
