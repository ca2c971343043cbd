import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterator, List, Optional
from urllib.parse import urljoin

from .config import CrawlConfig
from .errors import TransportError
from .frontier import Frontier
from .markdown import MarkdownRenderer
from .metrics import Metrics, StatsLogger
from .modes import CrawlMode, select_strategy
from .net import HttpClient
from .parsing import UrlTools
from .types import HttpClientProtocol, Page, RepositoryClientProtocol, WorkResult


logger = logging.getLogger(__name__)


class Crawler:
    """Batch-synchronous crawl from one start URL.

    The frontier is consumed in slices of ``max_connections`` paths. Each slice is
    fetched concurrently and fully settled before any of its pages are yielded or
    its links appended, so the frontier is only ever touched by the thread driving
    :meth:`pages`.
    """

    def __init__(
        self,
        start_url: str,
        config: Optional[CrawlConfig] = None,
        http_client: Optional[HttpClientProtocol] = None,
        repo_client: Optional[RepositoryClientProtocol] = None,
        renderer: Optional[MarkdownRenderer] = None,
    ):
        self.config = config or CrawlConfig()
        self.start_url = start_url
        self.base_url = UrlTools.normalize_start(start_url)
        self.http = http_client or HttpClient(max_connections=self.config.max_connections)
        self.strategy = select_strategy(
            start_url, self.base_url, self.config, repo_client=repo_client, renderer=renderer
        )
        self.metrics = Metrics()
        self.frontier: Optional[Frontier] = None

    @property
    def mode(self) -> CrawlMode:
        return self.strategy.mode

    def _crawl_page(self, path: str) -> WorkResult:
        location = urljoin(self.base_url, path)
        body = ""
        t0 = time.perf_counter()
        try:
            response = self.http.fetch(location, self.config.fetch_options)
        except TransportError as exc:
            self.metrics.record_fetch(False, 0, (time.perf_counter() - t0) * 1000.0)
            if self.config.break_on_error:
                raise
            if self.config.log_enabled:
                logger.error("Fetch failed for %s: %s", location, exc.reason)
        else:
            self.metrics.record_fetch(True, response.size_bytes, (time.perf_counter() - t0) * 1000.0)
            body = response.text
            if self.config.log_enabled:
                logger.info("Crawled %s", location)

        if not body:
            return WorkResult(path=path, text="")
        text, links = self.strategy.extract(location, body)
        return WorkResult(path=path, text=text, links=links)

    def _run_batch(self, executor: ThreadPoolExecutor, batch: List[str]) -> List[WorkResult]:
        futures = [executor.submit(self._crawl_page, path) for path in batch]
        wait(futures)
        return [f.result() for f in futures]

    def pages(self) -> Iterator[Page]:
        self.frontier = Frontier(self.strategy.seed_paths())
        stats_thread: Optional[StatsLogger] = None
        if self.config.log_enabled and self.config.metrics_interval > 0:
            stats_thread = StatsLogger(self.metrics, self.config.metrics_interval, logger.info)
            stats_thread.start()

        cursor = 0
        try:
            with ThreadPoolExecutor(
                max_workers=self.config.max_connections, thread_name_prefix="textcrawl"
            ) as executor:
                while cursor < len(self.frontier):
                    batch = self.frontier.slice(cursor, self.config.max_connections)
                    for result in self._run_batch(executor, batch):
                        if result.text:
                            self.metrics.record_page()
                            yield Page(path=urljoin(self.base_url, result.path), text=result.text)
                        for link in result.links:
                            self.frontier.add(link)
                    cursor += len(batch)
        finally:
            if stats_thread:
                stats_thread.stop()

        if self.config.log_enabled:
            logger.info("Crawl completed")


def crawl_website(
    start_url: str,
    config: Optional[CrawlConfig] = None,
    *,
    http_client: Optional[HttpClientProtocol] = None,
    repo_client: Optional[RepositoryClientProtocol] = None,
    renderer: Optional[MarkdownRenderer] = None,
) -> Iterator[Page]:
    """Lazily crawl ``start_url`` and yield a :class:`Page` per non-empty document.

    Errors that end the crawl (see :mod:`textcrawl.errors`) are raised from the
    iterator; pages already yielded stay delivered.
    """
    crawler = Crawler(
        start_url, config, http_client=http_client, repo_client=repo_client, renderer=renderer
    )
    return crawler.pages()
