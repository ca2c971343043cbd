#!/usr/bin/env python3
import argparse
import logging
import os
import sys

from textcrawl.config import CrawlConfig, DEFAULT_USER_AGENT
from textcrawl.engine import Crawler
from textcrawl.errors import CrawlError
from textcrawl.github import GitHubClient
from textcrawl.net import HttpClient
from textcrawl.prometheus_exporter import PrometheusExporter
from textcrawl.storage import JsonlWriter


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a site or a GitHub repository tree and write its pages as markdown to JSONL."
    )
    parser.add_argument("start", help="Start URL, e.g. https://example.com/docs/ or https://github.com/o/r/tree/main/")
    parser.add_argument("--extract", dest="extract_selector", default=None, help="CSS selector to extract content from.")
    parser.add_argument("--max-connections", type=int, default=5, help="Pages fetched concurrently per batch.")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="NAME",
        help="Path name to skip, e.g. license or changelog.md. Repeat for several names.",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Log failed fetches and keep crawling instead of stopping.",
    )
    parser.add_argument("--quiet", action="store_true", help="Disable crawl progress logging.")
    parser.add_argument("--timeout", type=float, default=15.0, help="HTTP read timeout in seconds.")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send.")
    parser.add_argument("--out", dest="output_path", default="pages.jsonl", help="Path to JSONL output file.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    parser.add_argument("--metrics-interval", type=float, default=10.0, help="Seconds between perf logs (0 to disable).")
    parser.add_argument("--prometheus-port", type=int, default=0, help="Port for Prometheus metrics endpoint (0 to disable).")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )

    config = CrawlConfig(
        extract_selector=args.extract_selector,
        max_connections=max(1, args.max_connections),
        exclude=tuple(args.exclude),
        break_on_error=not args.continue_on_error,
        log_enabled=not args.quiet,
        github_token=os.environ.get("GITHUB_TOKEN"),
        metrics_interval=max(0.0, args.metrics_interval),
    )
    http = HttpClient(
        user_agent=args.user_agent,
        request_timeout=max(1.0, args.timeout),
        max_connections=config.max_connections,
    )
    repo_client = GitHubClient(token=config.github_token, user_agent=args.user_agent)

    try:
        crawler = Crawler(args.start, config, http_client=http, repo_client=repo_client)
    except ValueError as exc:
        logging.error("%s", exc)
        return 2

    exporter = None
    if args.prometheus_port:
        exporter = PrometheusExporter(crawler.metrics, port=args.prometheus_port)
        exporter.start()

    try:
        with JsonlWriter(args.output_path) as writer:
            written = writer.write_all(crawler.pages())
    except CrawlError as exc:
        logging.error("Crawl aborted: %s", exc)
        return 1
    finally:
        if exporter:
            exporter.stop()

    logging.info("Finished. Pages written: %d. Output: %s", written, args.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
