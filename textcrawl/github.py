import json
import logging
from typing import List, Optional

import urllib3
from urllib3 import exceptions as urllib3_exc

from .config import DEFAULT_USER_AGENT
from .errors import ListingError
from .types import TreeEntry


logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GitHubClient:
    """Minimal client for the GitHub git-trees endpoint."""

    def __init__(
        self,
        token: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        request_timeout: float = 30.0,
        api_url: str = GITHUB_API_URL,
        pool: Optional[urllib3.PoolManager] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = urllib3.Timeout(connect=5.0, read=request_timeout)
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self.http = pool or urllib3.PoolManager(headers=self.headers)

    def list_tree(self, owner: str, repo: str, ref: str, recursive: bool = True) -> List[TreeEntry]:
        url = f"{self.api_url}/repos/{owner}/{repo}/git/trees/{ref}"
        fields = {"recursive": "true"} if recursive else None
        try:
            response = self.http.request(
                "GET",
                url,
                fields=fields,
                headers=self.headers,
                timeout=self.timeout,
                preload_content=True,
            )
        except urllib3_exc.HTTPError as exc:
            raise ListingError(owner, repo, ref, str(exc)) from exc
        if response.status >= 400:
            raise ListingError(owner, repo, ref, f"HTTP {response.status}")
        try:
            payload = json.loads((response.data or b"").decode("utf-8"))
        except ValueError as exc:
            raise ListingError(owner, repo, ref, f"invalid JSON response: {exc}") from exc
        if payload.get("truncated"):
            logger.warning("Tree listing for %s/%s@%s was truncated by the API", owner, repo, ref)
        return [
            TreeEntry(path=item.get("path", ""), type=item.get("type", ""))
            for item in payload.get("tree", [])
        ]
