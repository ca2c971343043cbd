from typing import Any, Dict, Mapping, Optional, Tuple

import urllib3
from urllib3.util.retry import Retry
from urllib3 import exceptions as urllib3_exc

from .config import DEFAULT_USER_AGENT
from .errors import TransportError
from .types import FetchResult


class HttpClient:
    """Blocking page transport over a shared urllib3 pool.

    HTTP error statuses are returned like any other response; only network-level
    failures raise TransportError.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        request_timeout: float = 15.0,
        max_connections: int = 5,
        pool: Optional[urllib3.PoolManager] = None,
    ):
        self.user_agent = user_agent
        self.timeout = urllib3.Timeout(connect=5.0, read=request_timeout)
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,text/markdown,text/plain,*/*;q=0.8",
            "Accept-Encoding": "gzip, deflate",
        }
        self.http = pool or urllib3.PoolManager(
            num_pools=max(8, max_connections),
            maxsize=max_connections,
            headers=self.headers,
            retries=Retry(
                total=2,
                backoff_factor=0.3,
                allowed_methods=["GET", "HEAD"],
                raise_on_status=False,
            ),
        )

    def _request_kwargs(self, options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"timeout": self.timeout, "preload_content": True}
        options = dict(options or {})
        headers = dict(self.headers)
        headers.update(options.pop("headers", None) or {})
        kwargs.update(options)
        kwargs["headers"] = headers
        return kwargs

    def _request_bytes(self, url: str, options: Optional[Mapping[str, Any]] = None) -> Tuple[int, str, bytes]:
        try:
            response = self.http.request("GET", url, **self._request_kwargs(options))
        except urllib3_exc.HTTPError as exc:
            raise TransportError(url, str(exc)) from exc
        return response.status, response.headers.get("Content-Type", ""), response.data or b""

    def fetch(self, url: str, options: Optional[Mapping[str, Any]] = None) -> FetchResult:
        status, content_type, body = self._request_bytes(url, options)
        text = body.decode("utf-8", errors="ignore")
        return FetchResult(status=status, content_type=content_type or "", text=text, size_bytes=len(body))
