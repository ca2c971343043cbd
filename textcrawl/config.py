from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


DEFAULT_USER_AGENT = "textcrawl/1.0 (+https://example.com; contact: crawler@example.com)"


@dataclass(frozen=True)
class CrawlConfig:
    extract_selector: Optional[str] = None
    max_connections: int = 5
    exclude: Tuple[str, ...] = ()
    break_on_error: bool = True
    log_enabled: bool = True
    # Passed through as keyword arguments to the transport's request call.
    fetch_options: Dict[str, Any] = field(default_factory=dict)
    github_token: Optional[str] = None
    metrics_interval: float = 0.0

    def __post_init__(self) -> None:
        if self.max_connections < 1:
            raise ValueError(f"max_connections must be >= 1, got {self.max_connections}")
        if not isinstance(self.exclude, tuple):
            object.__setattr__(self, "exclude", tuple(self.exclude))
