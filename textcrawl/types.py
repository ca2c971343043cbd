from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple


@dataclass(frozen=True)
class FetchResult:
    status: int
    content_type: str
    text: str
    size_bytes: int


@dataclass(frozen=True)
class Page:
    path: str
    text: str

    def to_record(self) -> Dict[str, str]:
        return {"path": self.path, "text": self.text}


@dataclass(frozen=True)
class WorkResult:
    path: str
    text: str
    links: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TreeEntry:
    path: str
    type: str


class HttpClientProtocol(Protocol):
    def fetch(self, url: str, options: Optional[Mapping[str, Any]] = None) -> FetchResult: ...


class RepositoryClientProtocol(Protocol):
    def list_tree(self, owner: str, repo: str, ref: str, recursive: bool = True) -> List[TreeEntry]: ...
