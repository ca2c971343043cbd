from typing import Iterable, Iterator, List, Set

from .parsing import UrlTools


class Frontier:
    """Append-only ordered list of paths; the crawl's dedup matcher.

    ``link in frontier`` is true exactly when ``UrlTools.links_match(entry, link)``
    holds for some entry. It is answered from two sets instead of scanning: the
    raw paths, and the directory form of every entry that ends in an index document.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._paths: List[str] = []
        self._raw: Set[str] = set()
        self._stripped: Set[str] = set()
        for path in paths:
            self.add(path)

    def __contains__(self, link: object) -> bool:
        if not isinstance(link, str):
            return False
        if link in self._raw or link in self._stripped:
            return True
        return UrlTools.strip_index_document(link) in self._raw

    def add(self, link: str) -> bool:
        if link in self:
            return False
        self._paths.append(link)
        self._raw.add(link)
        stripped = UrlTools.strip_index_document(link)
        if stripped != link:
            self._stripped.add(stripped)
        return True

    def slice(self, start: int, size: int) -> List[str]:
        return self._paths[start:start + size]

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))
