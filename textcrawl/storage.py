import json
from pathlib import Path
from typing import Iterable

from .types import Page


class JsonlWriter:
    """Append pages to a JSON Lines file, one object per page."""

    def __init__(self, output_path: str, append: bool = False) -> None:
        self.output_path = output_path
        out_path = Path(self.output_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = out_path.open("a" if append else "w", encoding="utf-8")
        self.written = 0

    def write(self, page: Page) -> None:
        self._fh.write(json.dumps(page.to_record(), ensure_ascii=False) + "\n")
        # flush per page so readers can follow the file while the crawl runs
        self._fh.flush()
        self.written += 1

    def write_all(self, pages: Iterable[Page]) -> int:
        for page in pages:
            self.write(page)
        return self.written

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()

    def __enter__(self) -> "JsonlWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
