from typing import Iterable

import html2text
from bs4 import BeautifulSoup, Tag


class MarkdownRenderer:
    """HTML to markdown conversion, configured once and shared by all workers.

    html2text converters keep parse state, so each render call builds a fresh one
    from the stored options.
    """

    def __init__(self, remove: Iterable[str] = ("script",), body_width: int = 0):
        self.remove = tuple(remove)
        self.body_width = body_width

    def _converter(self) -> html2text.HTML2Text:
        h = html2text.HTML2Text()
        h.body_width = self.body_width
        h.ignore_links = False
        h.ignore_images = False
        h.unicode_snob = True
        return h

    def render_tree(self, node: Tag, inner: bool = False) -> str:
        """Render an already parsed tree; ``inner`` renders only its children.

        Removed elements are decomposed in place, so callers finish reading the
        tree (links etc.) before rendering it.
        """
        for tag in node.find_all(list(self.remove)):
            tag.decompose()
        html = node.decode_contents() if inner else str(node)
        return self._converter().handle(html).strip()

    def render(self, html: str) -> str:
        if not html:
            return ""
        return self.render_tree(BeautifulSoup(html, "html.parser"))
