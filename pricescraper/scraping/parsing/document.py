"""
Selector-based document access used by listing extractors.

Extractors only talk to ``DocumentQuery``; ``SoupDocument`` adapts a
BeautifulSoup tree to it.
"""

from __future__ import annotations

import re
from typing import Protocol

from bs4 import BeautifulSoup, NavigableString, Tag

INVISIBLE_TAGS = ("script", "style", "noscript", "template")
BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
)


class DocumentQuery(Protocol):
    def find_all(self, selector: str) -> list["DocumentQuery"]:
        ...

    def text(self) -> str:
        ...

    def attr(self, name: str) -> str | None:
        ...

    def visible_lines(self) -> list[str]:
        ...


class SoupDocument:
    """
    ``DocumentQuery`` over a BeautifulSoup node.
    """

    def __init__(self, node: BeautifulSoup | Tag) -> None:
        self._node = node

    @classmethod
    def from_html(cls, html: str) -> "SoupDocument":
        return cls(BeautifulSoup(html, "html.parser"))

    def find_all(self, selector: str) -> list[DocumentQuery]:
        return [SoupDocument(match) for match in self._node.select(selector)]

    def text(self) -> str:
        return _clean_text(self._node.get_text(" ", strip=True))

    def attr(self, name: str) -> str | None:
        value = self._node.get(name) if isinstance(self._node, Tag) else None
        if isinstance(value, list):
            value = " ".join(value)
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    def visible_lines(self) -> list[str]:
        """
        Flatten visible text into trimmed, whitespace-collapsed, non-empty lines.

        Inline markup is concatenated, so `US$ <b>180</b>` stays one line;
        block-level elements and `<br>` start new lines.
        """

        soup = BeautifulSoup(str(self._node), "html.parser")
        for hidden in soup.find_all(INVISIBLE_TAGS):
            hidden.decompose()
        for br in soup.find_all("br"):
            br.replace_with(NavigableString("\n"))
        for block in soup.find_all(BLOCK_TAGS):
            block.insert_before(NavigableString("\n"))
            block.insert_after(NavigableString("\n"))
        root = soup.body or soup
        lines = (_clean_text(line) for line in root.get_text().splitlines())
        return [line for line in lines if line]


def _clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()
