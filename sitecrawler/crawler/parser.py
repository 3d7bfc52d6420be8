"""
Page extraction: title, visible text and same-site links.
"""

import re
import logging
from typing import Callable, Iterator, List, Optional
from dataclasses import dataclass, field
from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString, PreformattedString

from .normalizer import normalize_url, is_same_site
from ..utils.config import ExtractionConfig


WordPredicate = Callable[[str], bool]

SCRIPT_TAGS = frozenset(['script', 'noscript'])


@dataclass
class ExtractionResult:
    """Title, joined text and outbound links of one page."""
    url: str
    title: str = ''
    texts: str = ''
    links: List[str] = field(default_factory=list)


class PageElement:
    """
    The slice of a parsed element the extractor relies on.

    Wraps a bs4 ``Tag``; any tree exposing a kind test, direct text,
    attribute lookup and child elements would do.
    """

    def __init__(self, tag: Tag):
        self.tag = tag

    def is_kind(self, *names: str) -> bool:
        return self.tag.name in names

    def direct_text(self) -> str:
        # Comments, doctypes and CDATA are PreformattedString subclasses.
        return ''.join(
            str(child) for child in self.tag.children
            if isinstance(child, NavigableString)
            and not isinstance(child, PreformattedString)
        )

    def full_text(self) -> str:
        return self.tag.get_text()

    def attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if isinstance(value, list):
            return ' '.join(value)
        return value

    def children(self) -> Iterator['PageElement']:
        for child in self.tag.children:
            if isinstance(child, Tag):
                yield PageElement(child)


def make_word_predicate(pattern: str) -> WordPredicate:
    """Build an ``is_word_like`` test from a full-match regex."""
    compiled = re.compile(pattern)
    return lambda token: bool(compiled.match(token))


def push_unique(items: List[str], item: str):
    if item not in items:
        items.append(item)


class ContentParser:
    """
    Extracts the title, text fragments and same-site links from HTML.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None,
                 is_word_like: Optional[WordPredicate] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

        self.exclude_patterns = [re.compile(p) for p in self.config.exclude_patterns]
        self.excluded_hrefs = set(self.config.excluded_hrefs)
        self.is_word_like = is_word_like or make_word_predicate(self.config.word_pattern)

    def extract(self, site_root: str, url: str, html_content: str) -> ExtractionResult:
        """
        Walk every element of the page in document order.

        Args:
            site_root: The seed URL; links must start with it to be kept
            url: The URL the page was fetched from
            html_content: Raw HTML content

        Returns:
            ExtractionResult with the title, joined texts and ordered links
        """
        soup = BeautifulSoup(html_content, 'lxml')

        title = ''
        texts: List[str] = []
        links: List[str] = []

        for element in self._walk(PageElement(soup)):
            if element.is_kind('title'):
                title = element.full_text()
            else:
                self._collect_text(element, texts)

            if element.is_kind('a'):
                link = self._resolve_link(site_root, element.attribute('href'))
                if link is not None:
                    push_unique(links, link)

        self.logger.debug(f"Extracted {url}: {len(texts)} text units, {len(links)} links")

        return ExtractionResult(
            url=url,
            title=title,
            texts=self.config.text_separator.join(texts),
            links=links
        )

    def _walk(self, root: PageElement) -> Iterator[PageElement]:
        """Yield descendant elements in document order, pruning script subtrees."""
        stack = [root.children()]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                continue
            if self.config.exclude_scripts and child.is_kind(*SCRIPT_TAGS):
                continue
            yield child
            stack.append(child.children())

    def _collect_text(self, element: PageElement, texts: List[str]):
        text = element.direct_text().strip()
        for pattern in self.exclude_patterns:
            text = pattern.sub('', text)
        if not text:
            return

        if self.config.text_mode == 'paragraphs':
            push_unique(texts, text)
            return

        for word in text.split():
            if self.is_word_like(word):
                push_unique(texts, word)

    def _resolve_link(self, site_root: str, href: Optional[str]) -> Optional[str]:
        """Normalize an href, or return None if it must not be followed."""
        if not href or href in self.excluded_hrefs or href.startswith('mailto'):
            return None

        link = normalize_url(site_root, href)
        if not is_same_site(site_root, link):
            return None
        return link
