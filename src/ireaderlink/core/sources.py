# ABOUTME: Reads lookup queries out of saved Douban Books pages.
# ABOUTME: Supports wishlist/collection list pages and single subject detail pages.

import enum
import logging

from bs4 import BeautifulSoup

from ireaderlink.matching.normalizer import strip_subtitle
from ireaderlink.matching.types import Query

logger = logging.getLogger(__name__)

_AUTHOR_LABEL = "作者"


class PageKind(enum.Enum):
    LIST = "list"
    DETAIL = "detail"


def detect_page_kind(url: str) -> PageKind | None:
    """Classify a Douban Books URL as a subject page, a wishlist page, or neither."""
    if "/subject/" in url:
        return PageKind.DETAIL
    if "/wish" in url or "status=wish" in url:
        return PageKind.LIST
    return None


def queries_from_list_page(html: str) -> list[Query]:
    """Extract one query per `li.subject-item` on a list page.

    Titles lose their subtitle. The author is the first " / " separated
    field of the publication line, when there is one.
    """
    soup = BeautifulSoup(html, "html.parser")
    queries: list[Query] = []
    for item in soup.select("li.subject-item"):
        title_link = item.select_one(".info h2 a")
        if title_link is None:
            continue
        title = strip_subtitle(title_link.get_text())
        if not title:
            continue

        author = None
        pub = item.select_one(".info .pub")
        if pub is not None:
            author = pub.get_text().split(" / ", 1)[0].strip() or None

        queries.append(Query(title=title, author=author))

    logger.debug("Found %d books on list page", len(queries))
    return queries


def query_from_detail_page(html: str) -> Query | None:
    """Extract the query for a subject detail page, or None if there is no title."""
    soup = BeautifulSoup(html, "html.parser")
    title_element = soup.select_one('[property="v:itemreviewed"]')
    if title_element is None:
        return None
    title = title_element.get_text().strip()
    if not title:
        return None

    author = None
    info = soup.select_one("#info")
    if info is not None:
        for label in info.select("span.pl"):
            if _AUTHOR_LABEL in label.get_text():
                author_link = label.find_next("a")
                if author_link is not None:
                    author = author_link.get_text().strip() or None
                break

    return Query(title=title, author=author)
