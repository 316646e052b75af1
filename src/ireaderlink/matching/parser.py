# ABOUTME: Parsing functions for iReader search API responses.
# ABOUTME: Unwraps the JSON envelope, extracts detail-page candidates, and matches titles.

import json
import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ireaderlink.matching.normalizer import normalize_candidate_title, normalize_title
from ireaderlink.matching.resolver import resolve_match
from ireaderlink.matching.types import CandidateEntry, MatchOutcome, NotFound, Query
from ireaderlink.storefront import DETAIL_PATH_MARKER, STOREFRONT_BASE

logger = logging.getLogger(__name__)

_DETAIL_LINK_SELECTOR = f'a[href*="{DETAIL_PATH_MARKER}"]'


def extract_markup(payload: str) -> str:
    """Pull the HTML fragment out of a search API response.

    The API answers with {"html": "<fragment>"}. Anything else (invalid JSON,
    a non-object, a missing or non-string html field) is treated as raw
    markup so the lookup can still find links in it.
    """
    try:
        data = json.loads(payload)
    except ValueError:
        logger.warning("Search response is not JSON, parsing it as raw HTML")
        return payload

    html = data.get("html") if isinstance(data, dict) else None
    if not isinstance(html, str):
        logger.warning("Search response has no html field, parsing it as raw HTML")
        return payload
    return html


def _element_text(parent: Tag, selector: str) -> str | None:
    element = parent.select_one(selector)
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None


def extract_candidates(markup: str) -> list[CandidateEntry]:
    """Extract every detail-page link from a search result fragment.

    Links without a `.name` element are skipped; `.author` is optional.
    URLs are resolved from the raw href attribute against the storefront.
    """
    soup = BeautifulSoup(markup, "html.parser")

    candidates: list[CandidateEntry] = []
    for link in soup.select(_DETAIL_LINK_SELECTOR):
        name = _element_text(link, ".name")
        if name is None:
            continue
        href = link.get("href")
        if not isinstance(href, str):
            continue
        candidates.append(
            CandidateEntry(
                name=name,
                author=_element_text(link, ".author"),
                url=urljoin(STOREFRONT_BASE + "/", href),
            )
        )
    return candidates


def find_name_matches(candidates: list[CandidateEntry], query: Query) -> list[CandidateEntry]:
    """Candidates whose normalized name equals the query's normalized title, in order."""
    wanted = normalize_title(query.title)
    return [c for c in candidates if normalize_candidate_title(c.name) == wanted]


def parse_search_result(payload: str, query: Query) -> MatchOutcome:
    """Turn a raw search API response into a MatchOutcome for the query."""
    candidates = extract_candidates(extract_markup(payload))
    if not candidates:
        logger.debug("No detail links in search response for %r", query.title)
        return NotFound()

    name_matches = find_name_matches(candidates, query)
    logger.debug(
        "%r: %d candidates, %d title matches",
        query.title,
        len(candidates),
        len(name_matches),
    )
    return resolve_match(name_matches, query)
