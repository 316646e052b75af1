# ABOUTME: Disambiguation policy for storefront results that share the query's title.
# ABOUTME: Picks one book using author comparison, or reports the lookup as uncertain.

import logging

from ireaderlink.matching.normalizer import authors_match
from ireaderlink.matching.types import (
    CandidateEntry,
    Found,
    MatchOutcome,
    NotFound,
    Query,
    Uncertain,
)
from ireaderlink.storefront import search_page_url

logger = logging.getLogger(__name__)


def _found(candidate: CandidateEntry) -> Found:
    return Found(url=candidate.url, title=candidate.name)


def resolve_match(name_matches: list[CandidateEntry], query: Query) -> MatchOutcome:
    """Decide the outcome from the candidates whose title matched the query.

    Rules, in order:
    1. No name matches: NotFound.
    2. One name match: Found, unless both sides carry an author and the
       authors disagree, which is Uncertain. A missing author on either side
       never disqualifies the match.
    3. Several name matches and a query author: Found if exactly one
       candidate's author matches.
    4. Everything else: Uncertain, pointing at the storefront search page for
       the original title.
    """
    if not name_matches:
        return NotFound()

    if len(name_matches) == 1:
        candidate = name_matches[0]
        if (
            query.author is None
            or candidate.author is None
            or authors_match(candidate.author, query.author)
        ):
            return _found(candidate)
        logger.info(
            "Single title match for %r has author %r, expected %r",
            query.title,
            candidate.author,
            query.author,
        )
    elif query.author is not None:
        survivors = [c for c in name_matches if authors_match(c.author, query.author)]
        if len(survivors) == 1:
            return _found(survivors[0])
        logger.info(
            "%d title matches for %r, %d with author %r",
            len(name_matches),
            query.title,
            len(survivors),
            query.author,
        )

    return Uncertain(search_url=search_page_url(query.title))
