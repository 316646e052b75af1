# ABOUTME: Matching package: normalization, result parsing, and disambiguation.
# ABOUTME: Exports the lookup types and the functions that turn a response into an outcome.

from ireaderlink.matching.normalizer import (
    authors_match,
    normalize_author,
    normalize_candidate_title,
    normalize_title,
    strip_subtitle,
)
from ireaderlink.matching.parser import parse_search_result
from ireaderlink.matching.resolver import resolve_match
from ireaderlink.matching.types import (
    CandidateEntry,
    Found,
    MatchOutcome,
    NotFound,
    Query,
    Uncertain,
)

__all__ = [
    "CandidateEntry",
    "Found",
    "MatchOutcome",
    "NotFound",
    "Query",
    "Uncertain",
    "authors_match",
    "normalize_author",
    "normalize_candidate_title",
    "normalize_title",
    "parse_search_result",
    "resolve_match",
    "strip_subtitle",
]
