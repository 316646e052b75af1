# ABOUTME: Core data structures for storefront lookups.
# ABOUTME: Query is the lookup input; Found/NotFound/Uncertain form the MatchOutcome union.

from dataclasses import dataclass


@dataclass(frozen=True)
class Query:
    """A (title, optional author) pair to resolve against the storefront.

    The title is required and is kept exactly as the source page gave it
    (trimmed), since it doubles as the cache key. The author is only used to
    disambiguate between candidates that share a title.
    """

    title: str
    author: str | None = None

    def __post_init__(self) -> None:
        title = self.title.strip() if self.title else ""
        if not title:
            raise ValueError("Query title must be a non-empty string")
        object.__setattr__(self, "title", title)

        author = self.author.strip() if self.author else ""
        object.__setattr__(self, "author", author or None)


@dataclass(frozen=True)
class CandidateEntry:
    """One search result parsed out of the storefront response."""

    name: str
    author: str | None
    url: str


@dataclass(frozen=True)
class Found:
    """The storefront carries the book at `url`."""

    url: str
    title: str


@dataclass(frozen=True)
class NotFound:
    """The storefront has no book with a matching title."""


@dataclass(frozen=True)
class Uncertain:
    """Several books could match; the user should search by hand."""

    search_url: str


MatchOutcome = Found | NotFound | Uncertain
