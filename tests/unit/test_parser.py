# ABOUTME: Unit tests for iReader search response parsing.
# ABOUTME: Validates envelope unwrapping, candidate extraction, URL resolution, and outcomes.

import logging
from typing import Any

from ireaderlink.matching.parser import (
    extract_candidates,
    extract_markup,
    find_name_matches,
    parse_search_result,
)
from ireaderlink.matching.types import CandidateEntry, Found, NotFound, Query, Uncertain
from tests.fixtures.ireader_responses import (
    SANTI_URL,
    SEARCH_BADGED_MATCH,
    SEARCH_ESCAPED_SLASHES,
    SEARCH_JSON_WITHOUT_HTML,
    SEARCH_MATCH_WITHOUT_AUTHOR,
    SEARCH_NO_DETAIL_LINKS,
    SEARCH_NO_TITLE_MATCH,
    SEARCH_RAW_HTML,
    SEARCH_SINGLE_MATCH,
    SEARCH_TWO_MATCHES_ONE_AUTHOR,
    SEARCH_TWO_MATCHES_OTHER_AUTHORS,
    book_item,
    search_payload,
)

SANTI = Query(title="三体", author="刘慈欣")


class TestExtractMarkup:
    """Tests for extract_markup."""

    def test_unwraps_html_field(self) -> None:
        """The html field of the JSON envelope is returned."""
        assert extract_markup('{"html": "<p>x</p>"}') == "<p>x</p>"

    def test_unescapes_json_slashes(self) -> None:
        """Escaped slashes in the JSON string come back as plain slashes."""
        assert 'href="/detail/11461467"' in extract_markup(SEARCH_ESCAPED_SLASHES)

    def test_non_json_falls_back_to_raw_markup(self, caplog: Any) -> None:
        """A bare HTML payload is returned unchanged, with a warning."""
        with caplog.at_level(logging.WARNING):
            assert extract_markup(SEARCH_RAW_HTML) == SEARCH_RAW_HTML
        assert any("not JSON" in r.message for r in caplog.records)

    def test_missing_html_field_falls_back_to_raw_markup(self, caplog: Any) -> None:
        """JSON without an html field is treated as raw markup, with a warning."""
        with caplog.at_level(logging.WARNING):
            assert extract_markup(SEARCH_JSON_WITHOUT_HTML) == SEARCH_JSON_WITHOUT_HTML
        assert any("no html field" in r.message for r in caplog.records)

    def test_non_string_html_field_falls_back(self) -> None:
        """An html field that is not a string is not used."""
        payload = '{"html": ["<p>x</p>"]}'
        assert extract_markup(payload) == payload

    def test_json_array_falls_back(self) -> None:
        """A JSON value that is not an object is not unwrapped."""
        assert extract_markup("[1, 2]") == "[1, 2]"


class TestExtractCandidates:
    """Tests for extract_candidates."""

    def test_extracts_name_author_and_absolute_url(self) -> None:
        """Each detail link yields a candidate with an absolute URL."""
        candidates = extract_candidates(extract_markup(SEARCH_SINGLE_MATCH))
        assert candidates[0] == CandidateEntry(name="三体", author="刘慈欣", url=SANTI_URL)
        assert len(candidates) == 2

    def test_preserves_document_order(self) -> None:
        """Candidates come back in the order they appear."""
        candidates = extract_candidates(extract_markup(SEARCH_TWO_MATCHES_ONE_AUTHOR))
        assert [c.author for c in candidates] == ["王五", "刘慈欣"]

    def test_author_is_optional(self) -> None:
        """A result without an author element has author None."""
        candidates = extract_candidates(extract_markup(SEARCH_MATCH_WITHOUT_AUTHOR))
        assert candidates[0].author is None

    def test_skips_links_without_name(self) -> None:
        """Detail links with no .name element are ignored."""
        markup = (
            '<a href="/detail/1"><img src="cover.jpg"></a>'
            '<a href="/detail/2"><span class="name">三体</span></a>'
        )
        candidates = extract_candidates(markup)
        assert [c.url for c in candidates] == ["https://m.zhangyue.com/detail/2"]

    def test_ignores_non_detail_links(self) -> None:
        """Links that do not point at a detail page are not candidates."""
        markup = '<a href="/search?keyWord=x"><span class="name">三体</span></a>'
        assert extract_candidates(markup) == []

    def test_absolute_href_kept(self) -> None:
        """An already absolute href is not rewritten."""
        markup = (
            '<a href="https://m.zhangyue.com/detail/9?a=1"><span class="name">三体</span></a>'
        )
        assert extract_candidates(markup)[0].url == "https://m.zhangyue.com/detail/9?a=1"

    def test_relative_href_resolved_against_storefront(self) -> None:
        """A path-relative href resolves against the storefront root."""
        markup = '<a href="./detail/9"><span class="name">三体</span></a>'
        assert extract_candidates(markup)[0].url == "https://m.zhangyue.com/detail/9"

    def test_name_text_is_trimmed(self) -> None:
        """Whitespace around the display name is removed."""
        markup = '<a href="/detail/9"><span class="name">\n  三体 \n</span></a>'
        assert extract_candidates(markup)[0].name == "三体"


class TestFindNameMatches:
    """Tests for find_name_matches."""

    def test_normalized_titles_compared(self) -> None:
        """Candidate badges and query edition notes do not prevent a match."""
        candidates = [
            CandidateEntry(name="[精品]三体", author=None, url="u1"),
            CandidateEntry(name="三体Ⅱ：黑暗森林", author=None, url="u2"),
        ]
        matches = find_name_matches(candidates, Query(title="三体（全集）"))
        assert [c.url for c in matches] == ["u1"]


class TestParseSearchResult:
    """Tests for parse_search_result end to end over canned payloads."""

    def test_single_match_with_author(self) -> None:
        """One title match by the expected author is Found."""
        outcome = parse_search_result(SEARCH_SINGLE_MATCH, SANTI)
        assert outcome == Found(url=SANTI_URL, title="三体")

    def test_two_matches_author_disambiguates(self) -> None:
        """The candidate by the expected author wins."""
        outcome = parse_search_result(SEARCH_TWO_MATCHES_ONE_AUTHOR, SANTI)
        assert outcome == Found(url=SANTI_URL, title="三体")

    def test_two_matches_other_authors_uncertain(self) -> None:
        """Two title matches by other authors are Uncertain with a search URL."""
        outcome = parse_search_result(SEARCH_TWO_MATCHES_OTHER_AUTHORS, SANTI)
        assert isinstance(outcome, Uncertain)
        assert outcome.search_url

    def test_no_author_query_single_match(self) -> None:
        """Without a query author, a single title match by anyone is Found."""
        payload = search_payload(book_item("三体", "王五", 20000002))
        outcome = parse_search_result(payload, Query(title="三体"))
        assert outcome == Found(
            url="https://m.zhangyue.com/detail/20000002?p2=104000", title="三体"
        )

    def test_zero_detail_links_not_found(self) -> None:
        """A response without detail links is NotFound."""
        assert parse_search_result(SEARCH_NO_DETAIL_LINKS, SANTI) == NotFound()

    def test_no_title_match_not_found(self) -> None:
        """Results that share no title with the query are NotFound."""
        assert parse_search_result(SEARCH_NO_TITLE_MATCH, SANTI) == NotFound()

    def test_badged_match_found(self) -> None:
        """A badged, subtitled result still matches and keeps its display name."""
        outcome = parse_search_result(SEARCH_BADGED_MATCH, SANTI)
        assert isinstance(outcome, Found)
        assert outcome.title == "[精品]三体（典藏版）：地球往事"

    def test_escaped_payload_found(self) -> None:
        """A payload with escaped slashes parses like any other."""
        outcome = parse_search_result(SEARCH_ESCAPED_SLASHES, SANTI)
        assert outcome == Found(url="https://m.zhangyue.com/detail/11461467", title="三体")

    def test_raw_html_payload_found(self) -> None:
        """The raw HTML fallback still produces a match."""
        outcome = parse_search_result(SEARCH_RAW_HTML, SANTI)
        assert isinstance(outcome, Found)

    def test_json_without_html_not_found(self) -> None:
        """A JSON envelope without html degrades to NotFound, not an error."""
        assert parse_search_result(SEARCH_JSON_WITHOUT_HTML, SANTI) == NotFound()
