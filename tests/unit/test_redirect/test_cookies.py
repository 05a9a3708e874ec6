"""Unit tests for cookie parsing and selection."""

import pytest
from pydantic import ValidationError

from src.redirect.cookies import (
    CookieMode,
    CookiePolicy,
    merge_cookies,
    parse_cookie_header,
    serialize_cookies,
)


COOKIES = "cookie1=abcdefg; cookie2=1234567; cookie3=awesome"


class TestParseCookieHeader:
    """Tests for flat cookie string parsing."""

    @pytest.mark.unit
    def test_parses_pairs_in_order(self) -> None:
        """Pairs come back in header order."""
        assert parse_cookie_header(COOKIES) == [
            ("cookie1", "abcdefg"),
            ("cookie2", "1234567"),
            ("cookie3", "awesome"),
        ]

    @pytest.mark.unit
    def test_trims_whitespace(self) -> None:
        """Whitespace around pairs, names and values is dropped."""
        assert parse_cookie_header("  a = 1 ;b=2  ") == [("a", "1"), ("b", "2")]

    @pytest.mark.unit
    def test_skips_empty_segments(self) -> None:
        """Empty segments and nameless pairs are ignored."""
        assert parse_cookie_header(";; a=1; =orphan; ;") == [("a", "1")]

    @pytest.mark.unit
    def test_pair_without_equals(self) -> None:
        """A bare name gets an empty value."""
        assert parse_cookie_header("flag; a=1") == [("flag", ""), ("a", "1")]

    @pytest.mark.unit
    def test_value_may_contain_equals(self) -> None:
        """Only the first ``=`` splits name and value."""
        assert parse_cookie_header("token=abc==") == [("token", "abc==")]


class TestMergeAndSerialize:
    """Tests for cookie accumulation."""

    @pytest.mark.unit
    def test_later_values_overwrite(self) -> None:
        """The last value for a name wins."""
        merged = merge_cookies({"a": "1", "b": "2"}, [("a", "3"), ("c", "4"), ("c", "5")])

        assert merged == {"a": "3", "b": "2", "c": "5"}

    @pytest.mark.unit
    def test_merge_leaves_input_alone(self) -> None:
        """The accumulated mapping is not changed in place."""
        accumulated = {"a": "1"}

        merge_cookies(accumulated, [("a", "2")])

        assert accumulated == {"a": "1"}

    @pytest.mark.unit
    def test_serialize_round_trips_header(self) -> None:
        """Serializing parsed pairs gives back the same string."""
        assert serialize_cookies(dict(parse_cookie_header(COOKIES))) == COOKIES

    @pytest.mark.unit
    def test_serialize_empty_is_none(self) -> None:
        """No cookies means no header value."""
        assert serialize_cookies({}) is None


class TestCookiePolicy:
    """Tests for CookiePolicy."""

    @pytest.mark.unit
    def test_default_is_disabled(self) -> None:
        """Cookies are not carried by default."""
        policy = CookiePolicy()

        assert policy.mode == CookieMode.DISABLED
        assert policy.enabled is False
        assert policy.select([("a", "1")]) == []

    @pytest.mark.unit
    def test_all_selects_everything(self) -> None:
        """ALL mode keeps every pair."""
        pairs = parse_cookie_header(COOKIES)

        assert CookiePolicy.all().select(pairs) == pairs

    @pytest.mark.unit
    def test_explicit_selects_names(self) -> None:
        """EXPLICIT mode keeps only configured names."""
        policy = CookiePolicy.explicit(["cookie2", "missing"])

        assert policy.select(parse_cookie_header(COOKIES)) == [("cookie2", "1234567")]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("", CookiePolicy()),
            ("disabled", CookiePolicy()),
            ("ALL", CookiePolicy(mode=CookieMode.ALL)),
            ("a, b", CookiePolicy(mode=CookieMode.EXPLICIT, names=("a", "b"))),
        ],
    )
    def test_parse(self, value: str, expected: CookiePolicy) -> None:
        """Settings strings map to policies."""
        assert CookiePolicy.parse(value) == expected

    @pytest.mark.unit
    def test_explicit_requires_names(self) -> None:
        """EXPLICIT mode without names is rejected."""
        with pytest.raises(ValidationError):
            CookiePolicy(mode=CookieMode.EXPLICIT)

    @pytest.mark.unit
    def test_names_require_explicit_mode(self) -> None:
        """Names are rejected in other modes."""
        with pytest.raises(ValidationError):
            CookiePolicy(mode=CookieMode.ALL, names=("a",))

    @pytest.mark.unit
    def test_frozen(self) -> None:
        """Policies are immutable."""
        policy = CookiePolicy.all()

        with pytest.raises(ValidationError):
            policy.mode = CookieMode.DISABLED  # type: ignore[misc]
