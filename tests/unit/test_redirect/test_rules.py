"""Unit tests for the per-status redirect rules."""

import pytest

from src.redirect.models import HttpMethod, Request
from src.redirect.rules import STATUS_RULES, RedirectRule, rule_for_status


@pytest.fixture
def post() -> Request:
    """Create a POST request with a body."""
    return Request(
        method="POST",
        url="http://example.com/form",
        headers={"Content-Type": "text/plain", "X-Trace": "abc"},
        body=b"payload",
    )


class TestRuleForStatus:
    """Tests for the status to rule table."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [
            (301, RedirectRule.FORCE_GET_DROP_BODY),
            (302, RedirectRule.PRESERVE_IF_COMPLIANT),
            (303, RedirectRule.FORCE_GET_DROP_BODY),
            (307, RedirectRule.ALWAYS_PRESERVE),
            (200, RedirectRule.NEVER_REDIRECT),
            (304, RedirectRule.NEVER_REDIRECT),
            (308, RedirectRule.NEVER_REDIRECT),
        ],
    )
    def test_mapping(self, status_code: int, expected: RedirectRule) -> None:
        """Each status maps to one rule."""
        assert rule_for_status(status_code) == expected

    @pytest.mark.unit
    def test_table_covers_redirect_statuses(self) -> None:
        """The table covers exactly the followed statuses."""
        assert set(STATUS_RULES) == {301, 302, 303, 307}


class TestPreserves:
    """Tests for the replay decision."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("rule", "default", "compliant"),
        [
            (RedirectRule.FORCE_GET_DROP_BODY, False, False),
            (RedirectRule.PRESERVE_IF_COMPLIANT, False, True),
            (RedirectRule.ALWAYS_PRESERVE, True, True),
            (RedirectRule.NEVER_REDIRECT, False, False),
        ],
    )
    def test_preserves(self, rule: RedirectRule, default: bool, compliant: bool) -> None:
        """Replay depends on the rule and the compliance flag."""
        assert rule.preserves(standards_compliant=False) is default
        assert rule.preserves(standards_compliant=True) is compliant


class TestApply:
    """Tests for request transformation."""

    @pytest.mark.unit
    def test_force_get_drops_body_and_body_headers(self, post: Request) -> None:
        """Unsafe requests become a body-less GET."""
        result = RedirectRule.FORCE_GET_DROP_BODY.apply(post, standards_compliant=False)

        assert result.method == HttpMethod.GET
        assert result.body is None
        assert result.headers == {"X-Trace": "abc"}
        assert result.url == post.url

    @pytest.mark.unit
    def test_preserve_if_compliant(self, post: Request) -> None:
        """302 replays only in compliant mode."""
        rule = RedirectRule.PRESERVE_IF_COMPLIANT

        assert rule.apply(post, standards_compliant=True) == post
        assert rule.apply(post, standards_compliant=False).method == HttpMethod.GET

    @pytest.mark.unit
    def test_always_preserve(self, post: Request) -> None:
        """307 replays in both modes."""
        assert RedirectRule.ALWAYS_PRESERVE.apply(post, standards_compliant=False) == post

    @pytest.mark.unit
    @pytest.mark.parametrize("method", [HttpMethod.GET, HttpMethod.HEAD, HttpMethod.OPTIONS])
    def test_safe_methods_never_change(self, method: HttpMethod) -> None:
        """GET, HEAD and OPTIONS pass every rule untouched."""
        request = Request(method=method, url="http://example.com/", headers={"A": "1"})

        result = RedirectRule.FORCE_GET_DROP_BODY.apply(request, standards_compliant=False)

        assert result == request

    @pytest.mark.unit
    def test_never_redirect_rejects_apply(self, post: Request) -> None:
        """Final responses have no next request."""
        with pytest.raises(ValueError, match="NEVER_REDIRECT"):
            RedirectRule.NEVER_REDIRECT.apply(post, standards_compliant=False)

    @pytest.mark.unit
    def test_input_request_untouched(self, post: Request) -> None:
        """The source request keeps its method and body."""
        RedirectRule.FORCE_GET_DROP_BODY.apply(post, standards_compliant=False)

        assert post.method == HttpMethod.POST
        assert post.body == b"payload"
        assert "Content-Type" in post.headers
