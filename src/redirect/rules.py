"""Per-status redirect rules.

Each redirect status maps to one named rule. A rule decides whether the
next hop replays the current request or is rewritten to a body-less GET.
"""

from enum import Enum

from src.redirect.constants import (
    BODY_HEADERS,
    HTTP_STATUS_FOUND,
    HTTP_STATUS_MOVED_PERMANENTLY,
    HTTP_STATUS_SEE_OTHER,
    HTTP_STATUS_TEMPORARY_REDIRECT,
)
from src.redirect.models import HttpMethod, Request


class RedirectRule(str, Enum):
    """How a redirect status transforms the next request.

    - FORCE_GET_DROP_BODY: unsafe methods become GET without a body
    - PRESERVE_IF_COMPLIANT: replayed in standards-compliant mode,
      otherwise handled as FORCE_GET_DROP_BODY
    - ALWAYS_PRESERVE: method, body and headers are replayed
    - NEVER_REDIRECT: the response is final
    """

    FORCE_GET_DROP_BODY = "FORCE_GET_DROP_BODY"
    PRESERVE_IF_COMPLIANT = "PRESERVE_IF_COMPLIANT"
    ALWAYS_PRESERVE = "ALWAYS_PRESERVE"
    NEVER_REDIRECT = "NEVER_REDIRECT"

    def preserves(self, standards_compliant: bool) -> bool:
        """Check if the rule replays method and body.

        Args:
            standards_compliant: Whether RFC semantics are enabled.

        Returns:
            True if the current request is replayed unchanged.
        """
        if self == RedirectRule.ALWAYS_PRESERVE:
            return True
        if self == RedirectRule.PRESERVE_IF_COMPLIANT:
            return standards_compliant
        return False

    def apply(self, request: Request, standards_compliant: bool) -> Request:
        """Transform the method and body of a request for the next hop.

        The URL is left alone; the caller points the result at the
        resolved Location.

        Args:
            request: Request that produced the redirect.
            standards_compliant: Whether RFC semantics are enabled.

        Returns:
            Request carrying the next hop's method, body and headers.

        Raises:
            ValueError: If called on NEVER_REDIRECT.
        """
        if self == RedirectRule.NEVER_REDIRECT:
            msg = "NEVER_REDIRECT does not produce a next request"
            raise ValueError(msg)

        if self.preserves(standards_compliant) or request.method.is_safe:
            return request

        return (
            request.with_method(HttpMethod.GET)
            .with_body(None)
            .without_headers(BODY_HEADERS)
        )


STATUS_RULES: dict[int, RedirectRule] = {
    HTTP_STATUS_MOVED_PERMANENTLY: RedirectRule.FORCE_GET_DROP_BODY,
    HTTP_STATUS_FOUND: RedirectRule.PRESERVE_IF_COMPLIANT,
    HTTP_STATUS_SEE_OTHER: RedirectRule.FORCE_GET_DROP_BODY,
    HTTP_STATUS_TEMPORARY_REDIRECT: RedirectRule.ALWAYS_PRESERVE,
}


def rule_for_status(status_code: int) -> RedirectRule:
    """Look up the rule for a status code.

    Args:
        status_code: HTTP status code.

    Returns:
        Matching rule, NEVER_REDIRECT for anything not in the table.
    """
    return STATUS_RULES.get(status_code, RedirectRule.NEVER_REDIRECT)
