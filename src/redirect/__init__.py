"""Redirect-following policy layer for HTTP clients.

This module decides how an HTTP client follows redirect responses:
- Status dispatch for 301, 302, 303 and 307
- Method and body rewriting per status, with a standards-compliant mode
- Redirect limit enforcement
- Cookie propagation across hops
- Header and body replay
"""

from src.redirect.config import DEFAULT_FOLLOW_METHODS, RedirectConfig
from src.redirect.constants import (
    DEFAULT_REDIRECT_LIMIT,
    DEFAULT_REQUEST_COOKIE_HEADER,
    DEFAULT_RESPONSE_COOKIE_HEADER,
    REDIRECT_STATUS_CODES,
)
from src.redirect.context import RedirectContext, RedirectHop
from src.redirect.cookies import (
    CookieMode,
    CookiePolicy,
    merge_cookies,
    parse_cookie_header,
    serialize_cookies,
)
from src.redirect.errors import RedirectError, RedirectLimitReached
from src.redirect.metrics import RedirectMetrics
from src.redirect.models import HttpMethod, Request, Response
from src.redirect.policy import RedirectPolicy, resolve_location
from src.redirect.redact import redact_headers, redact_url_credentials
from src.redirect.rules import RedirectRule, rule_for_status
from src.redirect.transport import (
    HttpxTransport,
    NoRouteError,
    StubTransport,
    Transport,
)


__all__ = [
    # Policy
    "RedirectPolicy",
    "resolve_location",
    # Config
    "RedirectConfig",
    "DEFAULT_FOLLOW_METHODS",
    # Models
    "HttpMethod",
    "Request",
    "Response",
    "RedirectContext",
    "RedirectHop",
    # Rules
    "RedirectRule",
    "rule_for_status",
    # Cookies
    "CookieMode",
    "CookiePolicy",
    "parse_cookie_header",
    "merge_cookies",
    "serialize_cookies",
    # Errors
    "RedirectError",
    "RedirectLimitReached",
    # Transports
    "Transport",
    "HttpxTransport",
    "StubTransport",
    "NoRouteError",
    # Constants
    "DEFAULT_REDIRECT_LIMIT",
    "DEFAULT_REQUEST_COOKIE_HEADER",
    "DEFAULT_RESPONSE_COOKIE_HEADER",
    "REDIRECT_STATUS_CODES",
    # Metrics
    "RedirectMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
