"""Redirect-following policy wrapped around a transport call."""

from urllib.parse import urldefrag, urljoin, urlsplit

import structlog

from src.redirect.config import RedirectConfig
from src.redirect.constants import HEADER_AUTHORIZATION
from src.redirect.context import RedirectContext
from src.redirect.cookies import merge_cookies, parse_cookie_header, serialize_cookies
from src.redirect.errors import RedirectLimitReached
from src.redirect.metrics import RedirectMetrics
from src.redirect.models import Request, Response
from src.redirect.redact import redact_headers, redact_url_credentials
from src.redirect.rules import RedirectRule, rule_for_status
from src.redirect.transport import Transport


logger = structlog.get_logger()


def resolve_location(base_url: str, location: str) -> str:
    """Resolve a Location header against the URL that returned it.

    Absolute locations are returned as they are. The fragment of the
    base URL is never carried over.

    Args:
        base_url: URL of the request that got the redirect.
        location: Location header value.

    Returns:
        Absolute URL of the next hop.
    """
    base, _ = urldefrag(base_url)
    return urljoin(base, location.strip())


def _origin(url: str) -> tuple[str, str | None, int | None]:
    parts = urlsplit(url)
    return parts.scheme.lower(), parts.hostname, parts.port


class RedirectPolicy:
    """Follows redirects around a transport call.

    One policy can serve many concurrent chains: it holds only the
    immutable configuration, and all chain state lives in a
    RedirectContext local to each call.
    """

    def __init__(self, config: RedirectConfig | None = None) -> None:
        """Initialize the policy.

        Args:
            config: Redirect configuration. Defaults apply if None.
        """
        self._config = config or RedirectConfig()
        self._metrics = RedirectMetrics.get_instance()
        self._log = logger.bind(component="redirect")

    @property
    def config(self) -> RedirectConfig:
        """Get the policy configuration."""
        return self._config

    def execute(self, request: Request, transport: Transport) -> Response:
        """Send a request and follow any redirects.

        Args:
            request: Initial request. It is never modified.
            transport: Callable sending a single request.

        Returns:
            First response that is not a followed redirect.

        Raises:
            RedirectLimitReached: If more than ``limit`` redirects are needed.
        """
        return self.follow(request, transport).final_response

    __call__ = execute

    def follow(self, request: Request, transport: Transport) -> RedirectContext:
        """Run a redirect chain and return its final state.

        Errors raised by the transport propagate unchanged.

        Args:
            request: Initial request.
            transport: Callable sending a single request.

        Returns:
            Completed context holding every hop and the final response.

        Raises:
            RedirectLimitReached: If more than ``limit`` redirects are needed.
        """
        context = RedirectContext.start(request)
        while not context.is_complete:
            response = transport(context.request)
            context = self.step(context.record(response), response)

        self._metrics.record_chain()
        self._log.info(
            "redirect_chain_complete",
            url=redact_url_credentials(context.request.url),
            redirects=context.redirects_followed,
            status_code=context.final_response.status_code,
        )
        return context

    def step(self, context: RedirectContext, response: Response) -> RedirectContext:
        """Decide what follows a response.

        Args:
            context: Current chain state.
            response: Response to the current request.

        Returns:
            Context finished with ``response``, or advanced to the next hop.

        Raises:
            RedirectLimitReached: If following would exceed the limit.
        """
        rule = self.classify(context.request, response)
        if rule == RedirectRule.NEVER_REDIRECT:
            return context.finish(response)

        count = context.redirects_followed + 1
        if count > self._config.limit:
            self._metrics.record_limit_reached()
            error = RedirectLimitReached(
                response, self._config.limit, context.redirects_followed
            )
            self._log.warning("redirect_limit_reached", **error.to_dict())
            raise error

        cookies = self._collect_cookies(context.cookies, response)
        next_request = self.build_next_request(context.request, response, rule, cookies)
        self._metrics.record_redirect(response.status_code)
        self._log.debug(
            "redirect_follow",
            status_code=response.status_code,
            rule=rule.value,
            method=next_request.method.value,
            from_url=redact_url_credentials(context.request.url),
            to_url=redact_url_credentials(next_request.url),
            headers=redact_headers(next_request.headers),
            redirect=count,
        )

        if self._config.on_redirect is not None:
            self._config.on_redirect(response, next_request)

        return context.advance(next_request, cookies)

    def classify(self, request: Request, response: Response) -> RedirectRule:
        """Pick the rule for a response.

        A response is followed only when its status has a rule, it carries
        a Location header, and the request method is one that is followed.

        Args:
            request: Request that produced the response.
            response: Response to classify.

        Returns:
            Rule to apply, NEVER_REDIRECT when the response is final.
        """
        rule = rule_for_status(response.status_code)
        if rule == RedirectRule.NEVER_REDIRECT:
            return rule
        if not (response.location or "").strip():
            return RedirectRule.NEVER_REDIRECT
        if request.method not in self._config.follow_methods:
            return RedirectRule.NEVER_REDIRECT
        return rule

    def build_next_request(
        self,
        request: Request,
        response: Response,
        rule: RedirectRule,
        cookies: dict[str, str],
    ) -> Request:
        """Build the request for the next hop.

        Args:
            request: Request that produced the redirect.
            response: Redirect response.
            rule: Rule selected for the response.
            cookies: Accumulated cookies to send.

        Returns:
            New Request; ``request`` is left untouched.
        """
        location = response.location
        if location is None:
            msg = f"Redirect response from {response.url} has no Location header"
            raise ValueError(msg)

        next_request = rule.apply(request, self._config.standards_compliant)
        if next_request.method != request.method:
            self._metrics.record_method_conversion()
            self._log.debug(
                "redirect_method_converted",
                status_code=response.status_code,
                from_method=request.method.value,
                to_method=next_request.method.value,
            )

        next_url = resolve_location(request.url, location)
        next_request = next_request.with_url(next_url)

        if self._config.clear_authorization_header and _origin(request.url) != _origin(
            next_url
        ):
            next_request = next_request.without_headers(
                frozenset({HEADER_AUTHORIZATION.lower()})
            )

        cookie_value = serialize_cookies(cookies)
        if cookie_value is not None:
            self._metrics.record_cookie_injection()
            next_request = next_request.with_header(
                self._config.request_cookie_header, cookie_value
            )

        return next_request

    def wrap(self, transport: Transport) -> Transport:
        """Wrap a transport so every call follows redirects.

        The result is itself a transport and can be wrapped again.

        Args:
            transport: Transport to wrap.

        Returns:
            Callable sending a request through this policy.
        """

        def call(request: Request) -> Response:
            return self.execute(request, transport)

        return call

    def _collect_cookies(
        self, accumulated: dict[str, str], response: Response
    ) -> dict[str, str]:
        """Merge cookies from a redirect response into the carried set.

        Args:
            accumulated: Cookies carried so far.
            response: Redirect response.

        Returns:
            Updated cookie mapping.
        """
        policy = self._config.cookies
        if not policy.enabled:
            return accumulated

        raw = response.header(self._config.response_cookie_header)
        if raw is None:
            return accumulated

        return merge_cookies(accumulated, policy.select(parse_cookie_header(raw)))
