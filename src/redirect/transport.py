"""Transports that send a single request and return its response.

The redirect policy never talks to the network itself. It calls a
transport once per hop:

- HttpxTransport sends requests through an httpx client with its own
  redirect handling switched off
- StubTransport answers from an in-memory route table and records every
  request, for tests and offline runs
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from types import TracebackType
from typing import Protocol
from urllib.parse import urlsplit

import httpx
import structlog

from src.redirect.models import HttpMethod, Request, Response


logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 30.0


class Transport(Protocol):
    """Sends one request and returns its response."""

    def __call__(self, request: Request) -> Response:
        """Send a request.

        Args:
            request: Request to send.

        Returns:
            Response from the server.
        """
        ...


class HttpxTransport:
    """Transport backed by an httpx client.

    Redirects are never followed by httpx here; the policy decides.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Client to send with. A new one is created and owned
                by this transport if None.
            timeout: Timeout in seconds for an owned client.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._log = logger.bind(component="redirect_transport")

    def __call__(self, request: Request) -> Response:
        """Send a request through httpx.

        Args:
            request: Request to send.

        Returns:
            Response built from the httpx response.

        Raises:
            httpx.HTTPError: On any transport failure, unchanged.
        """
        response = self._client.request(
            request.method.value,
            request.url,
            headers=request.headers,
            content=request.body,
            follow_redirects=False,
        )
        self._log.debug(
            "transport_response",
            method=request.method.value,
            status_code=response.status_code,
            bytes=len(response.content),
        )
        return Response(
            status_code=response.status_code,
            url=str(response.request.url),
            headers=dict(response.headers),
            body=response.content,
        )

    def close(self) -> None:
        """Close the client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class NoRouteError(Exception):
    """Raised when a stub transport has no route for a request."""

    def __init__(self, method: HttpMethod, path: str) -> None:
        """Initialize the error.

        Args:
            method: Requested method.
            path: Requested path.
        """
        self.method = method
        self.path = path
        super().__init__(f"No stub registered for {method.value} {path}")


RouteHandler = Callable[[Request], Response]


@dataclass
class StubTransport:
    """In-memory transport answering from a route table.

    Routes are keyed by method and URL path. Every request received is
    appended to ``requests``.
    """

    base_url: str = "http://stub.test"
    routes: dict[tuple[HttpMethod, str], RouteHandler] = field(default_factory=dict)
    requests: list[Request] = field(default_factory=list)

    def add(self, method: HttpMethod | str, path: str, handler: RouteHandler) -> None:
        """Register a handler for a route.

        Args:
            method: HTTP method.
            path: URL path, starting with ``/``.
            handler: Callable building the response.
        """
        self.routes[(HttpMethod(method.upper()), path)] = handler

    def respond(
        self,
        method: HttpMethod | str,
        path: str,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        body: bytes | str = b"",
    ) -> None:
        """Register a fixed response for a route.

        Args:
            method: HTTP method.
            path: URL path.
            status_code: Status to return.
            headers: Headers to return.
            body: Body to return.
        """
        fixed_headers = dict(headers or {})

        def handler(request: Request) -> Response:
            return Response(
                status_code=status_code,
                url=request.url,
                headers=fixed_headers,
                body=body,
            )

        self.add(method, path, handler)

    def url(self, path: str) -> str:
        """Build an absolute URL for a path on the stub origin."""
        return f"{self.base_url}{path}"

    def __call__(self, request: Request) -> Response:
        """Answer a request from the route table.

        Args:
            request: Request to answer.

        Returns:
            Response from the matching handler.

        Raises:
            NoRouteError: If no route matches.
        """
        self.requests.append(request)
        path = urlsplit(request.url).path or "/"
        handler = self.routes.get((request.method, path))
        if handler is None:
            raise NoRouteError(request.method, path)
        return handler(request)

    @property
    def call_count(self) -> int:
        """Number of requests received."""
        return len(self.requests)

    @property
    def last_request(self) -> Request | None:
        """Most recent request received, if any."""
        return self.requests[-1] if self.requests else None
