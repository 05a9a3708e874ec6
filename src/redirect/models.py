"""Request and response models for the redirect layer."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.redirect.constants import HEADER_LOCATION, REDIRECT_STATUS_CODES


class HttpMethod(str, Enum):
    """HTTP verbs understood by the redirect layer.

    GET, HEAD and OPTIONS are safe methods: no redirect rule ever
    rewrites them.
    """

    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def is_safe(self) -> bool:
        """Check if the method is GET, HEAD or OPTIONS."""
        return self in SAFE_METHODS


SAFE_METHODS = frozenset({HttpMethod.GET, HttpMethod.HEAD, HttpMethod.OPTIONS})


def _find_header(headers: dict[str, str], name: str) -> str | None:
    """Look up a header value ignoring the case of the name."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


class Request(BaseModel):
    """A single outgoing HTTP request.

    Requests are immutable. Every hop of a redirect chain gets a new
    Request built from the previous one, so each hop can be inspected
    and replayed on its own.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod = Field(default=HttpMethod.GET, description="HTTP verb")
    url: Annotated[str, Field(min_length=1, description="Absolute target URL")]
    headers: dict[str, str] = Field(
        default_factory=dict, description="Ordered request headers"
    )
    body: bytes | None = Field(default=None, description="Opaque request body")

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        """Accept lowercase verb strings."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("body", mode="before")
    @classmethod
    def encode_body(cls, v: object) -> object:
        """Encode text bodies as UTF-8."""
        if isinstance(v, str):
            return v.encode("utf-8")
        return v

    def header(self, name: str) -> str | None:
        """Get a header value by case-insensitive name.

        Args:
            name: Header name.

        Returns:
            Header value, or None if absent.
        """
        return _find_header(self.headers, name)

    def has_header(self, name: str) -> bool:
        """Check if a header is present (case-insensitive)."""
        return self.header(name) is not None

    def with_url(self, url: str) -> "Request":
        """Return a copy targeting another URL."""
        return self.model_copy(update={"url": url, "headers": dict(self.headers)})

    def with_method(self, method: HttpMethod) -> "Request":
        """Return a copy using another verb."""
        return self.model_copy(update={"method": method, "headers": dict(self.headers)})

    def with_body(self, body: bytes | None) -> "Request":
        """Return a copy carrying another body."""
        return self.model_copy(update={"body": body, "headers": dict(self.headers)})

    def with_header(self, name: str, value: str) -> "Request":
        """Return a copy with a header set.

        An existing header with the same name in any case is replaced
        in place, keeping the header order.

        Args:
            name: Header name.
            value: Header value.

        Returns:
            New Request with the header set.
        """
        lowered = name.lower()
        headers: dict[str, str] = {}
        replaced = False
        for key, existing in self.headers.items():
            if key.lower() == lowered:
                if not replaced:
                    headers[name] = value
                    replaced = True
                continue
            headers[key] = existing
        if not replaced:
            headers[name] = value
        return self.model_copy(update={"headers": headers})

    def without_headers(self, names: frozenset[str] | set[str]) -> "Request":
        """Return a copy with the named headers removed.

        Args:
            names: Lowercase header names to drop.

        Returns:
            New Request without those headers.
        """
        headers = {k: v for k, v in self.headers.items() if k.lower() not in names}
        return self.model_copy(update={"headers": headers})


class Response(BaseModel):
    """A response produced by the transport.

    Header lookup is case-insensitive. Responses are never modified by
    the redirect layer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(ge=100, le=599, description="HTTP status code")
    url: Annotated[str, Field(min_length=1, description="URL that produced it")]
    headers: dict[str, str] = Field(
        default_factory=dict, description="Response headers"
    )
    body: bytes = Field(default=b"", description="Response body")

    @field_validator("body", mode="before")
    @classmethod
    def encode_body(cls, v: object) -> object:
        """Encode text bodies as UTF-8 and treat None as empty."""
        if v is None:
            return b""
        if isinstance(v, str):
            return v.encode("utf-8")
        return v

    def header(self, name: str) -> str | None:
        """Get a header value by case-insensitive name.

        Args:
            name: Header name.

        Returns:
            Header value, or None if absent.
        """
        return _find_header(self.headers, name)

    def has_header(self, name: str) -> bool:
        """Check if a header is present (case-insensitive)."""
        return self.header(name) is not None

    @property
    def location(self) -> str | None:
        """Get the Location header, if any."""
        return self.header(HEADER_LOCATION)

    @property
    def is_redirect_status(self) -> bool:
        """Check if the status code is one the layer follows."""
        return self.status_code in REDIRECT_STATUS_CODES

    @property
    def text(self) -> str:
        """Decode the body as UTF-8."""
        return self.body.decode("utf-8", errors="replace")
