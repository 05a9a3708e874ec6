"""Configuration model for the redirect layer."""

from collections.abc import Callable
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.redirect.constants import (
    DEFAULT_REDIRECT_LIMIT,
    DEFAULT_REQUEST_COOKIE_HEADER,
    DEFAULT_RESPONSE_COOKIE_HEADER,
)
from src.redirect.cookies import CookiePolicy
from src.redirect.models import HttpMethod, Request, Response
from src.settings.app import AppSettings, get_settings


DEFAULT_FOLLOW_METHODS = frozenset(
    {
        HttpMethod.GET,
        HttpMethod.POST,
        HttpMethod.PUT,
        HttpMethod.PATCH,
        HttpMethod.DELETE,
    }
)

RedirectCallback = Callable[[Response, Request], None]


class RedirectConfig(BaseModel):
    """Configuration for a redirect policy.

    Fixed for the lifetime of the policy that owns it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    limit: Annotated[int, Field(ge=0)] = DEFAULT_REDIRECT_LIMIT
    standards_compliant: bool = Field(
        default=False,
        description="If True, 302 replays method and body as RFC 7231 allows",
    )
    cookies: CookiePolicy = Field(default_factory=CookiePolicy)
    follow_methods: frozenset[HttpMethod] = Field(
        default=DEFAULT_FOLLOW_METHODS,
        description="Request methods whose redirects are followed",
    )
    clear_authorization_header: bool = Field(
        default=False,
        description="Drop Authorization when a redirect changes origin",
    )
    response_cookie_header: Annotated[str, Field(min_length=1)] = (
        DEFAULT_RESPONSE_COOKIE_HEADER
    )
    request_cookie_header: Annotated[str, Field(min_length=1)] = (
        DEFAULT_REQUEST_COOKIE_HEADER
    )
    on_redirect: RedirectCallback | None = Field(
        default=None,
        description="Called with (response, next_request) before each hop",
    )

    @field_validator("cookies", mode="before")
    @classmethod
    def coerce_cookies(cls, v: object) -> object:
        """Accept ``"all"``, ``"disabled"``, None, or a list of names."""
        if v is None:
            return CookiePolicy.disabled()
        if isinstance(v, str):
            return CookiePolicy.parse(v)
        if isinstance(v, list | tuple):
            return CookiePolicy.explicit(list(v))
        return v

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "RedirectConfig":
        """Build a configuration from environment settings.

        Args:
            settings: Settings to read. Loaded from the environment if None.

        Returns:
            RedirectConfig matching the settings.
        """
        settings = settings or get_settings()
        return cls(
            limit=settings.redirect_limit,
            standards_compliant=settings.redirect_standards_compliant,
            cookies=CookiePolicy.parse(settings.redirect_cookies),
            clear_authorization_header=settings.redirect_clear_authorization,
        )
