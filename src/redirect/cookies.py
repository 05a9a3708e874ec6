"""Cookie propagation across redirect hops.

Only a flat ``name=value; name=value`` string is handled. Cookie
attributes (expiry, domain, path) are not interpreted.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.redirect.constants import COOKIE_JOIN_SEPARATOR, COOKIE_PAIR_SEPARATOR


class CookieMode(str, Enum):
    """Which cookies are carried from a redirect response to the next hop.

    - DISABLED: no cookies are carried
    - ALL: every cookie in the response header is carried
    - EXPLICIT: only the configured cookie names are carried
    """

    DISABLED = "disabled"
    ALL = "all"
    EXPLICIT = "explicit"


class CookiePolicy(BaseModel):
    """Cookie propagation settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: CookieMode = CookieMode.DISABLED
    names: tuple[str, ...] = Field(
        default=(), description="Cookie names carried in EXPLICIT mode"
    )

    @model_validator(mode="after")
    def validate_names(self) -> "CookiePolicy":
        """Ensure names are given exactly when the mode is EXPLICIT."""
        if self.mode == CookieMode.EXPLICIT and not self.names:
            msg = "Explicit cookie mode requires at least one cookie name"
            raise ValueError(msg)
        if self.mode != CookieMode.EXPLICIT and self.names:
            msg = f"Cookie names are only allowed in explicit mode, got {self.mode.value}"
            raise ValueError(msg)
        if any(not name.strip() for name in self.names):
            msg = "Cookie names must not be empty"
            raise ValueError(msg)
        return self

    @classmethod
    def disabled(cls) -> "CookiePolicy":
        """Carry no cookies."""
        return cls()

    @classmethod
    def all(cls) -> "CookiePolicy":
        """Carry every cookie."""
        return cls(mode=CookieMode.ALL)

    @classmethod
    def explicit(cls, names: list[str] | tuple[str, ...]) -> "CookiePolicy":
        """Carry only the named cookies.

        Args:
            names: Cookie names, in the order they should be considered.

        Returns:
            CookiePolicy in EXPLICIT mode.
        """
        return cls(mode=CookieMode.EXPLICIT, names=tuple(names))

    @classmethod
    def parse(cls, value: str) -> "CookiePolicy":
        """Build a policy from a settings string.

        Accepts ``disabled``, ``all``, or a comma-separated list of names.

        Args:
            value: Settings value.

        Returns:
            Matching CookiePolicy.
        """
        text = value.strip()
        if not text or text.lower() == CookieMode.DISABLED.value:
            return cls.disabled()
        if text.lower() == CookieMode.ALL.value:
            return cls.all()
        return cls.explicit([name.strip() for name in text.split(",") if name.strip()])

    @property
    def enabled(self) -> bool:
        """Check if any cookies are carried."""
        return self.mode != CookieMode.DISABLED

    def select(self, pairs: list[tuple[str, str]]) -> list[tuple[str, str]]:
        """Filter parsed pairs according to the mode.

        Args:
            pairs: Parsed (name, value) pairs.

        Returns:
            Pairs to carry forward.
        """
        if self.mode == CookieMode.ALL:
            return pairs
        if self.mode == CookieMode.EXPLICIT:
            allowed = set(self.names)
            return [(name, value) for name, value in pairs if name in allowed]
        return []


def parse_cookie_header(value: str) -> list[tuple[str, str]]:
    """Parse a flat cookie string into pairs.

    Segments are split on ``;`` and trimmed. Empty segments and segments
    without a name are skipped. A segment without ``=`` is kept with an
    empty value.

    Args:
        value: Raw header value.

    Returns:
        List of (name, value) pairs in header order.
    """
    pairs: list[tuple[str, str]] = []
    for segment in value.split(COOKIE_PAIR_SEPARATOR):
        segment = segment.strip()
        if not segment:
            continue
        name, _, cookie_value = segment.partition("=")
        name = name.strip()
        if not name:
            continue
        pairs.append((name, cookie_value.strip()))
    return pairs


def merge_cookies(
    accumulated: dict[str, str],
    pairs: list[tuple[str, str]],
) -> dict[str, str]:
    """Merge pairs into an accumulated mapping.

    Later values overwrite earlier ones for the same name. The input
    mapping is left untouched.

    Args:
        accumulated: Cookies carried so far.
        pairs: New (name, value) pairs.

    Returns:
        New merged mapping.
    """
    merged = dict(accumulated)
    for name, value in pairs:
        merged[name] = value
    return merged


def serialize_cookies(cookies: dict[str, str]) -> str | None:
    """Serialize a cookie mapping back to a header value.

    Args:
        cookies: Cookie mapping.

    Returns:
        ``name=value`` pairs joined by ``"; "``, or None when empty.
    """
    if not cookies:
        return None
    return COOKIE_JOIN_SEPARATOR.join(f"{name}={value}" for name, value in cookies.items())
