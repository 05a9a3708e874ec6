"""Error types for the redirect layer."""

from src.redirect.models import Response


class RedirectError(Exception):
    """Base exception for redirect policy errors.

    Provides structured error information for logging.
    """

    def __init__(self, message: str, response: Response) -> None:
        """Initialize the redirect error.

        Args:
            message: Human-readable error message.
            response: Response being handled when the error occurred.
        """
        super().__init__(message)
        self.message = message
        self.response = response

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": type(self).__name__,
            "message": self.message,
            "status_code": self.response.status_code,
            "url": self.response.url,
            "location": self.response.location,
        }


class RedirectLimitReached(RedirectError):
    """Raised when a redirect chain is longer than the configured limit.

    The response that would have triggered the next hop is kept on the
    error so callers can inspect it.
    """

    def __init__(self, response: Response, limit: int, redirects_followed: int) -> None:
        """Initialize the limit error.

        Args:
            response: Last redirect response received.
            limit: Configured redirect limit.
            redirects_followed: Redirects actually followed before the refused one.
        """
        self.limit = limit
        self.redirects_followed = redirects_followed
        super().__init__(
            f"Too many redirects: limit is {limit}, "
            f"refused redirect to {response.location} from {response.url} "
            f"after {redirects_followed} redirects",
            response,
        )

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        data = super().to_dict()
        data["limit"] = self.limit
        data["redirects_followed"] = self.redirects_followed
        return data
