"""Loop state threaded through a redirect chain."""

from pydantic import BaseModel, ConfigDict, Field

from src.redirect.models import Request, Response


class RedirectHop(BaseModel):
    """One transport call and the response it returned."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    request: Request
    response: Response


class RedirectContext(BaseModel):
    """Immutable state of a redirect chain.

    Every step returns a new context instead of changing this one, so a
    chain can be inspected at any point.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    request: Request = Field(description="Request for the current hop")
    redirects_followed: int = Field(default=0, ge=0)
    cookies: dict[str, str] = Field(
        default_factory=dict, description="Cookies accumulated so far"
    )
    hops: tuple[RedirectHop, ...] = Field(default=())
    response: Response | None = Field(
        default=None, description="Final response once the chain ends"
    )

    @classmethod
    def start(cls, request: Request) -> "RedirectContext":
        """Create the context for a new chain."""
        return cls(request=request)

    @property
    def is_complete(self) -> bool:
        """Check if a final response has been reached."""
        return self.response is not None

    @property
    def final_response(self) -> Response:
        """Get the final response.

        Raises:
            RuntimeError: If the chain has not finished yet.
        """
        if self.response is None:
            msg = "Redirect chain has not reached a final response"
            raise RuntimeError(msg)
        return self.response

    @property
    def urls(self) -> list[str]:
        """URLs requested so far, in order."""
        return [hop.request.url for hop in self.hops]

    def record(self, response: Response) -> "RedirectContext":
        """Return a context with a completed hop appended.

        Args:
            response: Response to the current request.

        Returns:
            New context.
        """
        hop = RedirectHop(request=self.request, response=response)
        return self.model_copy(update={"hops": (*self.hops, hop)})

    def advance(self, request: Request, cookies: dict[str, str]) -> "RedirectContext":
        """Return a context pointing at the next hop.

        Args:
            request: Request for the next hop.
            cookies: Accumulated cookies after this hop.

        Returns:
            New context with the redirect counted.
        """
        return self.model_copy(
            update={
                "request": request,
                "cookies": cookies,
                "redirects_followed": self.redirects_followed + 1,
            }
        )

    def finish(self, response: Response) -> "RedirectContext":
        """Return a context holding the final response."""
        return self.model_copy(update={"response": response})
