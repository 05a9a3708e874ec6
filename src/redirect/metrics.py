"""Metrics collection for the redirect layer."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class RedirectMetrics:
    """Metrics for redirect chains.

    Singleton class that tracks how many chains ran, which redirect
    statuses were followed, and how often the limit was hit.
    """

    redirect_chains_total: int = 0
    redirects_followed_total: dict[int, int] = field(default_factory=dict)
    redirect_method_conversions_total: int = 0
    redirect_cookie_injections_total: int = 0
    redirect_limit_reached_total: int = 0

    _instance: ClassVar["RedirectMetrics | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_instance(cls) -> "RedirectMetrics":
        """Get singleton metrics instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._lock:
            cls._instance = None

    def record_chain(self) -> None:
        """Record a chain that reached a final response."""
        with self._lock:
            self.redirect_chains_total += 1

    def record_redirect(self, status_code: int) -> None:
        """Record a followed redirect.

        Args:
            status_code: Redirect status that was followed.
        """
        with self._lock:
            self.redirects_followed_total[status_code] = (
                self.redirects_followed_total.get(status_code, 0) + 1
            )

    def record_method_conversion(self) -> None:
        """Record a request rewritten to GET."""
        with self._lock:
            self.redirect_method_conversions_total += 1

    def record_cookie_injection(self) -> None:
        """Record a cookie header set on a next hop."""
        with self._lock:
            self.redirect_cookie_injections_total += 1

    def record_limit_reached(self) -> None:
        """Record a chain that exceeded the redirect limit."""
        with self._lock:
            self.redirect_limit_reached_total += 1

    def to_dict(self) -> dict[str, int | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "redirect_chains_total": self.redirect_chains_total,
            "redirects_followed_total": dict(self.redirects_followed_total),
            "redirect_method_conversions_total": self.redirect_method_conversions_total,
            "redirect_cookie_injections_total": self.redirect_cookie_injections_total,
            "redirect_limit_reached_total": self.redirect_limit_reached_total,
        }

    @property
    def redirects_total(self) -> int:
        """Total redirects followed across all statuses."""
        return sum(self.redirects_followed_total.values())
