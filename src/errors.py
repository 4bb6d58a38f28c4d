"""Application exceptions raised across the scrape and generation pipeline."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base error carrying a caller-facing message and structured details."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dict for logging and JSON responses."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class FetchError(AppError):
    """The page could not be retrieved (network failure or non-success status)."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message, details={"url": url, "status_code": status_code})


class PostGenerationError(AppError):
    """The LLM did not return usable post drafts."""
